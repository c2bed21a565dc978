"""Task engine: task records, checklists and key assignment cascades."""

import logging
import secrets
from typing import Any

from src.core import schema
from src.core.config import settings
from src.core.db_client import InMemoryDatabase
from src.core.errors import RecordNotFoundError
from src.core.logging import log_with_context, span
from src.domain.create_models import TaskCreate, TodoItemInput
from src.domain.key import Key
from src.domain.task import Task, TaskStatus
from src.domain.update_models import KeyUpdate, TaskUpdate, UserAccountUpdate
from src.domain.user import UserAccount
from src.services import task_state_machine
from src.services.identity_service import IdentityStore
from src.services.key_inventory_service import KeyInventory


logger = logging.getLogger(__name__)


def _new_item_id() -> str:
    return secrets.token_hex(4)


class TaskEngine:
    """Owns task records and every cascade between tasks, keys and accounts.

    While a task is pending with a key, that key is assigned to the task's
    staff member. The engine keeps this true by calling the key inventory's
    ``assign``/``unassign`` whenever a task is created, edited, completed or
    deleted. Lower layers never read task records.
    """

    def __init__(
        self,
        db: InMemoryDatabase,
        *,
        identity: IdentityStore,
        inventory: KeyInventory,
        record_implicit_returns: bool | None = None,
    ) -> None:
        self._db = db
        self._identity = identity
        self._inventory = inventory
        self._record_implicit_returns = (
            settings.record_implicit_returns if record_implicit_returns is None else record_implicit_returns
        )

    # ---- helpers ----

    def _display_fields(self, *, assigned_to_id: str, key_id: str) -> dict[str, str]:
        """Resolve the staff name and key number shown on a task."""
        account = self._identity.get_account(assigned_to_id)
        key = self._inventory.get_key(key_id)
        return {
            "assigned_to": account.name if account else "",
            "key_number": key.key_number if key else "",
        }

    @staticmethod
    def _checklist(items: list[TodoItemInput]) -> list[dict[str, Any]]:
        return [
            {"id": item.id or _new_item_id(), "text": item.text.strip(), "completed": item.completed}
            for item in items
        ]

    def _return_key(self, key_id: str, holder_id: str) -> None:
        """Return a key only if ``holder_id`` still holds it.

        A task that lost its key to another task must not take it back from
        the winner's assignee.
        """
        key = self._inventory.get_key(key_id)
        if key is None or key.assigned_to is None:
            return
        if key.assigned_to != holder_id:
            log_with_context(
                logger,
                "warning",
                "Key held by someone else, return skipped",
                key_id=key_id,
                holder_id=key.assigned_to,
                task_holder_id=holder_id,
            )
            return
        self._inventory.unassign(key_id)

    def _require_task(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise RecordNotFoundError(schema.TASKS, task_id)
        return task

    # ---- lifecycle ----

    def create_task(self, data: TaskCreate) -> Task:
        """Create a pending task and check its key out to the assignee.

        The key is expected to come from ``available_keys()``. If it has since
        been taken, the task is still stored but the key stays with its holder.

        Returns:
            The created task
        """
        with span("task_engine.create_task"):
            record = self._db.create_record(
                collection=schema.TASKS,
                data={
                    "task_name": data.task_name,
                    "assigned_to_id": data.assigned_to_id,
                    "key_id": data.key_id,
                    "due_date": data.due_date,
                    "todo_items": self._checklist(data.todo_items),
                    "status": TaskStatus.PENDING,
                    "completed_at": None,
                    **self._display_fields(assigned_to_id=data.assigned_to_id, key_id=data.key_id),
                },
            )

            if data.key_id and data.assigned_to_id:
                if self._inventory.assign(data.key_id, data.assigned_to_id) is None:
                    log_with_context(
                        logger,
                        "warning",
                        "Task created but key was not bound",
                        task_id=record["id"],
                        key_id=data.key_id,
                    )

            logger.info("Created task %s for %s", record["id"], data.assigned_to_id)
            return Task.model_validate(record)

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """Replace a task's fields, moving the key binding to match.

        - Key changed: the old key is returned, then the new key is checked out
          to the (possibly new) assignee.
        - Same key, new assignee: the key is returned and checked out again,
          giving one return and one checkout entry in the key history.

        Completed tasks no longer hold a key, so their edits never move keys.
        A key held for another task's assignee is left where it is.

        Raises:
            RecordNotFoundError: If the task does not exist
        """
        with span("task_engine.update_task"):
            existing = self._require_task(task_id)

            if existing.status == TaskStatus.PENDING:
                if existing.key_id != data.key_id:
                    self._return_key(existing.key_id, existing.assigned_to_id)
                    if data.key_id and data.assigned_to_id:
                        self._inventory.assign(data.key_id, data.assigned_to_id)
                elif existing.assigned_to_id != data.assigned_to_id and data.key_id:
                    self._return_key(data.key_id, existing.assigned_to_id)
                    self._inventory.assign(data.key_id, data.assigned_to_id)

            record = self._db.update_record(
                collection=schema.TASKS,
                record_id=task_id,
                data={
                    "task_name": data.task_name,
                    "assigned_to_id": data.assigned_to_id,
                    "key_id": data.key_id,
                    "due_date": data.due_date,
                    "todo_items": self._checklist(data.todo_items),
                    **self._display_fields(assigned_to_id=data.assigned_to_id, key_id=data.key_id),
                },
            )
            logger.info("Updated task %s", task_id)
            return Task.model_validate(record)

    def delete_task(self, task_id: str, *, return_key: bool = True) -> bool:
        """Delete a task, returning its key first unless told not to.

        Returns:
            True if a task was removed, False if the ID was unknown
        """
        with span("task_engine.delete_task"):
            task = self.get_task(task_id)
            if task is None:
                return False

            if return_key and task.key_id:
                self._return_key(task.key_id, task.assigned_to_id)

            self._db.delete_record(collection=schema.TASKS, record_id=task_id)
            logger.info("Deleted task %s", task_id, extra={"return_key": return_key})
            return True

    def toggle_todo_item(self, task_id: str, item_id: str) -> Task | None:
        """Flip one checklist item. Unknown task or item IDs are ignored."""
        with span("task_engine.toggle_todo_item"):
            task = self.get_task(task_id)
            if task is None:
                return None

            items = task_state_machine.toggle_item(task, item_id)
            if items is None:
                return None

            record = self._db.update_record(collection=schema.TASKS, record_id=task_id, data={"todo_items": items})
            return Task.model_validate(record)

    def complete_task(self, task_id: str) -> Task:
        """Complete a task whose checklist is done and return its key.

        Raises:
            RecordNotFoundError: If the task does not exist
            IncompleteChecklistError: If any checklist item is still open
            InvalidTransitionError: If the task is already completed
        """
        with span("task_engine.complete_task"):
            task = self._require_task(task_id)
            update = task_state_machine.transition_to_completed(task, completed_at=self._db.now())

            record = self._db.update_record(collection=schema.TASKS, record_id=task_id, data=update)
            if task.key_id:
                self._return_key(task.key_id, task.assigned_to_id)

            logger.info("Completed task %s", task_id, extra={"key_id": task.key_id})
            return Task.model_validate(record)

    # ---- cascades from other collections ----

    def _cancel_pending_tasks(self, *, filters: dict[str, Any]) -> list[str]:
        """Remove pending tasks matching filters without touching keys."""
        cancelled = []
        pending = self._db.list_records(collection=schema.TASKS, filters={**filters, "status": TaskStatus.PENDING})
        for record in pending:
            self._db.delete_record(collection=schema.TASKS, record_id=record["id"])
            cancelled.append(record["id"])
        return cancelled

    def delete_account(self, account_id: str) -> bool:
        """Delete an account, cancel its pending tasks and release its keys.

        Completed tasks stay as history. Released keys get a return entry only
        when implicit returns are recorded.

        Returns:
            True if an account was removed, False if the ID was unknown

        Raises:
            ProtectedAccountError: If the account is the default supervisor
        """
        with span("task_engine.delete_account"):
            if not self._identity.delete_account(account_id):
                return False

            cancelled = self._cancel_pending_tasks(filters={"assigned_to_id": account_id})
            released = self._inventory.release_keys_held_by(
                account_id, record_return=self._record_implicit_returns
            )
            log_with_context(
                logger,
                "info",
                "Account deletion cascade finished",
                account_id=account_id,
                cancelled_tasks=cancelled,
                released_keys=[key.id for key in released],
            )
            return True

    def delete_key(self, key_id: str) -> bool:
        """Delete a key and cancel the pending tasks bound to it.

        Returns:
            True if a key was removed, False if the ID was unknown
        """
        with span("task_engine.delete_key"):
            if self._inventory.get_key(key_id) is None:
                return False

            cancelled = self._cancel_pending_tasks(filters={"key_id": key_id})
            self._inventory.delete_key(key_id)
            log_with_context(logger, "info", "Key deletion cascade finished", key_id=key_id, cancelled_tasks=cancelled)
            return True

    def _rewrite_tasks(self, *, filters: dict[str, Any], data: dict[str, Any]) -> list[str]:
        """Write ``data`` onto every task matching ``filters`` that differs from it."""
        rewritten = []
        for record in self._db.list_records(collection=schema.TASKS, filters=filters):
            if all(record.get(field) == value for field, value in data.items()):
                continue
            self._db.update_record(collection=schema.TASKS, record_id=record["id"], data=data)
            rewritten.append(record["id"])
        return rewritten

    def update_account(self, account_id: str, data: UserAccountUpdate) -> UserAccount:
        """Edit an account and copy its new name onto held keys and its tasks.

        Raises:
            RecordNotFoundError: If the account does not exist
            DuplicateUsernameError: If the new username belongs to another account
        """
        with span("task_engine.update_account"):
            account = self._identity.update_account(account_id, data)
            keys = self._inventory.rename_holder(account_id, account.name)
            tasks = self._rewrite_tasks(filters={"assigned_to_id": account_id}, data={"assigned_to": account.name})
            if keys or tasks:
                log_with_context(
                    logger,
                    "info",
                    "Account name copied to keys and tasks",
                    account_id=account_id,
                    keys=[key.id for key in keys],
                    tasks=tasks,
                )
            return account

    def update_key(self, key_id: str, data: KeyUpdate) -> Key:
        """Edit a key and copy its new key number onto the tasks bound to it.

        Raises:
            RecordNotFoundError: If the key does not exist
        """
        with span("task_engine.update_key"):
            key = self._inventory.update_key(key_id, data)
            tasks = self._rewrite_tasks(filters={"key_id": key_id}, data={"key_number": key.key_number})
            if tasks:
                log_with_context(logger, "info", "Key number copied to tasks", key_id=key_id, tasks=tasks)
            return key

    # ---- queries ----

    def get_task(self, task_id: str) -> Task | None:
        record = self._db.get_record(collection=schema.TASKS, record_id=task_id)
        return Task.model_validate(record) if record else None

    def list_tasks(self) -> list[Task]:
        return [Task.model_validate(r) for r in self._db.list_records(collection=schema.TASKS)]

    def tasks_for_staff(self, staff_id: str) -> list[Task]:
        """Tasks assigned to one staff member, in insertion order."""
        records = self._db.list_records(collection=schema.TASKS, filters={"assigned_to_id": staff_id})
        return [Task.model_validate(r) for r in records]

    def pending_tasks(self) -> list[Task]:
        records = self._db.list_records(collection=schema.TASKS, filters={"status": TaskStatus.PENDING})
        return [Task.model_validate(r) for r in records]
