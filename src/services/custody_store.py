"""Custody store: one handle over accounts, keys, tasks, history and reports.

The store owns an in-memory database and wires the components together:

    IdentityStore  <-  KeyInventory  <-  TaskEngine
         ^                  |
         |                  v
    SessionService    CheckoutLedger  ->  ReportLog

Every public method runs inside one re-entrant lock, so a multi-step cascade
(return the old key, check out the new one, rewrite the task) is never
interleaved with another operation when the store is shared by a threaded server.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.core import schema
from src.core.config import settings
from src.core.db_client import InMemoryDatabase, utc_now_iso
from src.core.errors import RecordNotFoundError, ValidationError
from src.core.seed import seed_demo_data
from src.domain.create_models import KeyCreate, TaskCreate, UserAccountCreate
from src.domain.history import KeyHistoryEntry
from src.domain.key import Key
from src.domain.report import GeneratedReport
from src.domain.task import Task
from src.domain.update_models import KeyUpdate, TaskUpdate, UserAccountUpdate
from src.domain.user import UserAccount, UserRole
from src.models.service_models import DashboardSummary, ReportInfo, StaffSummary, StoreSnapshot
from src.services.analytics_service import Analytics
from src.services.identity_service import IdentityStore
from src.services.key_inventory_service import KeyInventory
from src.services.ledger_service import CheckoutLedger
from src.services.report_service import ReportLog
from src.services.session_service import SessionService
from src.services.task_service import TaskEngine


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], data: ModelT | dict[str, Any]) -> ModelT:
    """Validate caller input, reporting blank or missing fields as ValidationError.

    Raises:
        ValidationError: With the names of the offending fields
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ValidationError(fields or ["payload"]) from e


class KeyCustodyStore:
    """Entry point used by the HTTP layer and tests.

    Create one instance per server process or per test.
    """

    def __init__(
        self,
        *,
        db: InMemoryDatabase | None = None,
        seed: bool | None = None,
        record_implicit_returns: bool | None = None,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._lock = threading.RLock()
        self.db = db or InMemoryDatabase(clock=clock)

        if settings.seed_demo_data if seed is None else seed:
            seed_demo_data(self.db)

        self.identity = IdentityStore(self.db)
        self.ledger = CheckoutLedger(self.db)
        self.inventory = KeyInventory(self.db, identity=self.identity, ledger=self.ledger)
        self.tasks = TaskEngine(
            self.db,
            identity=self.identity,
            inventory=self.inventory,
            record_implicit_returns=record_implicit_returns,
        )
        self.session = SessionService(self.identity)
        self.analytics = Analytics(identity=self.identity, inventory=self.inventory, tasks=self.tasks)
        self.reports = ReportLog(self.db, ledger=self.ledger, analytics=self.analytics)

    # ---- accounts ----

    def create_account(self, data: UserAccountCreate | dict[str, Any]) -> UserAccount:
        payload = parse_payload(UserAccountCreate, data)
        with self._lock:
            return self.identity.create_account(payload)

    def update_account(self, account_id: str, data: UserAccountUpdate | dict[str, Any]) -> UserAccount:
        """Edit an account, copying the new name to keys, tasks and the session."""
        payload = parse_payload(UserAccountUpdate, data)
        with self._lock:
            account = self.tasks.update_account(account_id, payload)
            if self.session.refresh(account):
                logger.info("Refreshed session for edited account %s", account_id)
            return account

    def delete_account(self, account_id: str) -> bool:
        """Delete an account and sign it out if it is the current user."""
        with self._lock:
            deleted = self.tasks.delete_account(account_id)
            current = self.session.current_user
            if deleted and current is not None and current.id == account_id:
                self.session.logout()
            return deleted

    def get_account(self, account_id: str) -> UserAccount:
        with self._lock:
            account = self.identity.get_account(account_id)
        if account is None:
            raise RecordNotFoundError(schema.ACCOUNTS, account_id)
        return account

    def list_accounts(self, *, role: UserRole | None = None) -> list[UserAccount]:
        with self._lock:
            return self.identity.list_by_role(role) if role else self.identity.list_accounts()

    def get_staff_accounts(self) -> list[UserAccount]:
        with self._lock:
            return self.identity.get_staff_accounts()

    def validate_login(self, username: str, password: str, role: UserRole) -> UserAccount | None:
        with self._lock:
            return self.identity.validate_login(username, password, role)

    # ---- session ----

    @property
    def current_user(self) -> UserAccount | None:
        return self.session.current_user

    def login(self, *, username: str, password: str, role: UserRole) -> UserAccount | None:
        with self._lock:
            return self.session.login(username=username, password=password, role=role)

    def logout(self) -> None:
        with self._lock:
            self.session.logout()

    # ---- keys ----

    def create_key(self, data: KeyCreate | dict[str, Any]) -> Key:
        payload = parse_payload(KeyCreate, data)
        with self._lock:
            return self.inventory.create_key(payload)

    def update_key(self, key_id: str, data: KeyUpdate | dict[str, Any]) -> Key:
        payload = parse_payload(KeyUpdate, data)
        with self._lock:
            return self.tasks.update_key(key_id, payload)

    def delete_key(self, key_id: str) -> bool:
        with self._lock:
            return self.tasks.delete_key(key_id)

    def assign_key(self, key_id: str, user_id: str) -> Key | None:
        with self._lock:
            return self.inventory.assign(key_id, user_id)

    def unassign_key(self, key_id: str) -> Key | None:
        with self._lock:
            return self.inventory.unassign(key_id)

    def get_key(self, key_id: str) -> Key:
        with self._lock:
            key = self.inventory.get_key(key_id)
        if key is None:
            raise RecordNotFoundError(schema.KEYS, key_id)
        return key

    def list_keys(self) -> list[Key]:
        with self._lock:
            return self.inventory.list_keys()

    def get_available_keys(self) -> list[Key]:
        with self._lock:
            return self.inventory.available_keys()

    # ---- tasks ----

    def create_task(self, data: TaskCreate | dict[str, Any]) -> Task:
        payload = parse_payload(TaskCreate, data)
        with self._lock:
            return self.tasks.create_task(payload)

    def update_task(self, task_id: str, data: TaskUpdate | dict[str, Any]) -> Task:
        payload = parse_payload(TaskUpdate, data)
        with self._lock:
            return self.tasks.update_task(task_id, payload)

    def delete_task(self, task_id: str, *, return_key: bool = True) -> bool:
        with self._lock:
            return self.tasks.delete_task(task_id, return_key=return_key)

    def toggle_todo_item(self, task_id: str, item_id: str) -> Task | None:
        with self._lock:
            return self.tasks.toggle_todo_item(task_id, item_id)

    def complete_task(self, task_id: str) -> Task:
        with self._lock:
            return self.tasks.complete_task(task_id)

    def get_task(self, task_id: str) -> Task:
        with self._lock:
            task = self.tasks.get_task(task_id)
        if task is None:
            raise RecordNotFoundError(schema.TASKS, task_id)
        return task

    def list_tasks(self, *, staff_id: str | None = None) -> list[Task]:
        with self._lock:
            return self.tasks.tasks_for_staff(staff_id) if staff_id else self.tasks.list_tasks()

    # ---- history, reports, statistics ----

    def key_history(self, *, staff_id: str | None = None) -> list[KeyHistoryEntry]:
        """Key history newest first, optionally for one staff member."""
        with self._lock:
            return self.ledger.recent(staff_id=staff_id)

    def generate_report(self, *, name: str | None = None, staff_id: str | None = None) -> GeneratedReport:
        with self._lock:
            return self.reports.generate_key_history_report(name=name, staff_id=staff_id)

    def add_generated_report(self, *, name: str, data: bytes) -> GeneratedReport:
        with self._lock:
            return self.reports.add_generated_report(name=name, data=data)

    def list_reports(self) -> list[ReportInfo]:
        with self._lock:
            return self.reports.list_reports()

    def get_report(self, report_id: str) -> GeneratedReport:
        with self._lock:
            return self.reports.get_report(report_id)

    def dashboard_summary(self) -> DashboardSummary:
        with self._lock:
            return self.analytics.get_dashboard_summary()

    def staff_summary(self, staff_id: str) -> StaffSummary:
        with self._lock:
            return self.analytics.get_staff_summary(staff_id)

    def snapshot(self) -> StoreSnapshot:
        """The four engine collections as they stand right now."""
        with self._lock:
            return StoreSnapshot(
                accounts=self.identity.list_accounts(),
                keys=self.inventory.list_keys(),
                tasks=self.tasks.list_tasks(),
                key_history=self.ledger.entries(),
            )
