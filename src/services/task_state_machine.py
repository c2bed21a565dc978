"""Pure state transition functions for task lifecycle management."""

import logging
from typing import Any

from src.core.errors import IncompleteChecklistError, InvalidTransitionError
from src.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)


def transition_to_completed(task: Task, *, completed_at: str) -> dict[str, Any]:
    """Build the update that moves a pending task to COMPLETED.

    Args:
        task: Current task record
        completed_at: Completion timestamp (ISO format)

    Returns:
        Fields to write to the task record

    Raises:
        InvalidTransitionError: If the task is not pending
        IncompleteChecklistError: If any checklist item is still open
    """
    # Guard: completion is one-way
    if task.status != TaskStatus.PENDING:
        msg = f"Cannot complete: task {task.id} is in {task.status} state"
        raise InvalidTransitionError(msg)

    # Guard: every checklist item must be ticked off
    if not task.checklist_complete:
        raise IncompleteChecklistError(task.id, [item.id for item in task.todo_items if not item.completed])

    logger.info("Transitioning task %s to COMPLETED", task.id)
    return {"status": TaskStatus.COMPLETED, "completed_at": completed_at}


def toggle_item(task: Task, item_id: str) -> list[dict[str, Any]] | None:
    """Flip the ``completed`` flag of one checklist item.

    Returns:
        The new checklist, or None if the item is not on this task
    """
    if not any(item.id == item_id for item in task.todo_items):
        return None

    return [
        {**item.model_dump(), "completed": not item.completed} if item.id == item_id else item.model_dump()
        for item in task.todo_items
    ]
