"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Task lifecycle state."""

    PENDING = "pending"
    COMPLETED = "completed"


class TodoItem(BaseModel):
    """A checklist entry that must be completed before its task."""

    id: str = Field(..., description="Item ID, unique within its task")
    text: str = Field(..., description="What needs to be done")
    completed: bool = Field(default=False, description="Whether the item has been ticked off")


class Task(BaseModel):
    """Task data transfer object.

    ``assigned_to`` and ``key_number`` are display copies resolved by the task
    engine from ``assigned_to_id`` and ``key_id``.
    """

    id: str = Field(..., description="Unique task ID")
    task_name: str = Field(..., description="Task title")
    assigned_to: str = Field(default="", description="Display name of the assigned staff member")
    assigned_to_id: str = Field(..., description="Account ID of the assigned staff member")
    key_id: str = Field(default="", description="ID of the key bound to this task, empty for none")
    key_number: str = Field(default="", description="Key number of the bound key")
    due_date: str = Field(..., description="Due date (YYYY-MM-DD)")
    todo_items: list[TodoItem] = Field(default_factory=list, description="Ordered checklist")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle state")
    completed_at: str | None = Field(default=None, description="When the task was completed (ISO format)")

    @property
    def checklist_complete(self) -> bool:
        """True when every checklist item is completed (vacuously true when empty)."""
        return all(item.completed for item in self.todo_items)
