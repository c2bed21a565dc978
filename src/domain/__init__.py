"""Domain models and DTOs."""

from src.domain.create_models import KeyCreate, TaskCreate, TodoItemInput, UserAccountCreate
from src.domain.history import KeyAction, KeyHistoryEntry
from src.domain.key import Key, KeyStatus
from src.domain.report import GeneratedReport
from src.domain.task import Task, TaskStatus, TodoItem
from src.domain.update_models import KeyUpdate, TaskUpdate, UserAccountUpdate
from src.domain.user import UserAccount, UserRole


__all__ = [
    "GeneratedReport",
    "Key",
    "KeyAction",
    "KeyCreate",
    "KeyHistoryEntry",
    "KeyStatus",
    "KeyUpdate",
    "Task",
    "TaskCreate",
    "TaskStatus",
    "TaskUpdate",
    "TodoItem",
    "TodoItemInput",
    "UserAccount",
    "UserAccountCreate",
    "UserAccountUpdate",
    "UserRole",
]
