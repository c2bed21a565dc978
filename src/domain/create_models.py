"""Pydantic models for creating records in the custody store."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.domain.key import KeyStatus
from src.domain.user import UserRole


def _require_text(v: str) -> str:
    """Strip surrounding whitespace and reject blank values."""
    v = v.strip()
    if not v:
        raise ValueError("Field cannot be blank")
    return v


class UserAccountCreate(BaseModel):
    """Pydantic model for creating a user account."""

    username: str = Field(..., description="Login name")
    password: str = Field(..., description="Password")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Contact email")
    phone: str = Field(..., description="Contact phone number")
    role: UserRole = Field(..., description="supervisor or staff")

    @field_validator("username", "name", "email", "phone")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate text fields are not blank."""
        return _require_text(v)

    @field_validator("password")
    @classmethod
    def validate_password_not_blank(cls, v: str) -> str:
        """Validate password is not blank (stored exactly as given)."""
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class KeyCreate(BaseModel):
    """Pydantic model for registering a key."""

    key_number: str = Field(..., description="Key number (e.g., 'KEY-003')")
    description: str = Field(..., description="What the key opens")
    status: KeyStatus = Field(default=KeyStatus.AVAILABLE, description="Initial status")

    @field_validator("key_number", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate text fields are not blank."""
        return _require_text(v)


class TodoItemInput(BaseModel):
    """Checklist entry as submitted by a caller.

    Items without an ID are new; items with an ID keep their identity on update.
    """

    id: str | None = Field(default=None, description="Existing item ID, if any")
    text: str = Field(..., description="What needs to be done")
    completed: bool = Field(default=False, description="Whether the item is ticked off")


def _coerce_todo_items(v: Any) -> Any:
    """Accept plain strings for checklist items and drop blank entries."""
    if not isinstance(v, list):
        return v
    items = []
    for item in v:
        if isinstance(item, str):
            item = {"text": item}
        if isinstance(item, dict) and not str(item.get("text", "")).strip():
            continue
        items.append(item)
    return items


class TaskCreate(BaseModel):
    """Pydantic model for creating a task.

    Display names are resolved by the engine and cannot be supplied here.
    """

    task_name: str = Field(..., description="Task title")
    assigned_to_id: str = Field(..., description="Account ID of the staff member")
    key_id: str = Field(default="", description="Key chosen from the available pool, empty for none")
    due_date: str = Field(..., description="Due date (YYYY-MM-DD)")
    todo_items: list[TodoItemInput] = Field(default_factory=list, description="Checklist entries")

    @field_validator("task_name", "assigned_to_id", "due_date")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate text fields are not blank."""
        return _require_text(v)

    @field_validator("todo_items", mode="before")
    @classmethod
    def coerce_todo_items(cls, v: Any) -> Any:
        """Allow checklist entries to be given as plain strings."""
        return _coerce_todo_items(v)
