"""Update models for full-replace edits."""

from pydantic import Field

from src.domain.create_models import KeyCreate, TaskCreate, UserAccountCreate


class UserAccountUpdate(UserAccountCreate):
    """Replacement payload for every account field except the ID."""


class KeyUpdate(KeyCreate):
    """Replacement payload for a key.

    The inventory does not check that ``status`` and ``assigned_to`` agree.
    """

    assigned_to: str | None = Field(default=None, description="Account ID of the holder, if any")
    created_date: str | None = Field(default=None, description="Registration date; kept when omitted")


class TaskUpdate(TaskCreate):
    """Replacement payload for every task field except the ID and status."""
