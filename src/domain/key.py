"""Key domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class KeyStatus(StrEnum):
    """Custody status of a physical key."""

    AVAILABLE = "Available"
    ASSIGNED = "Assigned"


class Key(BaseModel):
    """Key data transfer object.

    ``assigned_to_name`` is a cached copy of the assignee's display name. It is
    maintained by the key inventory and never supplied by callers.
    """

    id: str = Field(..., description="Unique key ID")
    key_number: str = Field(..., description="Supervisor-facing key number (e.g., 'KEY-001')")
    description: str = Field(default="", description="What the key opens")
    created_date: str = Field(..., description="Registration date (YYYY-MM-DD)")
    status: KeyStatus = Field(default=KeyStatus.AVAILABLE, description="Available or Assigned")
    assigned_to: str | None = Field(default=None, description="Account ID of the current holder")
    assigned_to_name: str | None = Field(default=None, description="Display name of the current holder")

    @property
    def is_assigned(self) -> bool:
        """True when the key is checked out to someone."""
        return self.status == KeyStatus.ASSIGNED
