"""Pydantic models for service layer return types.

These models provide type safety at service boundaries for values that are
computed from several collections rather than stored.
"""

from pydantic import BaseModel, Field

from src.domain.history import KeyHistoryEntry
from src.domain.key import Key
from src.domain.task import Task
from src.domain.user import UserAccount


class DashboardSummary(BaseModel):
    """Headline counts shown on the supervisor dashboard."""

    total_staff: int
    total_keys: int
    available_keys: int
    assigned_keys: int
    active_tasks: int
    completed_tasks: int


class StaffSummary(BaseModel):
    """What one staff member currently holds and has to do."""

    staff_id: str
    staff_name: str
    held_keys: list[Key]
    pending_tasks: list[Task]
    completed_tasks: int


class StoreSnapshot(BaseModel):
    """Externally observable engine state."""

    accounts: list[UserAccount]
    keys: list[Key]
    tasks: list[Task]
    key_history: list[KeyHistoryEntry]


class KeyHistoryReport(BaseModel):
    """Content rendered into a generated key history report."""

    title: str
    generated_at: str
    staff_id: str | None = Field(default=None, description="Set when the report covers one staff member")
    summary: DashboardSummary
    entries: list[KeyHistoryEntry]


class ReportInfo(BaseModel):
    """Generated report metadata without its payload."""

    id: str
    name: str
    generated_at: str
    size_bytes: int
