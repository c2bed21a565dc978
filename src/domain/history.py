"""Key history domain models for the custody audit trail."""

from enum import StrEnum

from pydantic import BaseModel, Field


class KeyAction(StrEnum):
    """Custody event recorded in the key history."""

    CHECKOUT = "checkout"
    RETURN = "return"


class KeyHistoryEntry(BaseModel):
    """Key history entry data transfer object.

    Key number and staff name are snapshots taken when the event happened.
    """

    id: str = Field(..., description="Unique entry ID")
    key_id: str = Field(..., description="ID of the key that moved")
    key_number: str = Field(..., description="Key number at event time")
    action: KeyAction = Field(..., description="checkout or return")
    staff_id: str = Field(..., description="Account ID of the holder")
    staff_name: str = Field(..., description="Holder display name at event time")
    timestamp: str = Field(..., description="When the event occurred (ISO format)")
