"""User account domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class UserRole(StrEnum):
    """Account role."""

    SUPERVISOR = "supervisor"
    STAFF = "staff"


class UserAccount(BaseModel):
    """User account data transfer object.

    Passwords are stored and compared as plain strings.
    """

    id: str = Field(..., description="Stable account ID assigned at creation")
    username: str = Field(..., description="Login name, unique among all accounts")
    password: str = Field(..., description="Opaque password string")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Contact email")
    phone: str = Field(..., description="Contact phone number")
    role: UserRole = Field(..., description="supervisor or staff")
