"""Domain exceptions and error classification for the custody engine."""

from enum import Enum

from pydantic import BaseModel

from src.core.config import constants


class KeyCustodyError(Exception):
    """Base class for errors reported to the immediate caller."""


class ValidationError(KeyCustodyError):
    """One or more required fields were blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class DuplicateUsernameError(KeyCustodyError):
    """Another account already uses the requested username."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username {username!r} already exists")


class ProtectedAccountError(KeyCustodyError):
    """The default supervisor account cannot be deleted."""

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Account {account_id} is protected and cannot be deleted")


class IncompleteChecklistError(KeyCustodyError):
    """A task was completed while checklist items were still open."""

    def __init__(self, task_id: str, open_items: list[str]) -> None:
        self.task_id = task_id
        self.open_items = open_items
        super().__init__(f"Cannot complete task {task_id}: {len(open_items)} checklist item(s) still open")


class InvalidTransitionError(KeyCustodyError):
    """The requested lifecycle transition is not allowed from the current state."""


class InvalidCredentialsError(KeyCustodyError):
    """No account matches the submitted username, password and role."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Invalid credentials for {username!r}")


class RecordNotFoundError(KeyCustodyError):
    """A record addressed by ID does not exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Record not found in {collection}: {record_id}")


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Input errors
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"

    # Account errors
    ERR_DUPLICATE_USERNAME = "ERR_DUPLICATE_USERNAME"
    ERR_PROTECTED_ACCOUNT = "ERR_PROTECTED_ACCOUNT"
    ERR_INVALID_CREDENTIALS = "ERR_INVALID_CREDENTIALS"

    # Task errors
    ERR_INCOMPLETE_CHECKLIST = "ERR_INCOMPLETE_CHECKLIST"
    ERR_INVALID_STATE_TRANSITION = "ERR_INVALID_STATE_TRANSITION"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity
    status_code: int


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised by an engine operation

    Returns:
        ErrorResponse with code, message, suggestion, severity and HTTP status
    """
    if isinstance(exception, ValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message="Please fill in all fields.",
            suggestion=f"Missing: {', '.join(exception.fields)}.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_UNPROCESSABLE,
        )

    if isinstance(exception, DuplicateUsernameError):
        return ErrorResponse(
            code=ErrorCode.ERR_DUPLICATE_USERNAME,
            message="That username is already taken.",
            suggestion="Choose a different username.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_CONFLICT,
        )

    if isinstance(exception, ProtectedAccountError):
        return ErrorResponse(
            code=ErrorCode.ERR_PROTECTED_ACCOUNT,
            message="The default supervisor account cannot be deleted.",
            suggestion="Delete a different account or edit this one instead.",
            severity=ErrorSeverity.MEDIUM,
            status_code=constants.HTTP_FORBIDDEN,
        )

    if isinstance(exception, InvalidCredentialsError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_CREDENTIALS,
            message="Invalid username, password or role.",
            suggestion="Check your details and the selected role, then try again.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_UNAUTHORIZED,
        )

    if isinstance(exception, IncompleteChecklistError):
        return ErrorResponse(
            code=ErrorCode.ERR_INCOMPLETE_CHECKLIST,
            message="Please complete all checklist items before completing the task.",
            suggestion=f"{len(exception.open_items)} item(s) still open.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_CONFLICT,
        )

    if isinstance(exception, InvalidTransitionError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_STATE_TRANSITION,
            message="This action cannot be performed in the current state.",
            suggestion="Refresh the task list and try again.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_CONFLICT,
        )

    if isinstance(exception, RecordNotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=f"That {exception.collection.rstrip('s')} could not be found.",
            suggestion="It may have been deleted. Refresh and try again.",
            severity=ErrorSeverity.LOW,
            status_code=constants.HTTP_NOT_FOUND,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
        status_code=constants.HTTP_SERVER_ERROR,
    )
