"""Unit tests for error classification utilities."""

import pytest

from src.core.errors import (
    DuplicateUsernameError,
    ErrorCode,
    ErrorSeverity,
    IncompleteChecklistError,
    InvalidCredentialsError,
    InvalidTransitionError,
    KeyCustodyError,
    ProtectedAccountError,
    RecordNotFoundError,
    ValidationError,
    classify_error_with_response,
)


@pytest.mark.unit
class TestDomainErrors:
    """Tests for domain exception messages and attributes."""

    def test_all_errors_share_base(self):
        """Test every domain error can be caught as KeyCustodyError."""
        errors = [
            ValidationError(["name"]),
            DuplicateUsernameError("john"),
            ProtectedAccountError("sv-default"),
            InvalidCredentialsError("john"),
            IncompleteChecklistError("t1", ["a"]),
            InvalidTransitionError("nope"),
            RecordNotFoundError("keys", "k1"),
        ]

        assert all(isinstance(e, KeyCustodyError) for e in errors)

    def test_validation_error_lists_fields(self):
        """Test the message names the missing fields."""
        error = ValidationError(["email", "phone"])

        assert error.fields == ["email", "phone"]
        assert str(error) == "Missing required fields: email, phone"

    def test_record_not_found_message(self):
        """Test the not-found message names collection and ID."""
        assert str(RecordNotFoundError("tasks", "42")) == "Record not found in tasks: 42"


@pytest.mark.unit
class TestClassifyErrorWithResponse:
    """Tests for classify_error_with_response function."""

    @pytest.mark.parametrize(
        ("exception", "code", "status_code"),
        [
            (ValidationError(["name"]), ErrorCode.ERR_VALIDATION, 422),
            (DuplicateUsernameError("john"), ErrorCode.ERR_DUPLICATE_USERNAME, 409),
            (ProtectedAccountError("sv-default"), ErrorCode.ERR_PROTECTED_ACCOUNT, 403),
            (InvalidCredentialsError("john"), ErrorCode.ERR_INVALID_CREDENTIALS, 401),
            (IncompleteChecklistError("t1", ["a", "b"]), ErrorCode.ERR_INCOMPLETE_CHECKLIST, 409),
            (InvalidTransitionError("done"), ErrorCode.ERR_INVALID_STATE_TRANSITION, 409),
            (RecordNotFoundError("keys", "k1"), ErrorCode.ERR_NOT_FOUND, 404),
        ],
    )
    def test_domain_errors(self, exception, code, status_code):
        """Test each domain error maps to its code and HTTP status."""
        response = classify_error_with_response(exception)

        assert response.code == code
        assert response.status_code == status_code
        assert response.message
        assert response.suggestion

    def test_incomplete_checklist_counts_open_items(self):
        """Test the suggestion says how many items are open."""
        response = classify_error_with_response(IncompleteChecklistError("t1", ["a", "b"]))

        assert response.suggestion == "2 item(s) still open."

    def test_not_found_names_record_type(self):
        """Test the message uses the singular collection name."""
        response = classify_error_with_response(RecordNotFoundError("keys", "k1"))

        assert response.message == "That key could not be found."

    def test_unknown_error(self):
        """Test classification of unknown errors."""
        response = classify_error_with_response(Exception("Something unexpected happened"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert response.severity == ErrorSeverity.MEDIUM
        assert response.status_code == 500
        assert "unexpected error" in response.message.lower()
