"""Unit tests for payload model validators."""

import pytest
from pydantic import ValidationError

from src.domain.create_models import KeyCreate, TaskCreate, UserAccountCreate
from src.domain.key import KeyStatus
from src.domain.update_models import KeyUpdate


def account_fields(**overrides):
    fields = {
        "username": "amy",
        "password": "secret",
        "name": "Amy Ames",
        "email": "amy@example.com",
        "phone": "555-0111",
        "role": "staff",
    }
    return {**fields, **overrides}


@pytest.mark.unit
class TestUserAccountCreate:
    """Tests for UserAccountCreate validators."""

    @pytest.mark.parametrize("field", ["username", "password", "name", "email", "phone"])
    def test_rejects_blank(self, field):
        """Test whitespace-only values are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            UserAccountCreate(**account_fields(**{field: "   "}))

        assert "Field cannot be blank" in str(exc_info.value)

    def test_strips_text_but_not_password(self):
        """Test display fields are trimmed while passwords are kept verbatim."""
        account = UserAccountCreate(**account_fields(name="  Amy Ames ", password=" secret "))

        assert account.name == "Amy Ames"
        assert account.password == " secret "

    def test_rejects_unknown_role(self):
        """Test the role must be supervisor or staff."""
        with pytest.raises(ValidationError):
            UserAccountCreate(**account_fields(role="admin"))


@pytest.mark.unit
class TestKeyCreate:
    """Tests for KeyCreate and KeyUpdate."""

    def test_defaults_to_available(self):
        """Test new keys are Available unless told otherwise."""
        assert KeyCreate(key_number="K1", description="Door").status == KeyStatus.AVAILABLE

    def test_rejects_blank_key_number(self):
        """Test the key number is required."""
        with pytest.raises(ValidationError):
            KeyCreate(key_number=" ", description="Door")

    def test_update_accepts_holder(self):
        """Test updates may carry a holder ID."""
        update = KeyUpdate(key_number="K1", description="Door", status="Assigned", assigned_to="s1")

        assert update.status == KeyStatus.ASSIGNED
        assert update.assigned_to == "s1"


@pytest.mark.unit
class TestTaskCreate:
    """Tests for TaskCreate validators."""

    def test_coerces_string_items(self):
        """Test checklist entries may be plain strings and blanks are dropped."""
        task = TaskCreate(
            task_name="Lock up",
            assigned_to_id="s1",
            due_date="2026-03-05",
            todo_items=["Windows", "", {"text": "Alarm", "completed": True}, {"text": "  "}],
        )

        assert [(i.text, i.completed) for i in task.todo_items] == [("Windows", False), ("Alarm", True)]
        assert task.key_id == ""

    @pytest.mark.parametrize("field", ["task_name", "assigned_to_id", "due_date"])
    def test_rejects_blank(self, field):
        """Test required task fields cannot be blank."""
        fields = {"task_name": "Lock up", "assigned_to_id": "s1", "due_date": "2026-03-05", field: ""}

        with pytest.raises(ValidationError):
            TaskCreate(**fields)
