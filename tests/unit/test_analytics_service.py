"""Unit tests for analytics_service module."""

import pytest

from src.core.errors import RecordNotFoundError
from src.domain.create_models import TaskCreate
from src.services.analytics_service import Analytics


@pytest.fixture
def analytics(identity, inventory, engine):
    return Analytics(identity=identity, inventory=inventory, tasks=engine)


def create_task(engine, staff, key, name="Open store"):
    return engine.create_task(
        TaskCreate(task_name=name, assigned_to_id=staff.id, key_id=key.id, due_date="2026-03-10")
    )


@pytest.mark.unit
class TestDashboardSummary:
    """Tests for Analytics.get_dashboard_summary."""

    def test_empty_inventory(self, analytics):
        """Test counts with only the supervisor present."""
        summary = analytics.get_dashboard_summary()

        assert summary.total_staff == 0
        assert summary.total_keys == 0
        assert summary.active_tasks == 0

    def test_counts_keys_and_tasks(self, analytics, engine, staff, other_staff, key, other_key):
        """Test keys by status and tasks by status."""
        create_task(engine, staff, key)
        done = create_task(engine, other_staff, other_key, name="Done")
        engine.complete_task(done.id)

        summary = analytics.get_dashboard_summary()

        assert summary.total_staff == 2
        assert summary.total_keys == 2
        assert summary.assigned_keys == 1
        assert summary.available_keys == 1
        assert summary.active_tasks == 1
        assert summary.completed_tasks == 1


@pytest.mark.unit
class TestStaffSummary:
    """Tests for Analytics.get_staff_summary."""

    def test_staff_summary(self, analytics, engine, staff, key, other_key):
        """Test held keys and task counts for one account."""
        create_task(engine, staff, key)
        done = create_task(engine, staff, other_key, name="Done")
        engine.complete_task(done.id)

        summary = analytics.get_staff_summary(staff.id)

        assert summary.staff_name == "Alice Adams"
        assert [k.id for k in summary.held_keys] == [key.id]
        assert [t.task_name for t in summary.pending_tasks] == ["Open store"]
        assert summary.completed_tasks == 1

    def test_unknown_staff(self, analytics):
        """Test an unknown account raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            analytics.get_staff_summary("missing")
