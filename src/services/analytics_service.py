"""Analytics service for dashboard and per-staff statistics."""

import logging

from src.core import schema
from src.core.errors import RecordNotFoundError
from src.core.logging import span
from src.domain.key import KeyStatus
from src.domain.task import TaskStatus
from src.models.service_models import DashboardSummary, StaffSummary
from src.services.identity_service import IdentityStore
from src.services.key_inventory_service import KeyInventory
from src.services.task_service import TaskEngine


logger = logging.getLogger(__name__)


class Analytics:
    """Read-only statistics computed from the identity, key and task collections."""

    def __init__(self, *, identity: IdentityStore, inventory: KeyInventory, tasks: TaskEngine) -> None:
        self._identity = identity
        self._inventory = inventory
        self._tasks = tasks

    def get_dashboard_summary(self) -> DashboardSummary:
        """Counts of staff, keys by status and tasks by status."""
        with span("analytics.get_dashboard_summary"):
            keys = self._inventory.list_keys()
            tasks = self._tasks.list_tasks()
            return DashboardSummary(
                total_staff=len(self._identity.get_staff_accounts()),
                total_keys=len(keys),
                available_keys=sum(1 for key in keys if key.status == KeyStatus.AVAILABLE),
                assigned_keys=sum(1 for key in keys if key.is_assigned),
                active_tasks=sum(1 for task in tasks if task.status == TaskStatus.PENDING),
                completed_tasks=sum(1 for task in tasks if task.status == TaskStatus.COMPLETED),
            )

    def get_staff_summary(self, staff_id: str) -> StaffSummary:
        """Keys held and tasks assigned for one staff member.

        Raises:
            RecordNotFoundError: If the account does not exist
        """
        with span("analytics.get_staff_summary"):
            account = self._identity.get_account(staff_id)
            if account is None:
                raise RecordNotFoundError(schema.ACCOUNTS, staff_id)

            tasks = self._tasks.tasks_for_staff(staff_id)
            return StaffSummary(
                staff_id=account.id,
                staff_name=account.name,
                held_keys=self._inventory.keys_held_by(staff_id),
                pending_tasks=[task for task in tasks if task.status == TaskStatus.PENDING],
                completed_tasks=sum(1 for task in tasks if task.status == TaskStatus.COMPLETED),
            )
