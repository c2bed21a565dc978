"""Demo data loaded into a fresh custody store."""

import logging
from typing import Any

from src.core import schema
from src.core.db_client import InMemoryDatabase
from src.core.logging import span
from src.domain.history import KeyAction
from src.domain.key import KeyStatus
from src.domain.task import TaskStatus
from src.domain.user import UserRole


logger = logging.getLogger(__name__)

DEFAULT_SUPERVISOR_ID = "sv-default"
DEMO_PASSWORD = "123456"

SEED_ACCOUNTS: list[dict[str, Any]] = [
    {
        "id": DEFAULT_SUPERVISOR_ID,
        "username": "supervisor",
        "password": DEMO_PASSWORD,
        "name": "Default Supervisor",
        "email": "supervisor@example.com",
        "phone": "555-0100",
        "role": UserRole.SUPERVISOR,
    },
    {
        "id": "staff-1",
        "username": "john",
        "password": DEMO_PASSWORD,
        "name": "John Smith",
        "email": "john@example.com",
        "phone": "555-0101",
        "role": UserRole.STAFF,
    },
    {
        "id": "staff-2",
        "username": "jane",
        "password": DEMO_PASSWORD,
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0102",
        "role": UserRole.STAFF,
    },
]

SEED_KEYS: list[dict[str, Any]] = [
    {
        "id": "1",
        "key_number": "KEY-001",
        "description": "Main Office Door",
        "created_date": "2025-01-10",
        "status": KeyStatus.AVAILABLE,
        "assigned_to": None,
        "assigned_to_name": None,
    },
    {
        "id": "2",
        "key_number": "KEY-002",
        "description": "Server Room",
        "created_date": "2025-01-12",
        "status": KeyStatus.ASSIGNED,
        "assigned_to": "staff-1",
        "assigned_to_name": "John Smith",
    },
]

SEED_TASKS: list[dict[str, Any]] = [
    {
        "id": "1",
        "task_name": "Server Room Maintenance",
        "assigned_to": "John Smith",
        "assigned_to_id": "staff-1",
        "key_id": "2",
        "key_number": "KEY-002",
        "due_date": "2025-01-25",
        "todo_items": [],
        "status": TaskStatus.PENDING,
        "completed_at": None,
    },
]

SEED_KEY_HISTORY: list[dict[str, Any]] = [
    {
        "id": "h1",
        "key_id": "2",
        "key_number": "KEY-002",
        "action": KeyAction.CHECKOUT,
        "staff_id": "staff-1",
        "staff_name": "John Smith",
        "timestamp": "2025-01-15T10:30:00",
    },
]


def seed_demo_data(db: InMemoryDatabase) -> None:
    """Load the demo accounts, keys, task and key history into an empty database.

    The seeded key ``2`` is checked out to ``staff-1`` with a matching history
    entry and pending task, so the data starts out consistent.
    """
    with span("seed.seed_demo_data"):
        seeds = [
            (schema.ACCOUNTS, SEED_ACCOUNTS),
            (schema.KEYS, SEED_KEYS),
            (schema.TASKS, SEED_TASKS),
            (schema.KEY_HISTORY, SEED_KEY_HISTORY),
        ]
        for collection, records in seeds:
            for record in records:
                data = {k: v for k, v in record.items() if k != "id"}
                db.create_record(collection=collection, data=data, record_id=record["id"])

        logger.info(
            "Seeded demo data",
            extra={
                "accounts": len(SEED_ACCOUNTS),
                "keys": len(SEED_KEYS),
                "tasks": len(SEED_TASKS),
                "key_history": len(SEED_KEY_HISTORY),
            },
        )
