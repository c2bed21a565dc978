"""Checkout ledger: append-only history of key checkouts and returns."""

import logging

from src.core import schema
from src.core.db_client import InMemoryDatabase
from src.core.logging import span
from src.domain.history import KeyAction, KeyHistoryEntry


logger = logging.getLogger(__name__)


class CheckoutLedger:
    """Append-only key history.

    Entries are written once and never updated or deleted. Readers get
    insertion order by default; ``recent`` gives the newest-first display order.
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def record(
        self,
        *,
        key_id: str,
        key_number: str,
        action: KeyAction,
        staff_id: str,
        staff_name: str,
        timestamp: str | None = None,
    ) -> KeyHistoryEntry:
        """Append a history entry.

        Args:
            key_id: ID of the key that moved
            key_number: Key number snapshot
            action: checkout or return
            staff_id: Account ID of the holder
            staff_name: Holder name snapshot
            timestamp: Event time; defaults to the database clock

        Returns:
            The stored entry
        """
        with span("checkout_ledger.record"):
            record = self._db.create_record(
                collection=schema.KEY_HISTORY,
                data={
                    "key_id": key_id,
                    "key_number": key_number,
                    "action": action,
                    "staff_id": staff_id,
                    "staff_name": staff_name,
                    "timestamp": timestamp or self._db.now(),
                },
            )
            logger.info(
                "Recorded key %s", action, extra={"key_id": key_id, "staff_id": staff_id, "entry_id": record["id"]}
            )
            return KeyHistoryEntry.model_validate(record)

    def entries(self) -> list[KeyHistoryEntry]:
        """All entries in insertion order."""
        return [KeyHistoryEntry.model_validate(r) for r in self._db.list_records(collection=schema.KEY_HISTORY)]

    def entries_for_staff(self, staff_id: str) -> list[KeyHistoryEntry]:
        """Entries for one staff member in insertion order."""
        records = self._db.list_records(collection=schema.KEY_HISTORY, filters={"staff_id": staff_id})
        return [KeyHistoryEntry.model_validate(r) for r in records]

    def entries_for_key(self, key_id: str) -> list[KeyHistoryEntry]:
        """Entries for one key in insertion order."""
        records = self._db.list_records(collection=schema.KEY_HISTORY, filters={"key_id": key_id})
        return [KeyHistoryEntry.model_validate(r) for r in records]

    def recent(self, *, staff_id: str | None = None) -> list[KeyHistoryEntry]:
        """Entries newest first, optionally limited to one staff member.

        Entries with equal timestamps are listed latest-inserted first.
        """
        filters = {"staff_id": staff_id} if staff_id else None
        records = self._db.list_records(collection=schema.KEY_HISTORY, filters=filters, sort="-timestamp")
        return [KeyHistoryEntry.model_validate(r) for r in records]

    def __len__(self) -> int:
        return self._db.count_records(collection=schema.KEY_HISTORY)
