"""In-memory database with collection-oriented CRUD operations."""

import copy
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from src.core.config import constants


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when a database operation receives malformed input."""


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


class InMemoryDatabase:
    """Pure Python in-memory database.

    Records are plain dicts held per collection in insertion order. Every read
    returns deep copies so callers can never mutate stored state directly.
    There is no persistence: a new instance starts empty.
    """

    def __init__(self, *, clock: Callable[[], str] = utc_now_iso, id_start: int = constants.ID_COUNTER_START):
        """Initialize empty in-memory database."""
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_counter = id_start
        self._clock = clock

    def now(self) -> str:
        """Current timestamp from the database clock (ISO format)."""
        return self._clock()

    def _next_id(self, collection: dict[str, dict[str, Any]]) -> str:
        while str(self._id_counter) in collection:
            self._id_counter += 1
        record_id = str(self._id_counter)
        self._id_counter += 1
        return record_id

    def create_record(
        self, *, collection: str, data: dict[str, Any], record_id: str | None = None
    ) -> dict[str, Any]:
        """Create a new record in the specified collection.

        Args:
            collection: Name of the collection
            data: Record data to store
            record_id: Explicit ID (used for seed data); generated when omitted

        Returns:
            Created record

        Raises:
            DatabaseError: If data is not a dict or the explicit ID is taken
        """
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")

        records = self._collections.setdefault(collection, {})
        if record_id is None:
            record_id = self._next_id(records)
        elif record_id in records:
            raise DatabaseError(f"Record {record_id} already exists in {collection}")

        record = {**copy.deepcopy(data), "id": record_id}
        records[record_id] = record
        return copy.deepcopy(record)

    def get_record(self, *, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get a record by ID, or None if it does not exist."""
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def update_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Merge data into an existing record.

        The record ID is never overwritten.

        Returns:
            Updated record, or None if the record does not exist
        """
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")

        record = self._collections.get(collection, {}).get(record_id)
        if record is None:
            return None

        record.update(copy.deepcopy({k: v for k, v in data.items() if k != "id"}))
        return copy.deepcopy(record)

    def delete_record(self, *, collection: str, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        records = self._collections.get(collection, {})
        if record_id not in records:
            return False
        del records[record_id]
        return True

    def list_records(
        self,
        *,
        collection: str,
        filters: dict[str, Any] | None = None,
        sort: str = "",
    ) -> list[dict[str, Any]]:
        """List records with optional equality filters and sorting.

        Args:
            collection: Name of the collection
            filters: Field/value pairs that must all match exactly
            sort: Sort field (prefix with - for descending). Ties keep insertion
                order for ascending sorts and reverse insertion order for
                descending sorts.

        Returns:
            Matching records as deep copies
        """
        records = list(self._collections.get(collection, {}).values())

        if filters:
            records = [r for r in records if all(r.get(field) == value for field, value in filters.items())]

        if sort:
            records = self._apply_sort(records, sort)

        return [copy.deepcopy(r) for r in records]

    def get_first_record(self, *, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        """Get the first matching record in insertion order or None."""
        records = self.list_records(collection=collection, filters=filters)
        return records[0] if records else None

    def count_records(self, *, collection: str) -> int:
        """Number of records in a collection."""
        return len(self._collections.get(collection, {}))

    def _apply_sort(self, records: list[dict[str, Any]], sort: str) -> list[dict[str, Any]]:
        reverse = sort.startswith("-")
        field = sort.lstrip("+-")

        # Reversing first keeps later insertions ahead of earlier ones on ties
        if reverse:
            records = list(reversed(records))
        return sorted(records, key=lambda r: r.get(field) or "", reverse=reverse)
