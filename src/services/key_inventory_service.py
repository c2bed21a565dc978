"""Key inventory: registered keys and their Available/Assigned status."""

import logging
from datetime import datetime
from typing import Any

from src.core import schema
from src.core.config import constants
from src.core.db_client import InMemoryDatabase
from src.core.errors import RecordNotFoundError
from src.core.logging import log_with_context, span
from src.domain.create_models import KeyCreate
from src.domain.history import KeyAction
from src.domain.key import Key, KeyStatus
from src.domain.update_models import KeyUpdate
from src.services.identity_service import IdentityStore
from src.services.ledger_service import CheckoutLedger


logger = logging.getLogger(__name__)

_CLEARED: dict[str, Any] = {"status": KeyStatus.AVAILABLE, "assigned_to": None, "assigned_to_name": None}


class KeyInventory:
    """Owns key records.

    The inventory never changes a key's status on its own initiative. Status
    moves only through ``assign``/``unassign`` (which also write the checkout
    ledger) or an explicit ``update_key``.
    """

    def __init__(self, db: InMemoryDatabase, *, identity: IdentityStore, ledger: CheckoutLedger) -> None:
        self._db = db
        self._identity = identity
        self._ledger = ledger

    def _resolve_name(self, account_id: str | None) -> str | None:
        if not account_id:
            return None
        account = self._identity.get_account(account_id)
        return account.name if account else None

    def create_key(self, data: KeyCreate) -> Key:
        """Register a key with today's date as its creation date."""
        with span("key_inventory.create_key"):
            record = self._db.create_record(
                collection=schema.KEYS,
                data={
                    "key_number": data.key_number,
                    "description": data.description,
                    "created_date": datetime.now().strftime(constants.DATE_FORMAT),
                    **_CLEARED,
                    "status": data.status,
                },
            )
            logger.info("Created key %s (%s)", record["key_number"], record["id"])
            return Key.model_validate(record)

    def update_key(self, key_id: str, data: KeyUpdate) -> Key:
        """Replace every field of a key except its ID.

        ``assigned_to_name`` is re-resolved from ``assigned_to``. Consistency
        between ``status`` and ``assigned_to`` is the caller's responsibility.

        Raises:
            RecordNotFoundError: If the key does not exist
        """
        with span("key_inventory.update_key"):
            existing = self._db.get_record(collection=schema.KEYS, record_id=key_id)
            if existing is None:
                raise RecordNotFoundError(schema.KEYS, key_id)

            record = self._db.update_record(
                collection=schema.KEYS,
                record_id=key_id,
                data={
                    "key_number": data.key_number,
                    "description": data.description,
                    "created_date": data.created_date or existing["created_date"],
                    "status": data.status,
                    "assigned_to": data.assigned_to or None,
                    "assigned_to_name": self._resolve_name(data.assigned_to),
                },
            )
            logger.info("Updated key %s", key_id)
            return Key.model_validate(record)

    def delete_key(self, key_id: str) -> bool:
        """Remove a key record. Returns False if the ID was unknown."""
        with span("key_inventory.delete_key"):
            deleted = self._db.delete_record(collection=schema.KEYS, record_id=key_id)
            if deleted:
                logger.info("Deleted key %s", key_id)
            return deleted

    def assign(self, key_id: str, user_id: str) -> Key | None:
        """Check a key out to an account and record a checkout entry.

        Unknown key or account IDs are ignored. A key already held by someone is
        left with its holder.

        Returns:
            The updated key, or None when nothing changed
        """
        with span("key_inventory.assign"):
            key = self.get_key(key_id)
            account = self._identity.get_account(user_id) if user_id else None
            if key is None or account is None:
                log_with_context(logger, "debug", "Ignored assignment of unknown key or account", key_id=key_id)
                return None

            if key.assigned_to:
                log_with_context(
                    logger,
                    "warning",
                    "Key already held, assignment skipped",
                    key_id=key_id,
                    holder_id=key.assigned_to,
                    requested_id=user_id,
                )
                return None

            record = self._db.update_record(
                collection=schema.KEYS,
                record_id=key_id,
                data={"status": KeyStatus.ASSIGNED, "assigned_to": account.id, "assigned_to_name": account.name},
            )
            self._ledger.record(
                key_id=key_id,
                key_number=key.key_number,
                action=KeyAction.CHECKOUT,
                staff_id=account.id,
                staff_name=account.name,
            )
            return Key.model_validate(record)

    def unassign(self, key_id: str) -> Key | None:
        """Return a key to the inventory.

        A return entry is written from the holder snapshot taken before the key
        is cleared. Keys that are not held produce no history entry.

        Returns:
            The updated key, or None if the key ID is unknown
        """
        with span("key_inventory.unassign"):
            return self._clear(key_id, record_return=True)

    def release_keys_held_by(self, user_id: str, *, record_return: bool = False) -> list[Key]:
        """Return every key held by an account.

        Args:
            user_id: Account whose keys are released
            record_return: Write a return entry for each released key

        Returns:
            The released keys
        """
        with span("key_inventory.release_keys_held_by"):
            released = []
            for key in self.keys_held_by(user_id):
                cleared = self._clear(key.id, record_return=record_return)
                if cleared is not None:
                    released.append(cleared)
            if released:
                logger.info(
                    "Released %d key(s) held by %s", len(released), user_id, extra={"record_return": record_return}
                )
            return released

    def rename_holder(self, user_id: str, name: str) -> list[Key]:
        """Rewrite the cached holder name on every key held by an account."""
        with span("key_inventory.rename_holder"):
            renamed = []
            for key in self.keys_held_by(user_id):
                if key.assigned_to_name == name:
                    continue
                record = self._db.update_record(
                    collection=schema.KEYS, record_id=key.id, data={"assigned_to_name": name}
                )
                renamed.append(Key.model_validate(record))
            return renamed

    def _clear(self, key_id: str, *, record_return: bool) -> Key | None:
        key = self.get_key(key_id)
        if key is None:
            return None

        if record_return and key.assigned_to and key.assigned_to_name:
            self._ledger.record(
                key_id=key_id,
                key_number=key.key_number,
                action=KeyAction.RETURN,
                staff_id=key.assigned_to,
                staff_name=key.assigned_to_name,
            )

        record = self._db.update_record(collection=schema.KEYS, record_id=key_id, data=_CLEARED)
        return Key.model_validate(record)

    def get_key(self, key_id: str) -> Key | None:
        record = self._db.get_record(collection=schema.KEYS, record_id=key_id) if key_id else None
        return Key.model_validate(record) if record else None

    def list_keys(self) -> list[Key]:
        return [Key.model_validate(r) for r in self._db.list_records(collection=schema.KEYS)]

    def available_keys(self) -> list[Key]:
        """Keys that can be bound to a new task, in registry order."""
        records = self._db.list_records(collection=schema.KEYS, filters={"status": KeyStatus.AVAILABLE})
        return [Key.model_validate(r) for r in records]

    def keys_held_by(self, user_id: str) -> list[Key]:
        """Keys currently assigned to an account, in registry order."""
        records = self._db.list_records(collection=schema.KEYS, filters={"assigned_to": user_id})
        return [Key.model_validate(r) for r in records]
