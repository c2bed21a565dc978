"""Identity store for user accounts, credentials and role-filtered views."""

import logging

from src.core import schema
from src.core.config import settings
from src.core.db_client import InMemoryDatabase
from src.core.errors import DuplicateUsernameError, ProtectedAccountError, RecordNotFoundError
from src.core.logging import span
from src.domain.create_models import UserAccountCreate
from src.domain.update_models import UserAccountUpdate
from src.domain.user import UserAccount, UserRole


logger = logging.getLogger(__name__)


class IdentityStore:
    """Holds user accounts.

    The store only touches the accounts collection. Releasing keys held by a
    deleted account is orchestrated by the task engine.
    """

    def __init__(self, db: InMemoryDatabase, *, protected_account_id: str | None = None) -> None:
        self._db = db
        self._protected_account_id = protected_account_id or settings.default_supervisor_id

    @property
    def protected_account_id(self) -> str:
        """ID of the account that can never be deleted."""
        return self._protected_account_id

    def _username_taken(self, username: str, *, exclude_id: str | None = None) -> bool:
        existing = self._db.get_first_record(collection=schema.ACCOUNTS, filters={"username": username})
        return existing is not None and existing["id"] != exclude_id

    def create_account(self, data: UserAccountCreate) -> UserAccount:
        """Create a user account.

        Args:
            data: Validated account fields

        Returns:
            The created account

        Raises:
            DuplicateUsernameError: If another account has the same username
        """
        with span("identity_store.create_account"):
            if self._username_taken(data.username):
                logger.warning("Rejected duplicate username %s", data.username)
                raise DuplicateUsernameError(data.username)

            record = self._db.create_record(collection=schema.ACCOUNTS, data=data.model_dump())
            logger.info("Created %s account %s", data.role, record["id"])
            return UserAccount.model_validate(record)

    def update_account(self, account_id: str, data: UserAccountUpdate) -> UserAccount:
        """Replace every field of an account except its ID.

        Raises:
            RecordNotFoundError: If the account does not exist
            DuplicateUsernameError: If the new username belongs to another account
        """
        with span("identity_store.update_account"):
            if self._db.get_record(collection=schema.ACCOUNTS, record_id=account_id) is None:
                raise RecordNotFoundError(schema.ACCOUNTS, account_id)
            if self._username_taken(data.username, exclude_id=account_id):
                logger.warning("Rejected duplicate username %s for account %s", data.username, account_id)
                raise DuplicateUsernameError(data.username)

            record = self._db.update_record(collection=schema.ACCOUNTS, record_id=account_id, data=data.model_dump())
            logger.info("Updated account %s", account_id)
            return UserAccount.model_validate(record)

    def delete_account(self, account_id: str) -> bool:
        """Remove an account record.

        Returns:
            True if an account was removed, False if the ID was unknown

        Raises:
            ProtectedAccountError: If the account is the default supervisor
        """
        with span("identity_store.delete_account"):
            if account_id == self._protected_account_id:
                logger.warning("Refused to delete protected account %s", account_id)
                raise ProtectedAccountError(account_id)

            deleted = self._db.delete_record(collection=schema.ACCOUNTS, record_id=account_id)
            if deleted:
                logger.info("Deleted account %s", account_id)
            return deleted

    def validate_login(self, username: str, password: str, role: UserRole) -> UserAccount | None:
        """Return the account matching username, password and role exactly, else None."""
        with span("identity_store.validate_login"):
            record = self._db.get_first_record(
                collection=schema.ACCOUNTS,
                filters={"username": username, "password": password, "role": role},
            )
            if record is None:
                logger.info("Failed login for %s as %s", username, role)
                return None
            return UserAccount.model_validate(record)

    def get_account(self, account_id: str) -> UserAccount | None:
        record = self._db.get_record(collection=schema.ACCOUNTS, record_id=account_id)
        return UserAccount.model_validate(record) if record else None

    def list_accounts(self) -> list[UserAccount]:
        return [UserAccount.model_validate(r) for r in self._db.list_records(collection=schema.ACCOUNTS)]

    def list_by_role(self, role: UserRole) -> list[UserAccount]:
        """Accounts with the given role, in insertion order."""
        records = self._db.list_records(collection=schema.ACCOUNTS, filters={"role": role})
        return [UserAccount.model_validate(r) for r in records]

    def get_staff_accounts(self) -> list[UserAccount]:
        return self.list_by_role(UserRole.STAFF)
