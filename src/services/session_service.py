"""Session service holding the currently signed-in account."""

import logging

from src.core.logging import log_with_staff_context, span
from src.domain.user import UserAccount, UserRole
from src.services.identity_service import IdentityStore


logger = logging.getLogger(__name__)


class SessionService:
    """Current-user pointer for one logical actor.

    The session keeps its own copy of the signed-in account, so account
    edits must be pushed through ``refresh``.
    """

    def __init__(self, identity: IdentityStore) -> None:
        self._identity = identity
        self._current_user: UserAccount | None = None

    @property
    def current_user(self) -> UserAccount | None:
        return self._current_user

    def login(self, *, username: str, password: str, role: UserRole) -> UserAccount | None:
        """Validate credentials and make the matching account current.

        Returns:
            The signed-in account, or None if the credentials do not match
        """
        with span("session_service.login"):
            account = self._identity.validate_login(username, password, role)
            if account is None:
                return None

            self._current_user = account
            log_with_staff_context(logger, "info", "Signed in", staff_id=account.id, role=role)
            return account

    def logout(self) -> None:
        if self._current_user is not None:
            log_with_staff_context(logger, "info", "Signed out", staff_id=self._current_user.id)
        self._current_user = None

    def refresh(self, account: UserAccount) -> bool:
        """Replace the session copy if ``account`` is the signed-in account.

        Returns:
            True if the session was refreshed
        """
        if self._current_user is None or self._current_user.id != account.id:
            return False
        self._current_user = account
        return True
