"""Unit tests for session_service module."""

import pytest

from src.domain.user import UserRole
from src.services.session_service import SessionService


@pytest.fixture
def session(identity):
    return SessionService(identity)


@pytest.mark.unit
class TestSessionService:
    """Tests for SessionService."""

    def test_login_sets_current_user(self, session, staff):
        """Test matching credentials sign the account in."""
        account = session.login(username="alice", password="pw-alice", role=UserRole.STAFF)

        assert account == staff
        assert session.current_user == staff

    def test_failed_login_keeps_previous_user(self, session, staff):
        """Test a failed login leaves the session as it was."""
        session.login(username="alice", password="pw-alice", role=UserRole.STAFF)

        assert session.login(username="alice", password="nope", role=UserRole.STAFF) is None
        assert session.current_user == staff

    def test_supervisor_login(self, session):
        """Test the supervisor signs in with the supervisor role only."""
        assert session.login(username="supervisor", password="pw-supervisor", role=UserRole.STAFF) is None

        account = session.login(username="supervisor", password="pw-supervisor", role=UserRole.SUPERVISOR)
        assert session.current_user == account
        assert account.role == UserRole.SUPERVISOR

    def test_logout(self, session, staff):
        """Test logout clears the current user."""
        session.login(username="alice", password="pw-alice", role=UserRole.STAFF)
        session.logout()

        assert session.current_user is None
        session.logout()

    def test_refresh_only_touches_signed_in_account(self, session, staff, other_staff):
        """Test refresh replaces the copy only for the same account ID."""
        session.login(username="alice", password="pw-alice", role=UserRole.STAFF)

        assert session.refresh(other_staff) is False
        assert session.current_user == staff

        renamed = staff.model_copy(update={"name": "Alice Archer"})
        assert session.refresh(renamed) is True
        assert session.current_user.name == "Alice Archer"

    def test_refresh_without_session(self, session, staff):
        """Test refresh is a no-op when nobody is signed in."""
        assert session.refresh(staff) is False
        assert session.current_user is None
