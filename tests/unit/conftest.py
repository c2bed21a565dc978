"""Pytest configuration and fixtures for unit tests."""

import pytest

from src.core import schema
from src.domain.create_models import KeyCreate, UserAccountCreate
from src.domain.user import UserRole
from src.services.identity_service import IdentityStore
from src.services.key_inventory_service import KeyInventory
from src.services.ledger_service import CheckoutLedger
from src.services.task_service import TaskEngine


def account_payload(username: str, name: str, role: UserRole = UserRole.STAFF) -> UserAccountCreate:
    """Build a complete account payload."""
    return UserAccountCreate(
        username=username,
        password="pw-" + username,
        name=name,
        email=f"{username}@example.com",
        phone="555-0199",
        role=role,
    )


@pytest.fixture
def identity(in_memory_db):
    """Identity store with the protected supervisor already present."""
    in_memory_db.create_record(
        collection=schema.ACCOUNTS,
        data=account_payload("supervisor", "Default Supervisor", UserRole.SUPERVISOR).model_dump(),
        record_id="sv-default",
    )
    return IdentityStore(in_memory_db, protected_account_id="sv-default")


@pytest.fixture
def ledger(in_memory_db):
    return CheckoutLedger(in_memory_db)


@pytest.fixture
def inventory(in_memory_db, identity, ledger):
    return KeyInventory(in_memory_db, identity=identity, ledger=ledger)


@pytest.fixture
def engine(in_memory_db, identity, inventory):
    return TaskEngine(in_memory_db, identity=identity, inventory=inventory, record_implicit_returns=False)


@pytest.fixture
def staff(identity):
    """A staff account."""
    return identity.create_account(account_payload("alice", "Alice Adams"))


@pytest.fixture
def other_staff(identity):
    """A second staff account."""
    return identity.create_account(account_payload("bob", "Bob Brown"))


@pytest.fixture
def key(inventory):
    """An Available key."""
    return inventory.create_key(KeyCreate(key_number="K1", description="Store room"))


@pytest.fixture
def other_key(inventory):
    """A second Available key."""
    return inventory.create_key(KeyCreate(key_number="K2", description="Boiler room"))
