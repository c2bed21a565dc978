"""Unit tests for key_inventory_service module."""

import pytest

from src.core.errors import RecordNotFoundError
from src.domain.create_models import KeyCreate
from src.domain.history import KeyAction
from src.domain.key import KeyStatus
from src.domain.update_models import KeyUpdate


def assert_consistent(key):
    """Assigned status, holder ID and holder name are set together or not at all."""
    assigned = key.status == KeyStatus.ASSIGNED
    assert assigned == (key.assigned_to is not None) == (key.assigned_to_name is not None)


@pytest.mark.unit
class TestCreateKey:
    """Tests for KeyInventory.create_key."""

    def test_create_key_defaults(self, inventory):
        """Test a new key is Available with a creation date."""
        key = inventory.create_key(KeyCreate(key_number="K9", description="Gate"))

        assert key.status == KeyStatus.AVAILABLE
        assert key.assigned_to is None
        assert len(key.created_date) == 10
        assert inventory.available_keys() == [key]


@pytest.mark.unit
class TestAssign:
    """Tests for KeyInventory.assign."""

    def test_assign_sets_holder_and_records_checkout(self, inventory, ledger, key, staff):
        """Test assigning binds the key and writes one checkout entry."""
        assigned = inventory.assign(key.id, staff.id)

        assert assigned.status == KeyStatus.ASSIGNED
        assert assigned.assigned_to == staff.id
        assert assigned.assigned_to_name == "Alice Adams"
        assert_consistent(assigned)

        entries = ledger.entries()
        assert len(entries) == 1
        assert entries[0].action == KeyAction.CHECKOUT
        assert entries[0].key_number == "K1"
        assert entries[0].staff_name == "Alice Adams"

    def test_assign_unknown_key_is_ignored(self, inventory, ledger, staff):
        """Test an unknown key ID changes nothing."""
        assert inventory.assign("missing", staff.id) is None
        assert len(ledger) == 0

    def test_assign_unknown_account_is_ignored(self, inventory, ledger, key):
        """Test an unknown account ID changes nothing."""
        assert inventory.assign(key.id, "missing") is None
        assert inventory.get_key(key.id).status == KeyStatus.AVAILABLE
        assert len(ledger) == 0

    def test_assign_held_key_keeps_holder(self, inventory, ledger, key, staff, other_staff):
        """Test a key already held by someone is not taken from them."""
        inventory.assign(key.id, staff.id)

        assert inventory.assign(key.id, other_staff.id) is None
        assert inventory.get_key(key.id).assigned_to == staff.id
        assert len(ledger) == 1

    def test_available_keys_excludes_assigned(self, inventory, key, other_key, staff):
        """Test the available pool only lists Available keys in registry order."""
        inventory.assign(key.id, staff.id)

        assert [k.id for k in inventory.available_keys()] == [other_key.id]


@pytest.mark.unit
class TestUnassign:
    """Tests for KeyInventory.unassign."""

    def test_unassign_records_return_from_previous_holder(self, inventory, ledger, key, staff):
        """Test the return entry uses the holder snapshot taken before clearing."""
        inventory.assign(key.id, staff.id)
        returned = inventory.unassign(key.id)

        assert returned.status == KeyStatus.AVAILABLE
        assert_consistent(returned)

        entry = ledger.entries()[-1]
        assert entry.action == KeyAction.RETURN
        assert entry.staff_id == staff.id
        assert entry.staff_name == "Alice Adams"

    def test_unassign_available_key_writes_nothing(self, inventory, ledger, key):
        """Test returning an Available key is a no-op for the history."""
        inventory.unassign(key.id)

        assert len(ledger) == 0
        assert inventory.get_key(key.id).status == KeyStatus.AVAILABLE

    def test_unassign_unknown_key(self, inventory, ledger):
        """Test an unknown key ID is ignored."""
        assert inventory.unassign("missing") is None
        assert len(ledger) == 0

    def test_ledger_counts_only_effective_transitions(self, inventory, ledger, key, staff, other_staff):
        """Test no-op assigns and unassigns leave no trace in the history."""
        inventory.unassign(key.id)
        inventory.assign(key.id, staff.id)
        inventory.assign(key.id, other_staff.id)
        inventory.assign(key.id, "missing")
        inventory.unassign(key.id)
        inventory.unassign(key.id)
        inventory.assign(key.id, other_staff.id)

        assert [e.action for e in ledger.entries()] == [KeyAction.CHECKOUT, KeyAction.RETURN, KeyAction.CHECKOUT]


@pytest.mark.unit
class TestReleaseKeysHeldBy:
    """Tests for KeyInventory.release_keys_held_by."""

    def test_release_without_history(self, inventory, ledger, key, other_key, staff):
        """Test releasing clears every held key without return entries by default."""
        inventory.assign(key.id, staff.id)
        inventory.assign(other_key.id, staff.id)

        released = inventory.release_keys_held_by(staff.id)

        assert {k.id for k in released} == {key.id, other_key.id}
        assert all(k.status == KeyStatus.AVAILABLE for k in inventory.list_keys())
        assert [e.action for e in ledger.entries()] == [KeyAction.CHECKOUT, KeyAction.CHECKOUT]

    def test_release_with_history(self, inventory, ledger, key, staff):
        """Test releasing can write return entries."""
        inventory.assign(key.id, staff.id)

        inventory.release_keys_held_by(staff.id, record_return=True)

        assert ledger.entries()[-1].action == KeyAction.RETURN


@pytest.mark.unit
class TestUpdateAndDeleteKey:
    """Tests for KeyInventory.update_key and delete_key."""

    def test_update_key_replaces_fields_and_resolves_name(self, inventory, key, staff):
        """Test full replace keeps the creation date and resolves the holder name."""
        updated = inventory.update_key(
            key.id,
            KeyUpdate(key_number="K1-A", description="Store room (new lock)", status=KeyStatus.ASSIGNED,
                      assigned_to=staff.id),
        )

        assert updated.key_number == "K1-A"
        assert updated.created_date == key.created_date
        assert updated.assigned_to_name == "Alice Adams"

    def test_update_key_does_not_enforce_invariant(self, inventory, key):
        """Test the inventory stores what the caller sends."""
        updated = inventory.update_key(
            key.id, KeyUpdate(key_number="K1", description="Store room", status=KeyStatus.ASSIGNED)
        )

        assert updated.status == KeyStatus.ASSIGNED
        assert updated.assigned_to is None

    def test_update_unknown_key(self, inventory):
        """Test updating an unknown key raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            inventory.update_key("missing", KeyUpdate(key_number="X", description="Y"))

    def test_delete_key(self, inventory, key):
        """Test deleting removes the key."""
        assert inventory.delete_key(key.id) is True
        assert inventory.get_key(key.id) is None
        assert inventory.delete_key(key.id) is False

    def test_rename_holder(self, inventory, key, other_key, staff, other_staff):
        """Test only keys held by the account get the new holder name."""
        inventory.assign(key.id, staff.id)
        inventory.assign(other_key.id, other_staff.id)

        renamed = inventory.rename_holder(staff.id, "Alice Archer")

        assert [k.id for k in renamed] == [key.id]
        assert inventory.get_key(key.id).assigned_to_name == "Alice Archer"
        assert inventory.get_key(other_key.id).assigned_to_name == "Bob Brown"
        assert inventory.rename_holder(staff.id, "Alice Archer") == []
