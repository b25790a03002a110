"""
Tests for the tournament roster.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.errors import DuplicateEntrant, UnknownEntrant
from bracket.roster import Roster


class TestRosterAdd:
    """Tests for adding entrants."""

    def test_add_keeps_insertion_order(self):
        roster = Roster()
        for name in ["Carol", "Alice", "Bob"]:
            roster.add(name)
        assert [e.display_name for e in roster] == ["Carol", "Alice", "Bob"]
        assert len(roster) == 3

    def test_add_strips_whitespace(self):
        roster = Roster()
        entrant = roster.add("  Alice  ")
        assert entrant.display_name == "Alice"

    def test_duplicate_is_case_insensitive(self):
        """Adding 'alice' after 'Alice' is rejected."""
        roster = Roster()
        roster.add("Alice")
        with pytest.raises(DuplicateEntrant) as exc_info:
            roster.add("alice")
        assert exc_info.value.name == "alice"
        assert len(roster) == 1

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            Roster().add("   ")

    def test_reserved_bye_name_rejected(self):
        """The placeholder name cannot be used by a real entrant."""
        with pytest.raises(ValueError):
            Roster().add("bye")

    def test_contains_by_name(self, named_roster):
        assert "alice" in named_roster
        assert "Zed" not in named_roster


class TestRosterRemove:
    """Tests for removing entrants."""

    def test_remove_by_id(self, named_roster):
        bob = [e for e in named_roster if e.display_name == "Bob"][0]
        removed = named_roster.remove(bob.id)
        assert removed == bob
        assert "Bob" not in named_roster
        assert len(named_roster) == 3

    def test_remove_unknown(self, named_roster):
        with pytest.raises(UnknownEntrant):
            named_roster.remove("nope")

    def test_name_can_be_reused_after_removal(self, named_roster):
        bob = [e for e in named_roster if e.display_name == "Bob"][0]
        named_roster.remove(bob.id)
        named_roster.add("BOB")
        assert "bob" in named_roster

    def test_clear(self, named_roster):
        named_roster.clear()
        assert len(named_roster) == 0


class TestRosterSnapshot:
    """Tests for the frozen roster snapshot used at build time."""

    def test_snapshot_unaffected_by_later_edits(self, named_roster):
        snapshot = named_roster.snapshot()
        named_roster.add("Eve")
        named_roster.remove(snapshot[0].id)
        assert [e.display_name for e in snapshot] == ["Alice", "Bob", "Carol", "Dave"]

    def test_list_round_trip(self, named_roster):
        restored = Roster.from_list(named_roster.to_list())
        assert restored.snapshot() == named_roster.snapshot()

    def test_from_list_rejects_duplicates(self):
        with pytest.raises(DuplicateEntrant):
            Roster.from_list([{'id': '1', 'name': 'Ann'}, {'id': '2', 'name': 'ANN'}])
