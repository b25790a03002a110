"""
Unit tests for single elimination bracket generation.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.champion import resolve_champion
from bracket.models import Format, Section, Slot
from bracket.progression import declare_winner
from bracket.seeding import identity_order, next_power_of_two, seed_entrants
from bracket.single_elimination import (
    build_single_elimination,
    get_round_name,
    matches_in_round,
    total_rounds,
)
from bracket.tournament import create_tournament
from conftest import make_entrants


def names(match):
    return (
        match.slot_a.display_name if match.slot_a else None,
        match.slot_b.display_name if match.slot_b else None,
    )


class TestRoundNames:
    """Tests for round naming."""

    def test_final(self):
        assert get_round_name(2) == "Final"

    def test_semifinal(self):
        assert get_round_name(4) == "Semifinal"

    def test_quarterfinal(self):
        assert get_round_name(8) == "Quarterfinal"

    def test_round_of_n(self):
        assert get_round_name(16) == "Round of 16"
        assert get_round_name(64) == "Round of 64"


class TestBuildSingleElimination:
    """Tests for tree construction."""

    def test_rejects_non_power_of_two(self):
        with pytest.raises(ValueError):
            build_single_elimination(make_entrants(3))
        with pytest.raises(ValueError):
            build_single_elimination(make_entrants(1))

    def test_eight_entrant_structure(self):
        """8 entrants: 4 + 2 + 1 matches, all in the winners section."""
        matches = build_single_elimination(make_entrants(8))
        assert len(matches) == 7
        assert total_rounds(matches) == 3
        assert [len(matches_in_round(matches, r)) for r in (1, 2, 3)] == [4, 2, 1]
        assert all(m.section is Section.WINNERS for m in matches)
        assert all(m.drop_to is None for m in matches)

    def test_round_one_filled_pairwise(self):
        matches = build_single_elimination(make_entrants(8))
        round_one = matches_in_round(matches, 1)
        assert [names(m) for m in round_one] == [
            ("P1", "P2"), ("P3", "P4"), ("P5", "P6"), ("P7", "P8"),
        ]
        assert all(names(m) == (None, None) for m in matches if m.round > 1)

    def test_forward_links(self):
        """Match i of round r feeds match i // 2 of round r + 1, A when even, B when odd."""
        matches = build_single_elimination(make_entrants(8))
        links = {m.id: (m.advance_to.match_id, m.advance_to.slot) if m.advance_to else None for m in matches}
        assert links["W1-M1"] == ("W2-M1", Slot.A)
        assert links["W1-M2"] == ("W2-M1", Slot.B)
        assert links["W1-M3"] == ("W2-M2", Slot.A)
        assert links["W1-M4"] == ("W2-M2", Slot.B)
        assert links["W2-M1"] == ("W3-M1", Slot.A)
        assert links["W2-M2"] == ("W3-M1", Slot.B)
        assert links["W3-M1"] is None

    def test_single_root(self):
        matches = build_single_elimination(make_entrants(16))
        roots = [m for m in matches if m.advance_to is None]
        assert len(roots) == 1
        assert roots[0].round == 4


class TestScenarioFourEntrants:
    """Single elimination, 4 entrants, identity ordering P1..P4."""

    @pytest.fixture
    def tournament(self, four_entrants):
        return create_tournament(four_entrants, name="Scenario A", order=identity_order)

    def test_initial_layout(self, tournament):
        assert names(tournament.match("W1-M1")) == ("P1", "P2")
        assert names(tournament.match("W1-M2")) == ("P3", "P4")
        assert names(tournament.match("W2-M1")) == (None, None)

    def test_progression_to_champion(self, tournament):
        matches = declare_winner(tournament.matches, "W1-M1", Slot.A)
        assert names(next(m for m in matches if m.id == "W2-M1"))[0] == "P1"

        matches = declare_winner(matches, "W1-M2", Slot.B)
        assert names(next(m for m in matches if m.id == "W2-M1")) == ("P1", "P4")

        assert resolve_champion(matches) is None
        matches = declare_winner(matches, "W2-M1", Slot.A)
        assert resolve_champion(matches).display_name == "P1"


class TestByes:
    """Tests for bye handling at build time."""

    def test_three_entrants(self):
        """P3 gets a bye and is already waiting in the final."""
        tournament = create_tournament(make_entrants(3), order=identity_order)
        bye_match = tournament.match("W1-M2")
        assert names(bye_match) == ("P3", "BYE")
        assert bye_match.winner_slot is Slot.A
        assert names(tournament.match("W2-M1")) == (None, "P3")
        assert tournament.match("W1-M1").winner_slot is None

    def test_two_entrants_no_byes(self):
        tournament = create_tournament(make_entrants(2), order=identity_order)
        assert len(tournament.matches) == 1
        assert names(tournament.matches[0]) == ("P1", "P2")

    def test_bye_recipients_meet_in_round_two(self):
        """5 entrants: the three bye winners fill round two without any call."""
        tournament = create_tournament(make_entrants(5), order=identity_order)
        assert names(tournament.match("W2-M1")) == (None, "P3")
        assert names(tournament.match("W2-M2")) == ("P4", "P5")
        assert tournament.match("W2-M2").winner_slot is None


class TestSingleEliminationProperties:
    """Structural properties for every roster size."""

    @pytest.mark.slow
    @pytest.mark.parametrize("count", range(2, 34))
    def test_properties(self, count):
        tournament = create_tournament(make_entrants(count), format=Format.SINGLE)
        size = next_power_of_two(count)
        matches = tournament.matches

        assert len(matches) == size - 1

        round_one = matches_in_round(matches, 1)
        assert len(round_one) == size // 2
        slots = [e for m in round_one for e in (m.slot_a, m.slot_b)]
        real_ids = sorted(e.id for e in slots if not e.is_placeholder)
        assert real_ids == sorted(e.id for e in tournament.entrants)

        for m in matches:
            if m.winner_slot is not None:
                assert not m.winner.is_placeholder
            if m.round == 1 and (m.slot_a.is_placeholder or m.slot_b.is_placeholder):
                assert m.winner_slot is not None

    def test_seeded_list_builds_same_tree(self):
        padded = seed_entrants(make_entrants(6), identity_order)
        matches = build_single_elimination(padded)
        assert names(matches_in_round(matches, 1)[3]) == ("P6", "BYE")
