"""
Double elimination bracket construction.

In double elimination:
- Winners Bracket: the single elimination tree, entrants that haven't lost yet
- Losers Bracket: a chain of rounds fed by the losers of winners rounds
  1..N-1, each half the size of the winners round that feeds it
- Grand Final: Winners Bracket champion (slot A) vs Losers Bracket champion (slot B)

The loser of the Winners Final is not routed into the losers bracket; the
losers bracket champion goes straight to the Grand Final.
"""
import logging
from dataclasses import replace
from typing import List, Sequence, Tuple

from .models import Entrant, Link, Match, Section, Slot
from .seeding import OrderingStrategy, random_order, seed_entrants
from .single_elimination import (
    build_rounds,
    build_single_elimination,
    get_round_name,
    matches_in_round,
    total_rounds,
)

logger = logging.getLogger(__name__)

GRAND_FINAL_ID = "GF"


def get_losers_round_name(round_num: int, total_losers_rounds: int) -> str:
    """Get the name for a losers bracket round (1-indexed)."""
    rounds_from_end = total_losers_rounds - round_num
    if rounds_from_end == 0:
        return "Losers Final"
    elif rounds_from_end == 1:
        return "Losers Semifinal"
    else:
        return f"Losers Round {round_num}"


def get_winners_round_name(entrants_in_round: int) -> str:
    """Get the name for a winners bracket round."""
    return f"Winners {get_round_name(entrants_in_round)}"


def count_losers_matches(bracket_size: int) -> int:
    """Number of losers bracket matches for a padded bracket of the given size."""
    winners_rounds = bracket_size.bit_length() - 1
    return sum(bracket_size // 2 ** (r + 1) for r in range(1, winners_rounds))


def augment_double_elimination(winners: Sequence[Match]) -> Tuple[Match, ...]:
    """
    Add a losers bracket and a grand final to a single elimination tree.

    Returns winners matches (with drop_to links and the final re-linked to the
    grand final), then losers matches in round order, then the grand final.
    """
    wb_rounds = total_rounds(winners, Section.WINNERS)
    size = 2 ** wb_rounds

    losers_counts = [size // 2 ** (r + 1) for r in range(1, wb_rounds)]
    losers_rounds = build_rounds(Section.LOSERS, losers_counts)

    grand_final = Match(id=GRAND_FINAL_ID, round=wb_rounds + 1, section=Section.GRAND_FINAL)

    # Winners round r drops into losers round r; matches 2k and 2k+1 share losers match k
    drops = {}
    for r in range(1, wb_rounds):
        targets = losers_rounds[r - 1]
        for i, m in enumerate(matches_in_round(winners, r, Section.WINNERS)):
            drops[m.id] = Link(match_id=targets[i // 2].id, slot=Slot.A if i % 2 == 0 else Slot.B)

    augmented_winners = []
    for m in winners:
        if m.round == wb_rounds:
            augmented_winners.append(replace(m, advance_to=Link(GRAND_FINAL_ID, Slot.A)))
        else:
            augmented_winners.append(replace(m, drop_to=drops.get(m.id)))

    losers: List[Match] = [m for round_matches in losers_rounds for m in round_matches]
    if losers:
        losers[-1] = replace(losers[-1], advance_to=Link(GRAND_FINAL_ID, Slot.B))

    logger.debug("Added losers bracket: %d rounds, %d matches", len(losers_rounds), len(losers))
    return tuple(augmented_winners) + tuple(losers) + (grand_final,)


def build_double_elimination(entrants: Sequence[Entrant],
                             order: OrderingStrategy = random_order) -> Tuple[Match, ...]:
    """
    Seed the entrants and build the full double elimination tree (byes unresolved).

    Two entrants give a one-round winners side and no losers rounds: the
    winners final feeds grand final slot A and slot B stays empty.
    """
    padded = seed_entrants(entrants, order)
    return augment_double_elimination(build_single_elimination(padded))


def describe_round(match: Match, matches: Sequence[Match]) -> str:
    """Display name for the round a match belongs to."""
    if match.section is Section.GRAND_FINAL:
        return "Grand Final"
    if match.section is Section.LOSERS:
        return get_losers_round_name(match.round, total_rounds(matches, Section.LOSERS))
    wb_rounds = total_rounds(matches, Section.WINNERS)
    entrants_in_round = 2 ** (wb_rounds - match.round + 1)
    is_double = any(m.section is not Section.WINNERS for m in matches)
    if is_double:
        return get_winners_round_name(entrants_in_round)
    return get_round_name(entrants_in_round)
