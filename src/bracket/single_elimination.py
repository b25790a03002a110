"""
Single elimination bracket construction.
"""
import logging
import math
from typing import List, Sequence, Tuple

from .models import Entrant, Link, Match, Section, Slot

logger = logging.getLogger(__name__)


def get_round_name(entrants_in_round: int) -> str:
    """Get the name of a round based on number of entrants."""
    if entrants_in_round == 2:
        return "Final"
    elif entrants_in_round == 4:
        return "Semifinal"
    elif entrants_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {entrants_in_round}"


def match_id(section: Section, round_num: int, index: int) -> str:
    """Match id for the index-th (0-based) match of a round, e.g. W1-M1, L2-M1."""
    prefix = 'L' if section is Section.LOSERS else 'W'
    return f"{prefix}{round_num}-M{index + 1}"


def forward_link(section: Section, round_num: int, index: int) -> Link:
    """Link from the index-th match of a round to its parent in the next round."""
    return Link(
        match_id=match_id(section, round_num + 1, index // 2),
        slot=Slot.A if index % 2 == 0 else Slot.B,
    )


def build_rounds(section: Section, counts: Sequence[int]) -> List[List[Match]]:
    """
    Create empty, forward-linked rounds with the given number of matches each.

    Round r's match i advances to match i // 2 of round r + 1, slot A when i is
    even and B when odd. The last round is left unlinked.
    """
    rounds = []
    for r, count in enumerate(counts, start=1):
        round_matches = []
        for i in range(count):
            advance_to = forward_link(section, r, i) if r < len(counts) else None
            round_matches.append(Match(
                id=match_id(section, r, i),
                round=r,
                section=section,
                advance_to=advance_to,
            ))
        rounds.append(round_matches)
    return rounds


def build_single_elimination(padded: Sequence[Entrant]) -> Tuple[Match, ...]:
    """
    Build a balanced single elimination tree from a padded, ordered entrant list.

    Returns the matches in round order. Round 1 is fully seeded, later rounds
    are filled by propagation. Byes are not resolved here.
    """
    size = len(padded)
    if size < 2 or size & (size - 1):
        raise ValueError(f"Entrant list length must be a power of two >= 2, got {size}")

    total_rounds = int(math.log2(size))
    counts = [size // 2 ** r for r in range(1, total_rounds + 1)]
    rounds = build_rounds(Section.WINNERS, counts)

    rounds[0] = [
        Match(
            id=m.id,
            round=m.round,
            section=m.section,
            slot_a=padded[2 * k],
            slot_b=padded[2 * k + 1],
            advance_to=m.advance_to,
        )
        for k, m in enumerate(rounds[0])
    ]

    matches = tuple(m for round_matches in rounds for m in round_matches)
    logger.debug("Built single elimination tree: %d entrants, %d rounds, %d matches",
                 size, total_rounds, len(matches))
    return matches


def total_rounds(matches: Sequence[Match], section: Section = Section.WINNERS) -> int:
    return max((m.round for m in matches if m.section is section), default=0)


def matches_in_round(matches: Sequence[Match], round_num: int,
                     section: Section = Section.WINNERS) -> List[Match]:
    return [m for m in matches if m.section is section and m.round == round_num]
