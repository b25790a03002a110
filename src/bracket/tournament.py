"""
Tournament lifecycle: build from a roster snapshot, progress, resolve.
"""
import logging
from typing import Iterable, Optional

from .champion import resolve_champion
from .double_elimination import build_double_elimination
from .models import Entrant, Format, Slot, Tournament, new_id
from .progression import declare_winner as declare_match_winner
from .progression import resolve_byes
from .seeding import OrderingStrategy, random_order, seed_entrants
from .single_elimination import build_single_elimination

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Action Ladder Tournament"


def create_tournament(entrants: Iterable[Entrant], name: str = DEFAULT_NAME,
                      format: Format = Format.SINGLE,
                      order: OrderingStrategy = random_order) -> Tournament:
    """
    Build a tournament from a roster snapshot.

    Byes are resolved before the tournament is returned. Raises TooFewEntrants
    for rosters below 2.
    """
    format = Format(format)
    snapshot = tuple(entrants)
    if format is Format.DOUBLE:
        matches = build_double_elimination(snapshot, order)
    else:
        matches = build_single_elimination(seed_entrants(snapshot, order))
    matches = resolve_byes(matches)

    tournament = Tournament(
        id=new_id('t-'),
        name=name.strip() or DEFAULT_NAME,
        format=format,
        entrants=snapshot,
        matches=matches,
    )
    logger.info("Created %s elimination tournament '%s' with %d entrants (%d matches)",
                format.value, tournament.name, len(snapshot), len(matches))
    return tournament


def declare_winner(tournament: Tournament, match_id: str, winning_slot: Slot,
                   score_a: Optional[int] = None, score_b: Optional[int] = None) -> Tournament:
    """Return a new tournament with the result applied; the given one is unchanged."""
    matches = declare_match_winner(tournament.matches, match_id, winning_slot, score_a, score_b)
    return tournament.with_matches(matches)


def champion(tournament: Optional[Tournament]) -> Optional[Entrant]:
    if tournament is None:
        return None
    return resolve_champion(tournament.matches)
