"""
Match progression: recording results and moving entrants along bracket links.

Every function here takes a sequence of matches and returns a new tuple. The
input sequence and its Match objects are never modified, so a caller holding
an earlier snapshot still sees the pre-call state.
"""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import InvalidMatchState, PlaceholderCannotWin
from .models import Entrant, Link, Match, Section, Slot

logger = logging.getLogger(__name__)

SECTION_ORDER = {
    Section.WINNERS: 0,
    Section.LOSERS: 1,
    Section.GRAND_FINAL: 2,
}


def _index(matches: Sequence[Match]) -> Dict[str, int]:
    return {m.id: i for i, m in enumerate(matches)}


def _place(working: List[Match], index: Dict[str, int], link: Link, entrant: Entrant):
    """Put an entrant into a linked slot of the working list."""
    i = index.get(link.match_id)
    if i is None:
        logger.warning("Link to unknown match %s ignored", link.match_id)
        return
    target = working[i]
    current = target.entrant_in(link.slot)
    # Byes only ever fill empty slots of open matches
    if entrant.is_placeholder and (target.is_decided or current is not None):
        return
    if target.is_decided:
        logger.warning("Match %s is already decided; %s not placed in slot %s",
                       target.id, entrant.display_name, link.slot.value)
        return
    if current is not None:
        if current.id == entrant.id:
            return
        if not current.is_placeholder:
            logger.warning("Match %s slot %s: %s replaced by %s",
                           target.id, link.slot.value, current.display_name, entrant.display_name)
    working[i] = target.with_entrant(link.slot, entrant)


def _propagate(working: List[Match], index: Dict[str, int], decided: Match, drop_placeholder: bool):
    winner = decided.winner
    loser = decided.loser
    if decided.advance_to and winner is not None:
        _place(working, index, decided.advance_to, winner)
    if decided.drop_to and loser is not None:
        if drop_placeholder or not loser.is_placeholder:
            _place(working, index, decided.drop_to, loser)


def _is_double_bye(match: Match) -> bool:
    return (match.slot_a is not None and match.slot_a.is_placeholder
            and match.slot_b is not None and match.slot_b.is_placeholder)


def has_pending_feeder(matches: Sequence[Match], match_id: str, slot: Slot) -> bool:
    """
    True when an undecided match still links into this slot.

    A match holding two byes never gets a winner; it has already forwarded
    its bye and does not count.
    """
    target = Link(match_id, slot)
    for m in matches:
        if m.is_decided or _is_double_bye(m):
            continue
        if m.advance_to == target or m.drop_to == target:
            return True
    return False


def _awaiting_entrant(matches: Sequence[Match], match: Match, slot: Slot) -> bool:
    entrant = match.entrant_in(slot)
    if entrant is not None and not entrant.is_placeholder:
        return False
    return has_pending_feeder(matches, match.id, slot)


def is_playable(matches: Sequence[Match], match: Match) -> bool:
    """
    True when a winner can be declared for the match right now.

    Both slots must be settled: a slot that is empty or holds a bye while an
    undecided match still feeds it is not. An empty slot nothing feeds (the
    grand final of a two-entrant double elimination) lets the other side win.
    """
    if match.is_decided:
        return False
    if _awaiting_entrant(matches, match, Slot.A) or _awaiting_entrant(matches, match, Slot.B):
        return False
    if match.has_two_real_entrants:
        return True
    a, b = match.slot_a, match.slot_b
    return (a is None and b is not None and not b.is_placeholder) or \
        (b is None and a is not None and not a.is_placeholder)


def _bye_winner_slot(matches: Sequence[Match], match: Match) -> Optional[Slot]:
    a, b = match.slot_a, match.slot_b
    if a is None or b is None:
        return None
    if a.is_placeholder and not b.is_placeholder:
        slot = Slot.B
    elif b.is_placeholder and not a.is_placeholder:
        slot = Slot.A
    else:
        return None
    # Wait while a real entrant can still arrive in either slot
    if has_pending_feeder(matches, match.id, Slot.A) or has_pending_feeder(matches, match.id, Slot.B):
        return None
    return slot


def resolve_byes(matches: Sequence[Match]) -> Tuple[Match, ...]:
    """
    Auto-complete every undecided match where a real entrant faces a bye.

    A single pass in round order is enough: propagation only targets later
    rounds (losers round r is fed by winners round r, which sorts first), so a
    slot filled during the pass is visited after its feeder. The bye is passed
    on to drop_to so the losers bracket sees it too; a match holding two byes
    forwards one bye and stays undecided. A bye match is only decided once no
    undecided match feeds it, so a dropped loser is never turned away by a
    match that a forwarded bye already closed.
    """
    working = list(matches)
    index = _index(working)
    order = sorted(range(len(working)),
                   key=lambda i: (working[i].round, SECTION_ORDER[working[i].section]))

    for i in order:
        m = working[i]
        if m.is_decided:
            continue
        if _is_double_bye(m):
            if m.advance_to:
                _place(working, index, m.advance_to, m.slot_a)
            continue
        slot = _bye_winner_slot(working, m)
        if slot is None:
            continue
        m = replace(m, winner_slot=slot)
        working[i] = m
        logger.debug("Match %s: %s advances on a bye", m.id, m.winner.display_name)
        _propagate(working, index, m, drop_placeholder=True)

    return tuple(working)


def declare_winner(matches: Sequence[Match], match_id: str, winning_slot: Slot,
                   score_a: Optional[int] = None, score_b: Optional[int] = None) -> Tuple[Match, ...]:
    """
    Record the winner of a match and propagate winner and loser along its links.

    Raises InvalidMatchState when the match is unknown, already decided or
    still waiting for an opponent, and PlaceholderCannotWin when the winning
    slot holds a bye. An opponent slot that is empty with nothing feeding it
    does not block the result. Nothing is changed when an error is raised.
    Scores are stored as metadata only.
    """
    winning_slot = Slot(winning_slot)
    index = _index(matches)
    if match_id not in index:
        raise InvalidMatchState(match_id, "no such match")
    match = matches[index[match_id]]
    if match.is_decided:
        raise InvalidMatchState(match_id, "already decided")
    winner = match.entrant_in(winning_slot)
    if winner is None:
        raise InvalidMatchState(match_id, f"slot {winning_slot.value} is empty")
    if winner.is_placeholder:
        raise PlaceholderCannotWin(match_id)
    if _awaiting_entrant(matches, match, winning_slot.other):
        raise InvalidMatchState(match_id, "opponent not decided yet")

    decided = replace(
        match,
        winner_slot=winning_slot,
        score_a=score_a,
        score_b=score_b,
        decided_at=datetime.now().isoformat(),
    )
    working = list(matches)
    working[index[match_id]] = decided
    _propagate(working, index, decided, drop_placeholder=False)

    if decided.loser is None:
        logger.info("Match %s: %s wins unopposed", match_id, winner.display_name)
    else:
        logger.info("Match %s: %s beats %s", match_id, winner.display_name,
                    decided.loser.display_name)
    return resolve_byes(working)
