"""
Champion resolution and the poster hand-off.
"""
from typing import Dict, Optional, Sequence

from .models import Entrant, Match, Tournament


def resolve_champion(matches: Sequence[Match]) -> Optional[Entrant]:
    """Winner of the highest-round match, or None while it is undecided."""
    if not matches:
        return None
    max_round = max(m.round for m in matches)
    final_match = next(m for m in matches if m.round == max_round)
    return final_match.winner


def poster_payload(tournament: Tournament) -> Optional[Dict[str, str]]:
    """Data the poster renderer needs, or None when there is no champion yet."""
    champion = resolve_champion(tournament.matches)
    if champion is None:
        return None
    return {
        'tournament_name': tournament.name,
        'champion_name': champion.display_name,
    }
