"""
Bracket data model: entrants, matches and tournaments.

All models are frozen. State changes produce new instances so that earlier
snapshots of a bracket stay valid for inspection and undo.
"""
import secrets
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

BYE_NAME = "BYE"


def new_id(prefix: str = "") -> str:
    """Short random identifier."""
    return f"{prefix}{secrets.token_hex(4)}"


class Section(str, Enum):
    WINNERS = "Winners"
    LOSERS = "Losers"
    GRAND_FINAL = "GrandFinal"


class Slot(str, Enum):
    A = "a"
    B = "b"

    @property
    def other(self) -> "Slot":
        return Slot.B if self is Slot.A else Slot.A


class Format(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


@dataclass(frozen=True)
class Entrant:
    """A roster entry. Entrants named BYE are placeholders, never real competitors."""
    id: str
    display_name: str

    @classmethod
    def create(cls, display_name: str) -> "Entrant":
        return cls(id=new_id(), display_name=display_name)

    @classmethod
    def placeholder(cls) -> "Entrant":
        return cls(id=new_id("bye-"), display_name=BYE_NAME)

    @property
    def is_placeholder(self) -> bool:
        return self.display_name == BYE_NAME

    def to_dict(self) -> Dict:
        return {'id': self.id, 'name': self.display_name}

    @classmethod
    def from_dict(cls, data: Dict) -> "Entrant":
        return cls(id=data['id'], display_name=data['name'])


@dataclass(frozen=True)
class Link:
    """Where an entrant leaving a match is placed: a target match and slot."""
    match_id: str
    slot: Slot

    def to_dict(self) -> Dict:
        return {'match_id': self.match_id, 'slot': self.slot.value}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["Link"]:
        if not data:
            return None
        return cls(match_id=data['match_id'], slot=Slot(data['slot']))


@dataclass(frozen=True)
class Match:
    """
    A node of the bracket graph.

    advance_to receives the winner; drop_to receives the loser and is only set on
    winners-section matches of a double elimination bracket.
    """
    id: str
    round: int
    section: Section = Section.WINNERS
    slot_a: Optional[Entrant] = None
    slot_b: Optional[Entrant] = None
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winner_slot: Optional[Slot] = None
    advance_to: Optional[Link] = None
    drop_to: Optional[Link] = None
    decided_at: Optional[str] = None

    def entrant_in(self, slot: Slot) -> Optional[Entrant]:
        return self.slot_a if slot is Slot.A else self.slot_b

    def with_entrant(self, slot: Slot, entrant: Optional[Entrant]) -> "Match":
        if slot is Slot.A:
            return replace(self, slot_a=entrant)
        return replace(self, slot_b=entrant)

    @property
    def is_decided(self) -> bool:
        return self.winner_slot is not None

    @property
    def winner(self) -> Optional[Entrant]:
        if self.winner_slot is None:
            return None
        return self.entrant_in(self.winner_slot)

    @property
    def loser(self) -> Optional[Entrant]:
        if self.winner_slot is None:
            return None
        return self.entrant_in(self.winner_slot.other)

    @property
    def has_two_real_entrants(self) -> bool:
        return (self.slot_a is not None and not self.slot_a.is_placeholder
                and self.slot_b is not None and not self.slot_b.is_placeholder)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'round': self.round,
            'section': self.section.value,
            'slot_a': self.slot_a.to_dict() if self.slot_a else None,
            'slot_b': self.slot_b.to_dict() if self.slot_b else None,
            'score_a': self.score_a,
            'score_b': self.score_b,
            'winner_slot': self.winner_slot.value if self.winner_slot else None,
            'advance_to': self.advance_to.to_dict() if self.advance_to else None,
            'drop_to': self.drop_to.to_dict() if self.drop_to else None,
            'decided_at': self.decided_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Match":
        winner_slot = data.get('winner_slot')
        return cls(
            id=data['id'],
            round=int(data['round']),
            section=Section(data.get('section', Section.WINNERS.value)),
            slot_a=Entrant.from_dict(data['slot_a']) if data.get('slot_a') else None,
            slot_b=Entrant.from_dict(data['slot_b']) if data.get('slot_b') else None,
            score_a=data.get('score_a'),
            score_b=data.get('score_b'),
            winner_slot=Slot(winner_slot) if winner_slot else None,
            advance_to=Link.from_dict(data.get('advance_to')),
            drop_to=Link.from_dict(data.get('drop_to')),
            decided_at=data.get('decided_at'),
        )


@dataclass(frozen=True)
class Tournament:
    """A bracket built from a frozen roster snapshot."""
    id: str
    name: str
    format: Format
    entrants: Tuple[Entrant, ...]
    matches: Tuple[Match, ...]
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def match(self, match_id: str) -> Optional[Match]:
        for m in self.matches:
            if m.id == match_id:
                return m
        return None

    def with_matches(self, matches: Tuple[Match, ...]) -> "Tournament":
        return replace(self, matches=tuple(matches))

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'format': self.format.value,
            'entrants': [e.to_dict() for e in self.entrants],
            'matches': [m.to_dict() for m in self.matches],
            'created_at': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Tournament":
        return cls(
            id=data['id'],
            name=data['name'],
            format=Format(data.get('format', Format.SINGLE.value)),
            entrants=tuple(Entrant.from_dict(e) for e in data.get('entrants', [])),
            matches=tuple(Match.from_dict(m) for m in data.get('matches', [])),
            created_at=data.get('created_at') or datetime.now().isoformat(),
        )
