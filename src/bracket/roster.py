"""
Tournament roster: the ordered, deduplicated set of entrants.
"""
from typing import Iterable, Iterator, List, Tuple

from .errors import DuplicateEntrant, UnknownEntrant
from .models import BYE_NAME, Entrant


class Roster:
    """Entrants in insertion order. Names are unique case-insensitively."""

    def __init__(self, entrants: Iterable[Entrant] = ()):
        self._entrants: List[Entrant] = []
        for entrant in entrants:
            self._append(entrant)

    def __repr__(self):
        return f"Roster(entrants={[e.display_name for e in self._entrants]})"

    def __len__(self):
        return len(self._entrants)

    def __iter__(self) -> Iterator[Entrant]:
        return iter(self._entrants)

    def __contains__(self, name: str) -> bool:
        key = name.strip().lower()
        return any(e.display_name.lower() == key for e in self._entrants)

    def _append(self, entrant: Entrant):
        name = entrant.display_name.strip()
        if not name:
            raise ValueError("Entrant name cannot be empty")
        if name.upper() == BYE_NAME:
            raise ValueError(f"'{BYE_NAME}' is reserved for placeholder entrants")
        if name in self:
            raise DuplicateEntrant(name)
        self._entrants.append(entrant)

    def add(self, display_name: str) -> Entrant:
        """Add a new entrant by name and return it."""
        entrant = Entrant.create(display_name.strip())
        self._append(entrant)
        return entrant

    def remove(self, entrant_id: str) -> Entrant:
        for i, entrant in enumerate(self._entrants):
            if entrant.id == entrant_id:
                return self._entrants.pop(i)
        raise UnknownEntrant(entrant_id)

    def clear(self):
        self._entrants = []

    def snapshot(self) -> Tuple[Entrant, ...]:
        """Frozen copy of the entrants; later roster edits do not affect it."""
        return tuple(self._entrants)

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self._entrants]

    @classmethod
    def from_list(cls, data: Iterable[dict]) -> "Roster":
        return cls(Entrant.from_dict(item) for item in data)
