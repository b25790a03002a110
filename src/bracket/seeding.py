"""
Seeding: ordering the roster and padding it with byes up to a power of two.
"""
import secrets
from typing import Callable, List, Sequence

from .errors import TooFewEntrants
from .models import Entrant

OrderingStrategy = Callable[[Sequence[Entrant]], List[Entrant]]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def calculate_byes(num_entrants: int) -> int:
    """Number of placeholders needed to fill the bracket."""
    return next_power_of_two(num_entrants) - num_entrants


def random_order(entrants: Sequence[Entrant]) -> List[Entrant]:
    """Uniform random permutation (Fisher-Yates over a cryptographic source)."""
    shuffled = list(entrants)
    for i in range(len(shuffled) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def identity_order(entrants: Sequence[Entrant]) -> List[Entrant]:
    return list(entrants)


def seed_entrants(entrants: Sequence[Entrant], order: OrderingStrategy = random_order) -> List[Entrant]:
    """
    Order the entrants and pad them with byes to the next power of two.

    The returned list is laid out pairwise by round-1 match. Byes take slot B
    of the last matches, one per match, so two placeholders never meet in
    round 1. With identity_order and three entrants the result is
    [P1, P2, P3, BYE].
    """
    if len(entrants) < 2:
        raise TooFewEntrants(len(entrants))

    ordered = order(entrants)
    size = next_power_of_two(len(ordered))
    num_matches = size // 2
    num_byes = size - len(ordered)
    full_matches = num_matches - num_byes

    padded = list(ordered[:2 * full_matches])
    for entrant in ordered[2 * full_matches:]:
        padded.append(entrant)
        padded.append(Entrant.placeholder())
    return padded
