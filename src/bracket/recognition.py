"""
Reading match results out of recognised photo text.

The recognition service (image -> free-form text) is external. This module
parses its output into scores and, only when the text is unambiguous, a
winning slot. An undetermined slot is a normal outcome: the caller falls back
to a manual decision.
"""
import re
from dataclasses import dataclass
from typing import Optional

import requests

from .errors import RecognitionServiceError
from .models import Entrant, Slot

SCORE_PATTERN = re.compile(r'(\d+)\s*[-–]\s*(\d+)')
WINNER_LABEL_PATTERN = re.compile(r'winner\s*:\s*([^\n]+)', re.IGNORECASE)
VICTORY_VERBS = r'(?:defeats|defeated|beats|beat)'


@dataclass(frozen=True)
class RecognitionResult:
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winning_slot: Optional[Slot] = None

    @property
    def ambiguous(self) -> bool:
        """True when no winner could be read; a manual decision is required."""
        return self.winning_slot is None


def _name_pattern(name: str) -> str:
    """Regex for a display name standing on its own, not inside a longer word."""
    return r'(?<!\w)' + re.escape(name) + r'(?!\w)'


def _mentions(text: str, name: str) -> bool:
    return bool(name) and re.search(_name_pattern(name), text, re.IGNORECASE) is not None


def _slot_from_winner_label(text: str, name_a: str, name_b: str) -> Optional[Slot]:
    label = WINNER_LABEL_PATTERN.search(text)
    if not label:
        return None
    who = label.group(1)
    found = []
    for slot, name in ((Slot.A, name_a), (Slot.B, name_b)):
        m = re.search(_name_pattern(name), who, re.IGNORECASE)
        if m:
            found.append((m.start(), -len(name), slot))
    if not found:
        return None
    found.sort()
    # Both names read at the same spot with the same length: no way to tell
    if len(found) == 2 and found[0][:2] == found[1][:2]:
        return None
    return found[0][2]


def _slot_from_victory_phrase(text: str, name_a: str, name_b: str) -> Optional[Slot]:
    a_won = re.search(_name_pattern(name_a) + r'\s+' + VICTORY_VERBS + r'\b', text, re.IGNORECASE)
    b_won = re.search(_name_pattern(name_b) + r'\s+' + VICTORY_VERBS + r'\b', text, re.IGNORECASE)
    if a_won and not b_won:
        return Slot.A
    if b_won and not a_won:
        return Slot.B
    return None


def interpret_result_text(text: str, entrant_a: Optional[Entrant],
                          entrant_b: Optional[Entrant]) -> RecognitionResult:
    """
    Extract "scoreA-scoreB" and, if possible, the winning slot from recognised text.

    A winner is only proposed when both display names appear in the text as
    whole words (case-insensitively) and either a "winner: <name>" label or a
    "<name> defeats/beat" phrase singles one of them out. A name inside a
    longer word ("Al" in "Alice") does not count.
    """
    text = text or ''
    score_a = score_b = None
    score = SCORE_PATTERN.search(text)
    if score:
        score_a, score_b = int(score.group(1)), int(score.group(2))

    if entrant_a is None or entrant_b is None:
        return RecognitionResult(score_a, score_b, None)

    name_a = entrant_a.display_name
    name_b = entrant_b.display_name
    if not (_mentions(text, name_a) and _mentions(text, name_b)):
        return RecognitionResult(score_a, score_b, None)

    slot = _slot_from_winner_label(text, name_a, name_b)
    if slot is None:
        slot = _slot_from_victory_phrase(text, name_a, name_b)
    return RecognitionResult(score_a, score_b, slot)


class RecognitionClient:
    """HTTP client for the image-to-text recognition service."""

    def __init__(self, base_url: str, timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def recognize(self, image: bytes, filename: str = 'match.jpg') -> str:
        """Send an image and return the recognised text."""
        try:
            response = requests.post(
                self.base_url,
                files={'image': (filename, image)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RecognitionServiceError(f"Recognition service request failed: {e}") from e

        if response.headers.get('Content-Type', '').startswith('application/json'):
            return response.json().get('text', '') or ''
        return response.text
