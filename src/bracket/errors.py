"""
Exceptions raised by the bracket engine.

None of these represent transient conditions; callers surface them and nothing
is retried.
"""


class BracketError(Exception):
    """Base exception for bracket errors."""
    pass


class TooFewEntrants(BracketError):
    """Raised when a bracket is built from fewer entrants than the format needs."""

    def __init__(self, count: int, minimum: int = 2):
        self.count = count
        self.minimum = minimum
        super().__init__(f"At least {minimum} entrants are required, got {count}")


class DuplicateEntrant(BracketError):
    """Raised when a roster already holds an entrant with the same name (case-insensitive)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Entrant '{name}' is already in the roster")


class UnknownEntrant(BracketError):
    """Raised when removing an entrant that is not in the roster."""

    def __init__(self, entrant_id: str):
        self.entrant_id = entrant_id
        super().__init__(f"No entrant with id '{entrant_id}'")


class InvalidMatchState(BracketError):
    """Raised when a match does not exist, is already decided, or cannot be decided yet."""

    def __init__(self, match_id: str, reason: str):
        self.match_id = match_id
        self.reason = reason
        super().__init__(f"Match {match_id}: {reason}")


class PlaceholderCannotWin(BracketError):
    """Raised when a bye placeholder is declared the winner of a match."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match {match_id}: a bye cannot be declared the winner")


class RecognitionServiceError(BracketError):
    """Raised when the image recognition service cannot be reached or fails."""
    pass
