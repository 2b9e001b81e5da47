"""
Exceptions raised by the scoring engine for invalid input.

Everything here subclasses ValueError so callers can treat any of them as a
rejected argument. Degenerate but valid input (an empty roster, a player with
no matches) never raises.
"""


class ScoringError(ValueError):
    """Base class for scoring engine input errors."""


class InvalidMatchEntriesError(ScoringError):
    """Raised when a match's entry set is malformed."""


class PlayerNotInSeasonError(ScoringError):
    """Raised when a match participant has no roster entry in the season."""

    def __init__(self, player_id: int, season_id=None):
        self.player_id = player_id
        self.season_id = season_id
        if season_id is None:
            message = f"Player {player_id} is not on the season roster"
        else:
            message = f"Player {player_id} is not on the roster of season {season_id}"
        super().__init__(message)


class DuplicatePlayerError(ScoringError):
    """Raised when a player would appear twice in the same roster."""

    def __init__(self, player_id: int):
        self.player_id = player_id
        super().__init__(f"Player {player_id} is already on the roster")


class SeasonClosedError(ScoringError):
    """Raised when closing a season that is already closed."""
