"""
Point allocation service.

Awards points for a resolved position using the fixed POINTS_TABLE lookup. Every
path that scores a match (save, edit, recalculation) goes through calculate_points.
"""

from decimal import Decimal
from typing import Iterable, List
from scoreboard.models.schemas import RankedMatchEntry
from scoreboard.services.position_service import count_at_position
from scoreboard.utils.constants import POINTS_TABLE, NO_POINTS
from scoreboard.utils.exceptions import InvalidMatchEntriesError


def points_for(position: int, tie_count: int) -> Decimal:
    """
    Look up the points for a position shared by tie_count players.

    Args:
        position: 1-based position
        tie_count: How many players share the position (at least 1)

    Returns:
        Points per player at that position
    """
    if position < 1:
        raise InvalidMatchEntriesError(f"Position must be at least 1, got {position}")
    if tie_count < 1:
        raise InvalidMatchEntriesError(f"Tie count must be at least 1, got {tie_count}")

    by_tie_count = POINTS_TABLE.get(position)
    if by_tie_count is None:
        return NO_POINTS
    # Three or more sharing a position all use the ">= 3" column
    return by_tie_count[min(tie_count, 3)]


def calculate_points(position: int, ranked_entries: Iterable[RankedMatchEntry]) -> Decimal:
    """
    Points earned at a position, given every ranked entry of the same match.

    Raises:
        InvalidMatchEntriesError: if nobody in the match holds that position
    """
    entries: List[RankedMatchEntry] = list(ranked_entries)
    tie_count = count_at_position(position, entries)
    if tie_count == 0:
        raise InvalidMatchEntriesError(f"No participant holds position {position} in this match")
    return points_for(position, tie_count)
