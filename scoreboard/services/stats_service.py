"""
Season stat update helpers.

Applying or reversing a match's contribution is a pure calculation: the caller
reads the current SeasonPlayer totals, passes them in, and writes the returned
values back inside its own transaction.
"""

import logging
from decimal import Decimal
from typing import Tuple
from scoreboard.models.schemas import StatsContribution
from scoreboard.services import settings_service

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def apply_contribution(
    wins: int,
    points: Decimal,
    contribution: StatsContribution,
    sign: int = 1,
) -> Tuple[int, Decimal, bool]:
    """
    Add (sign=1) or remove (sign=-1) a match contribution from season totals.

    Totals are clamped at zero. A clamp only happens when the stored totals had
    already drifted from the match history, so it is reported back to the caller.

    Args:
        wins: Current SeasonPlayer.wins
        points: Current SeasonPlayer.points
        contribution: Wins/points the match is worth to this player
        sign: 1 to apply, -1 to roll back

    Returns:
        Tuple of (new_wins, new_points, clamped)
    """
    if sign not in (1, -1):
        raise ValueError(f"sign must be 1 or -1, got {sign}")

    new_wins = wins + sign * contribution.wins
    new_points = Decimal(str(points)) + sign * contribution.points
    clamped = False

    if new_wins < 0:
        new_wins = 0
        clamped = True
    if new_points < ZERO:
        new_points = ZERO
        clamped = True

    if clamped and settings_service.should_log_clamped_rollbacks():
        logger.warning(
            f"Clamped stats for player {contribution.player_id} at zero: "
            f"wins {wins} -> {new_wins}, points {points} -> {new_points} "
            f"(contribution wins={contribution.wins}, points={contribution.points}, sign={sign})"
        )

    return new_wins, new_points, clamped
