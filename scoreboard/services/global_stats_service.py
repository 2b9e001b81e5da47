"""
Cross-season statistics service.

Folds every season into all-time rankings and per-player drill-down stats.
Players are tracked by global player id, so results from seasons a player was
later removed from still count toward their match history totals.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Dict, Optional
from scoreboard.models.schemas import (
    GlobalPlayer,
    GlobalRankingEntry,
    PlayerDetailedStats,
    SeasonRecord,
)
from scoreboard.services import settings_service
from scoreboard.services.match_service import score_match
from scoreboard.services.season_service import EARLIEST, name_sort_key, season_winners
from scoreboard.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


def round_for_display(value: Decimal, places: Optional[int] = None) -> Decimal:
    """Round a statistic for presentation. Accumulation never goes through this."""
    if places is None:
        places = settings_service.get_stats_display_decimals()
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _average(total, count: int) -> Decimal:
    """Mean over count, 0 when there is nothing to average."""
    if count == 0:
        return Decimal("0")
    return Decimal(total) / Decimal(count)


# ============================================================================
# PlayerTotals Class
# ============================================================================

class PlayerTotals:
    """Running cross-season totals for a single player."""

    def __init__(self, player_id: int, name: str):
        self.player_id = player_id
        self.name = name
        self.seasons_participated = 0
        self.season_wins = 0
        self.total_match_wins = 0
        self.total_match_victories = 0
        self.total_points = Decimal("0")

    def to_entry(self, is_champion: bool = False) -> GlobalRankingEntry:
        return GlobalRankingEntry(
            player_id=self.player_id,
            name=self.name,
            season_wins=self.season_wins,
            total_match_wins=self.total_match_wins,
            total_match_victories=self.total_match_victories,
            total_points=self.total_points,
            seasons_participated=self.seasons_participated,
            is_champion=is_champion,
        )


def _sort_global_rankings(totals: Iterable[PlayerTotals]) -> List[PlayerTotals]:
    """
    Sort rankings for the all-seasons view.
    Sort by: Season wins (desc) → Match wins (desc) → Match victories (desc) → Name (asc)
    """
    return sorted(
        totals,
        key=lambda t: (
            -t.season_wins,
            -t.total_match_wins,
            -t.total_match_victories,
            name_sort_key(t.name),
        )
    )


def global_rankings(
    seasons: Iterable[SeasonRecord],
    players: Optional[Iterable[GlobalPlayer]] = None,
) -> List[GlobalRankingEntry]:
    """
    Rank every player who appears on any season roster.

    Args:
        seasons: All seasons with rosters and match histories
        players: Optional global players; their current names replace roster names
            (otherwise the roster entry of the latest-starting season is used)

    Returns:
        Ranking rows, best first. The player(s) with the most season wins are
        flagged as champions when that maximum is above zero.
    """
    # Oldest first, so the most recent roster entry supplies each name
    seasons = sorted(seasons, key=lambda s: ensure_utc(s.start_date) or EARLIEST)
    current_names = {player.id: player.name for player in players or []}
    totals: Dict[int, PlayerTotals] = {}

    for season in seasons:
        winner_ids = {winner.player_id for winner in season_winners(season.players)}
        for roster_entry in season.players:
            player = totals.get(roster_entry.player_id)
            if player is None:
                player = PlayerTotals(roster_entry.player_id, roster_entry.name)
                totals[roster_entry.player_id] = player
            else:
                player.name = roster_entry.name
            player.seasons_participated += 1
            player.total_match_wins += roster_entry.wins
            player.total_points += roster_entry.points
            if roster_entry.player_id in winner_ids:
                player.season_wins += 1

    # Victories come from the match history, including seasons the player left
    for season in seasons:
        for match in season.matches:
            for entry in match.entries:
                player = totals.get(entry.player_id)
                if player is not None:
                    player.total_match_victories += entry.wins_in_match

    for player_id, name in current_names.items():
        if player_id in totals:
            totals[player_id].name = name

    ranked = _sort_global_rankings(totals.values())
    max_season_wins = max((player.season_wins for player in ranked), default=0)
    rankings = [
        player.to_entry(is_champion=max_season_wins > 0 and player.season_wins == max_season_wins)
        for player in ranked
    ]
    logger.debug(f"Global rankings over {len(seasons)} seasons: {len(rankings)} players")
    return rankings


def player_detailed_stats(
    seasons: Iterable[SeasonRecord],
    player_id: int,
    name: Optional[str] = None,
) -> PlayerDetailedStats:
    """
    Drill-down statistics for one player across all seasons.

    Positions and points are recomputed from each match's entries. The position
    histogram covers positions 1..POSITION_HISTOGRAM_SIZE; other positions still
    count toward every other statistic. Averages are rounded for display only.

    Args:
        seasons: All seasons with match histories
        player_id: Global player id
        name: Optional display name to include

    Returns:
        PlayerDetailedStats (all zeros and no best/worst for a player with no matches)
    """
    histogram_size = settings_service.get_position_histogram_size()
    position_counts = {position: 0 for position in range(1, histogram_size + 1)}
    total_matches = 0
    total_victories = 0
    total_points = Decimal("0")
    position_sum = 0
    best_position = None
    worst_position = None

    for season in seasons:
        for match in season.matches:
            if not any(entry.player_id == player_id for entry in match.entries):
                continue
            result = next(p for p in score_match(match.entries) if p.player_id == player_id)

            total_matches += 1
            total_victories += result.wins_in_match
            total_points += result.points_earned
            position_sum += result.position
            if result.position in position_counts:
                position_counts[result.position] += 1
            if best_position is None or result.position < best_position:
                best_position = result.position
            if worst_position is None or result.position > worst_position:
                worst_position = result.position

    return PlayerDetailedStats(
        player_id=player_id,
        name=name,
        total_matches=total_matches,
        total_victories=total_victories,
        total_points=total_points,
        position_counts=position_counts,
        best_position=best_position,
        worst_position=worst_position,
        average_position=round_for_display(_average(position_sum, total_matches)),
        average_points=round_for_display(_average(total_points, total_matches)),
        average_victories=round_for_display(_average(total_victories, total_matches)),
    )
