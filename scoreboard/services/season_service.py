"""
Season aggregation service.

Builds the season leaderboard, determines season winners, and derives per-player
season totals from match history. Also holds the season and roster lifecycle
helpers, which return new SeasonRecord copies instead of mutating their input.
"""

import locale
import logging
import unicodedata
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Dict, Optional
from scoreboard.models.schemas import (
    GlobalPlayer,
    LeaderboardEntry,
    SeasonPlayerRecord,
    SeasonPlayerSummary,
    SeasonRecord,
)
from scoreboard.services.match_service import match_contributions, score_match
from scoreboard.utils.datetime_utils import utcnow, ensure_utc, format_display_date
from scoreboard.utils.exceptions import (
    DuplicatePlayerError,
    PlayerNotInSeasonError,
    SeasonClosedError,
)

logger = logging.getLogger(__name__)

EARLIEST = ensure_utc(datetime.min)


def fold_name(name: str) -> str:
    """Case-fold a name and strip its accents ('Élodie' -> 'elodie', 'Ёжик' -> 'ежик')."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_sort_key(name: str):
    """
    Locale-aware, case- and accent-insensitive key for ordering player names.

    Collation follows LC_COLLATE (see settings_service.configure_locale); under
    the default "C" locale the folded text still keeps accented letters next to
    their base letters.
    """
    folded = fold_name(name)
    return (locale.strxfrm(folded), folded, name)


# ============================================================================
# Leaderboard
# ============================================================================

def sort_season_players(players: Iterable[SeasonPlayerRecord]) -> List[SeasonPlayerRecord]:
    """
    Sort a roster for the season leaderboard.
    Sort by: Points (desc) → Wins (desc) → Name (asc)
    """
    return sorted(
        players,
        key=lambda p: (
            -p.points,  # Negative for descending
            -p.wins,
            name_sort_key(p.name),
        )
    )


def build_leaderboard(players: Iterable[SeasonPlayerRecord]) -> List[LeaderboardEntry]:
    """
    Rank a season roster.

    Competition ranking: a player shares the rank of the player directly above
    only when both points and wins are equal; otherwise their rank is their
    1-based place in the sorted order.

    Args:
        players: Season roster with running totals

    Returns:
        Leaderboard rows in rank order (empty for an empty roster)
    """
    leaderboard = []
    previous = None
    for index, player in enumerate(sort_season_players(players), start=1):
        if previous is not None and player.points == previous.points and player.wins == previous.wins:
            rank = leaderboard[-1].rank
        else:
            rank = index
        leaderboard.append(
            LeaderboardEntry(
                player_id=player.player_id,
                name=player.name,
                wins=player.wins,
                points=player.points,
                rank=rank,
            )
        )
        previous = player
    return leaderboard


def season_winners(players: Iterable[SeasonPlayerRecord]) -> List[SeasonPlayerRecord]:
    """
    Every player with the season's highest point total.

    Only points decide the winners; equal points with different wins still
    share the title.
    """
    players = list(players)
    if not players:
        return []
    max_points = max(player.points for player in players)
    return [player for player in players if player.points == max_points]


# ============================================================================
# Per-player season totals
# ============================================================================

def match_victories(season: SeasonRecord, player_id: int) -> int:
    """Sum of wins_in_match over every match the player played in the season."""
    return sum(
        entry.wins_in_match
        for match in season.matches
        for entry in match.entries
        if entry.player_id == player_id
    )


def season_player_summaries(season: SeasonRecord) -> List[SeasonPlayerSummary]:
    """Roster totals plus match victories and matches played, in leaderboard order."""
    victories: Dict[int, int] = {}
    played: Dict[int, int] = {}
    for match in season.matches:
        for entry in match.entries:
            victories[entry.player_id] = victories.get(entry.player_id, 0) + entry.wins_in_match
            played[entry.player_id] = played.get(entry.player_id, 0) + 1

    return [
        SeasonPlayerSummary(
            player_id=player.player_id,
            name=player.name,
            wins=player.wins,
            points=player.points,
            match_victories=victories.get(player.player_id, 0),
            matches_played=played.get(player.player_id, 0),
        )
        for player in sort_season_players(season.players)
    ]


def recalculate_season_totals(season: SeasonRecord) -> List[SeasonPlayerRecord]:
    """
    Rebuild every roster member's wins and points from the match history.

    Used to repair totals that drifted from the history. Results of players no
    longer on the roster are skipped.
    """
    wins: Dict[int, int] = {player.player_id: 0 for player in season.players}
    points: Dict[int, Decimal] = {player.player_id: Decimal("0") for player in season.players}

    for match in season.matches:
        if not match.entries:
            continue
        for contribution in match_contributions(score_match(match.entries)):
            if contribution.player_id not in wins:
                continue
            wins[contribution.player_id] += contribution.wins
            points[contribution.player_id] += contribution.points

    recalculated = []
    for player in season.players:
        if player.wins != wins[player.player_id] or player.points != points[player.player_id]:
            logger.info(
                f"Season {season.id}: player {player.player_id} totals corrected "
                f"from ({player.wins}, {player.points}) to ({wins[player.player_id]}, {points[player.player_id]})"
            )
        recalculated.append(
            player.model_copy(update={"wins": wins[player.player_id], "points": points[player.player_id]})
        )
    return recalculated


# ============================================================================
# Season lifecycle
# ============================================================================

def create_season(
    season_id: int,
    name: str,
    players: Iterable[GlobalPlayer],
    start_date: Optional[datetime] = None,
) -> SeasonRecord:
    """
    Start an active season with a zeroed roster snapshot.

    Raises:
        DuplicatePlayerError: if a player is listed twice
    """
    roster = []
    seen = set()
    for player in players:
        if player.id in seen:
            raise DuplicatePlayerError(player.id)
        seen.add(player.id)
        roster.append(SeasonPlayerRecord(player_id=player.id, name=player.name))

    season = SeasonRecord(
        id=season_id,
        name=name,
        start_date=ensure_utc(start_date) or utcnow(),
        end_date=None,
        is_active=True,
        players=roster,
        matches=[],
    )
    logger.info(f"Created season {season_id} '{name}' with {len(roster)} players")
    return season


def close_season(season: SeasonRecord, end_date: Optional[datetime] = None) -> SeasonRecord:
    """
    Close a season. Its roster and matches are kept.

    Raises:
        SeasonClosedError: if the season is already closed
    """
    if not season.is_active:
        raise SeasonClosedError(f"Season {season.id} is already closed")
    closed = season.model_copy(update={"is_active": False, "end_date": ensure_utc(end_date) or utcnow()})
    logger.info(f"Closed season {season.id} '{season.name}'")
    return closed


def active_season(seasons: Iterable[SeasonRecord]) -> Optional[SeasonRecord]:
    """
    The active season, or None.

    At most one season should be active. If several are, the one started most
    recently wins and a warning is logged.
    """
    active = [season for season in seasons if season.is_active]
    if not active:
        return None
    if len(active) > 1:
        logger.warning(f"{len(active)} seasons are active: {[season.id for season in active]}")
        active.sort(key=lambda s: ensure_utc(s.start_date) or EARLIEST, reverse=True)
    return active[0]


def season_date_range(season: SeasonRecord) -> str:
    """Display label for a season's dates, e.g. "07.03.2024 - 15.04.2024"."""
    start = format_display_date(season.start_date)
    if season.end_date is None:
        return start
    return f"{start} - {format_display_date(season.end_date)}"


# ============================================================================
# Roster
# ============================================================================

def add_player_to_season(season: SeasonRecord, player: GlobalPlayer) -> SeasonRecord:
    """
    Add a player to the roster with zeroed totals.

    Raises:
        DuplicatePlayerError: if the player is already on the roster
    """
    if any(existing.player_id == player.id for existing in season.players):
        raise DuplicatePlayerError(player.id)
    roster = list(season.players) + [SeasonPlayerRecord(player_id=player.id, name=player.name)]
    return season.model_copy(update={"players": roster})


def remove_player_from_season(season: SeasonRecord, player_id: int) -> SeasonRecord:
    """
    Remove a player from the roster.

    Match history is left untouched, so the player's past results still count
    toward cross-season statistics.

    Raises:
        PlayerNotInSeasonError: if the player is not on the roster
    """
    roster = [player for player in season.players if player.player_id != player_id]
    if len(roster) == len(season.players):
        raise PlayerNotInSeasonError(player_id, season.id)
    return season.model_copy(update={"players": roster})
