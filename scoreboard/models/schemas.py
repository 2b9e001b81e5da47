"""
Pydantic models for the records the scoring engine consumes and produces.

Persistence and UI layers hand these in and take them back out; the engine never
stores anything itself. Field names are snake_case, and camelCase aliases are
accepted so rows shaped like the frontend's payloads validate directly.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GlobalPlayer(BaseModel):
    """Identity-level player, shared by every season."""

    model_config = RECORD_CONFIG
    id: int
    name: str


# Match records


class RawMatchEntry(BaseModel):
    """One participant's raw result: how many rounds they won in the match."""

    model_config = RECORD_CONFIG
    player_id: int
    wins_in_match: int


class RankedMatchEntry(RawMatchEntry):
    """Raw entry with its competition-ranked position."""

    position: int = Field(ge=1)


class ResolvedMatchPlayer(RankedMatchEntry):
    """Fully scored participant. Position and points derive from wins_in_match."""

    points_earned: Decimal = Field(ge=0)


class MatchRecord(BaseModel):
    """
    Stored form of a match.

    Only wins_in_match is kept per participant; positions and points are
    recomputed from the whole entry set whenever they are needed.
    """

    model_config = RECORD_CONFIG
    id: Optional[int] = None
    season_id: Optional[int] = None
    date: Optional[datetime] = None
    entries: List[RawMatchEntry] = []


class ResolvedMatch(BaseModel):
    """Match with every participant's position and points resolved."""

    model_config = RECORD_CONFIG
    id: Optional[int] = None
    season_id: Optional[int] = None
    date: Optional[datetime] = None
    players: List[ResolvedMatchPlayer]


# Season records


class SeasonPlayerRecord(BaseModel):
    """A player's running totals within one season."""

    model_config = RECORD_CONFIG
    player_id: int
    name: str
    wins: int = Field(default=0, ge=0)
    points: Decimal = Field(default=Decimal("0"), ge=0)


class SeasonRecord(BaseModel):
    """A season with its roster and match history."""

    model_config = RECORD_CONFIG
    id: int
    name: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    players: List[SeasonPlayerRecord] = []
    matches: List[MatchRecord] = []


class LeaderboardEntry(SeasonPlayerRecord):
    """Season leaderboard row."""

    rank: int = Field(ge=1)


class SeasonPlayerSummary(BaseModel):
    """Per-player season totals, including victories summed from match history."""

    model_config = RECORD_CONFIG
    player_id: int
    name: str
    wins: int
    points: Decimal
    match_victories: int
    matches_played: int


# Stat updates


class StatsContribution(BaseModel):
    """Win/point delta a single match adds to one SeasonPlayer."""

    model_config = RECORD_CONFIG
    player_id: int
    wins: int = 0
    points: Decimal = Decimal("0")


class StatsUpdate(BaseModel):
    """
    Old and new totals for one SeasonPlayer.

    The caller reads old_* inside its transaction, writes new_*, and logs when
    clamped is set (a rollback would have gone below zero).
    """

    model_config = RECORD_CONFIG
    player_id: int
    old_wins: int
    old_points: Decimal
    new_wins: int
    new_points: Decimal
    clamped: bool = False

    @property
    def wins_delta(self) -> int:
        return self.new_wins - self.old_wins

    @property
    def points_delta(self) -> Decimal:
        return self.new_points - self.old_points


# Cross-season statistics


class GlobalRankingEntry(BaseModel):
    """All-seasons ranking row for one global player."""

    model_config = RECORD_CONFIG
    player_id: int
    name: str
    season_wins: int
    total_match_wins: int
    total_match_victories: int
    total_points: Decimal
    seasons_participated: int
    is_champion: bool = False


class PlayerDetailedStats(BaseModel):
    """Drill-down statistics for one player across every season."""

    model_config = RECORD_CONFIG
    player_id: int
    name: Optional[str] = None
    total_matches: int
    total_victories: int
    total_points: Decimal
    position_counts: Dict[int, int]
    best_position: Optional[int] = None
    worst_position: Optional[int] = None
    average_position: Decimal
    average_points: Decimal
    average_victories: Decimal
