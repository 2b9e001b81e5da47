"""
Shared pytest configuration for scoring engine tests.

Fixtures build plain records; there is no database involved.
"""

from datetime import datetime
from decimal import Decimal
import pytest
import pytz
from scoreboard.models.schemas import (
    GlobalPlayer,
    MatchRecord,
    RawMatchEntry,
    SeasonPlayerRecord,
    SeasonRecord,
)


def make_match(match_id, season_id, results, date=None):
    """Build a MatchRecord from {player_id: wins_in_match}."""
    return MatchRecord(
        id=match_id,
        season_id=season_id,
        date=date,
        entries=[RawMatchEntry(player_id=pid, wins_in_match=wins) for pid, wins in results.items()],
    )


def make_roster(totals, names=None):
    """Build a roster from {player_id: (wins, points)}."""
    names = names or {}
    return [
        SeasonPlayerRecord(
            player_id=pid,
            name=names.get(pid, f"Player {pid}"),
            wins=wins,
            points=Decimal(str(points)),
        )
        for pid, (wins, points) in totals.items()
    ]


@pytest.fixture
def build_match():
    """Factory for MatchRecord objects."""
    return make_match


@pytest.fixture
def build_roster():
    """Factory for season rosters."""
    return make_roster


@pytest.fixture
def global_players():
    """Four global players."""
    return [
        GlobalPlayer(id=1, name="Alice"),
        GlobalPlayer(id=2, name="Bob"),
        GlobalPlayer(id=3, name="Charlie"),
        GlobalPlayer(id=4, name="Dave"),
    ]


@pytest.fixture
def player_names(global_players):
    return {player.id: player.name for player in global_players}


@pytest.fixture
def finished_season(player_names):
    """
    Closed season with three matches and totals consistent with its history.

    Match 1: Alice 5, Bob 3, Charlie 1        -> Alice 3, Bob 1, Charlie 0
    Match 2: Alice 4, Bob 4, Charlie 2, Dave 0 -> Alice 2.5, Bob 2.5, Charlie 0, Dave 0
    Match 3: Bob 6, Charlie 2, Dave 2         -> Bob 3, Charlie 1.5, Dave 1.5
    """
    matches = [
        make_match(1, 1, {1: 5, 2: 3, 3: 1}),
        make_match(2, 1, {1: 4, 2: 4, 3: 2, 4: 0}),
        make_match(3, 1, {2: 6, 3: 2, 4: 2}),
    ]
    roster = make_roster(
        {1: (2, "5.5"), 2: (2, "6.5"), 3: (0, "1.5"), 4: (0, "1.5")},
        player_names,
    )
    return SeasonRecord(
        id=1,
        name="Season 1",
        start_date=datetime(2024, 1, 1, tzinfo=pytz.UTC),
        end_date=datetime(2024, 3, 31, tzinfo=pytz.UTC),
        is_active=False,
        players=roster,
        matches=matches,
    )


@pytest.fixture
def active_season_record(player_names):
    """
    Active season where Alice and Charlie tie on points.

    Match 10: Alice 3, Charlie 3, Dave 1 -> Alice 2.5, Charlie 2.5, Dave 0
    """
    matches = [make_match(10, 2, {1: 3, 3: 3, 4: 1})]
    roster = make_roster(
        {1: (1, "2.5"), 3: (1, "2.5"), 4: (0, "0")},
        player_names,
    )
    return SeasonRecord(
        id=2,
        name="Season 2",
        start_date=datetime(2024, 4, 1, tzinfo=pytz.UTC),
        is_active=True,
        players=roster,
        matches=matches,
    )
