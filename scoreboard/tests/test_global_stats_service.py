"""
Tests for cross-season rankings and detailed player statistics.
"""
from datetime import datetime
from decimal import Decimal
import pytest
from scoreboard.models.schemas import GlobalPlayer, SeasonPlayerRecord, SeasonRecord
from scoreboard.services import global_stats_service, season_service


def test_global_rankings(finished_season, active_season_record):
    """
    Season 1 is won by Bob; season 2 is shared by Alice and Charlie.

    Alice, Bob and Charlie each have one season win, so match wins break the tie.
    """
    rankings = global_stats_service.global_rankings([finished_season, active_season_record])
    rows = [
        (
            r.name,
            r.season_wins,
            r.total_match_wins,
            r.total_match_victories,
            r.total_points,
            r.seasons_participated,
            r.is_champion,
        )
        for r in rankings
    ]
    assert rows == [
        ("Alice", 1, 3, 12, Decimal("8"), 2, True),
        ("Bob", 1, 2, 13, Decimal("6.5"), 1, True),
        ("Charlie", 1, 1, 8, Decimal("4"), 2, True),
        ("Dave", 0, 0, 3, Decimal("1.5"), 2, False),
    ]


def test_global_rankings_sums_season_wins():
    """A player tied for first in three seasons has three season wins."""
    seasons = []
    for season_id in range(1, 4):
        seasons.append(
            SeasonRecord(
                id=season_id,
                name=f"S{season_id}",
                players=[
                    SeasonPlayerRecord(player_id=1, name="Alice", wins=1, points=Decimal("5")),
                    SeasonPlayerRecord(player_id=2, name="Bob", wins=2, points=Decimal("5")),
                    SeasonPlayerRecord(player_id=3, name="Carl", wins=0, points=Decimal("1")),
                ],
            )
        )
    rankings = {r.player_id: r for r in global_stats_service.global_rankings(seasons)}
    assert rankings[1].season_wins == 3
    assert rankings[2].season_wins == 3
    assert rankings[3].season_wins == 0
    assert rankings[1].is_champion and rankings[2].is_champion
    assert not rankings[3].is_champion


def test_global_rankings_empty_roster():
    """A season without a roster contributes no ranking rows."""
    seasons = [SeasonRecord(id=1, name="Empty")]
    assert global_stats_service.global_rankings(seasons) == []


def test_global_rankings_name_tie_break():
    """Identical stats fall back to name order."""
    season = SeasonRecord(
        id=1,
        name="S",
        players=[
            SeasonPlayerRecord(player_id=1, name="Zoe", wins=0, points=Decimal("0")),
            SeasonPlayerRecord(player_id=2, name="Adam", wins=0, points=Decimal("0")),
        ],
    )
    rankings = global_stats_service.global_rankings([season])
    assert [r.name for r in rankings] == ["Adam", "Zoe"]
    # Both tie at zero points, so both won the season
    assert all(r.season_wins == 1 for r in rankings)


def test_global_rankings_fresh_season_makes_everyone_champion(global_players):
    """A season with no matches yet is a shared win at zero points for its whole roster."""
    season = season_service.create_season(1, "Fresh", global_players)
    rankings = global_stats_service.global_rankings([season])
    assert [(r.season_wins, r.is_champion) for r in rankings] == [(1, True)] * len(global_players)


def test_global_rankings_counts_history_of_removed_players(finished_season, active_season_record):
    """Victories from a season a player was removed from still count."""
    season = season_service.remove_player_from_season(finished_season, 3)
    rankings = {r.player_id: r for r in global_stats_service.global_rankings([season, active_season_record])}
    assert rankings[3].seasons_participated == 1
    assert rankings[3].total_match_victories == 8


def test_global_rankings_uses_current_names(finished_season):
    """Global player names override roster snapshots."""
    rankings = global_stats_service.global_rankings(
        [finished_season], players=[GlobalPlayer(id=2, name="Robert")]
    )
    assert rankings[0].name == "Robert"


def test_global_rankings_name_from_latest_season():
    """The roster name of the most recently started season wins, whatever the input order."""
    newer = SeasonRecord(
        id=2,
        name="Spring",
        start_date=datetime(2024, 3, 1),
        players=[SeasonPlayerRecord(player_id=1, name="Alexandra", wins=0, points=Decimal("0"))],
    )
    older = SeasonRecord(
        id=1,
        name="Winter",
        start_date=datetime(2024, 1, 1),
        players=[SeasonPlayerRecord(player_id=1, name="Alex", wins=0, points=Decimal("0"))],
    )
    rankings = global_stats_service.global_rankings([newer, older])
    assert [r.name for r in rankings] == ["Alexandra"]
    assert rankings[0].seasons_participated == 2


def test_player_detailed_stats(finished_season, active_season_record):
    """
    Alice: M1 pos 1 (3), M2 pos 1 (2.5), M10 pos 1 (2.5).
    Dave: M2 pos 4 (0), M3 pos 2 (1.5), M10 pos 3 (0).
    """
    seasons = [finished_season, active_season_record]

    alice = global_stats_service.player_detailed_stats(seasons, 1, name="Alice")
    assert alice.name == "Alice"
    assert alice.total_matches == 3
    assert alice.total_victories == 12
    assert alice.total_points == Decimal("8")
    assert alice.position_counts == {1: 3, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0}
    assert (alice.best_position, alice.worst_position) == (1, 1)
    assert alice.average_position == Decimal("1.00")
    assert alice.average_points == Decimal("2.67")
    assert alice.average_victories == Decimal("4.00")

    dave = global_stats_service.player_detailed_stats(seasons, 4)
    assert dave.total_matches == 3
    assert dave.total_points == Decimal("1.5")
    assert dave.position_counts == {1: 0, 2: 1, 3: 1, 4: 1, 5: 0, 6: 0}
    assert (dave.best_position, dave.worst_position) == (2, 4)
    assert dave.average_position == Decimal("3.00")
    assert dave.average_points == Decimal("0.50")
    assert dave.average_victories == Decimal("1.00")


def test_player_detailed_stats_no_matches(finished_season):
    """No participations gives zero averages and no best/worst."""
    stats = global_stats_service.player_detailed_stats([finished_season], 42)
    assert stats.total_matches == 0
    assert stats.total_points == Decimal("0")
    assert stats.best_position is None
    assert stats.worst_position is None
    assert stats.average_position == Decimal("0")
    assert stats.average_points == Decimal("0")
    assert stats.average_victories == Decimal("0")


def test_player_detailed_stats_histogram_limit(build_match, monkeypatch):
    """Positions beyond the histogram size count everywhere except the histogram."""
    match = build_match(1, 1, {1: 7, 2: 6, 3: 5, 4: 4, 5: 3, 6: 2, 7: 1})
    season = SeasonRecord(id=1, name="Big", matches=[match])

    stats = global_stats_service.player_detailed_stats([season], 7)
    assert stats.total_matches == 1
    assert stats.worst_position == 7
    assert sum(stats.position_counts.values()) == 0

    monkeypatch.setenv("POSITION_HISTOGRAM_SIZE", "8")
    stats = global_stats_service.player_detailed_stats([season], 7)
    assert stats.position_counts[7] == 1


@pytest.mark.parametrize(
    "value,places,expected",
    [
        (Decimal("2.666666"), 2, Decimal("2.67")),
        (Decimal("0.125"), 2, Decimal("0.13")),
        (Decimal("3"), 1, Decimal("3.0")),
    ],
)
def test_round_for_display(value, places, expected):
    assert global_stats_service.round_for_display(value, places) == expected
