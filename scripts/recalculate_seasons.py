#!/usr/bin/env python3
"""
Recalculate season totals from a JSON export of all seasons.

This script:
1. Loads every season (roster + match history) from the export file
2. Rebuilds each roster's wins/points from the match history
3. Prints each season's leaderboard and the all-seasons ranking
4. Optionally writes the corrected export back out (--write PATH)

Usage:
    python scripts/recalculate_seasons.py seasons.json [--write corrected.json]
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List

# Add project root to path (so scoreboard.* imports work without installing)
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from pydantic import TypeAdapter, ValidationError  # noqa: E402
from scoreboard.models.schemas import SeasonRecord  # noqa: E402
from scoreboard.services import global_stats_service, season_service, settings_service  # noqa: E402
from scoreboard.utils.exceptions import ScoringError  # noqa: E402

SEASONS_ADAPTER = TypeAdapter(List[SeasonRecord])


def recalculate_all_seasons(path: Path, write_path=None) -> int:
    """Recalculate every season in the export. Returns a process exit code."""
    try:
        seasons = SEASONS_ADAPTER.validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        print(f"❌ Could not load seasons from {path}: {e}")
        return 1

    print("=" * 60)
    print(f"📊 Recalculating {len(seasons)} season(s)")
    print("=" * 60)

    corrected = []
    failed = 0
    for idx, season in enumerate(seasons, 1):
        print(f"[{idx}/{len(seasons)}] {season.name} (ID: {season.id}) {season_service.season_date_range(season)}")
        try:
            players = season_service.recalculate_season_totals(season)
        except ScoringError as e:
            print(f"   ❌ Error: {e}")
            failed += 1
            corrected.append(season)
            continue

        season = season.model_copy(update={"players": players})
        corrected.append(season)
        winners = ", ".join(p.name for p in season_service.season_winners(players)) or "-"
        print(f"   ✓ {len(players)} players, {len(season.matches)} matches, winner(s): {winners}")
        for entry in season_service.build_leaderboard(players):
            print(f"      {entry.rank:>3}. {entry.name:<20} {entry.points:>7} pts  {entry.wins:>3} wins")
        print()

    print("=" * 60)
    print("🏆 All seasons")
    print("=" * 60)
    for row in global_stats_service.global_rankings(corrected):
        marker = "👑" if row.is_champion else "  "
        print(
            f"{marker} {row.name:<20} seasons won {row.season_wins:>2}  "
            f"match wins {row.total_match_wins:>3}  victories {row.total_match_victories:>4}  "
            f"points {row.total_points:>7}"
        )

    if write_path is not None:
        Path(write_path).write_bytes(SEASONS_ADAPTER.dump_json(corrected, by_alias=True, indent=2))
        print(f"\n✓ Corrected export written to {write_path}")

    if failed:
        print(f"\n❌ {failed} season(s) could not be recalculated")
        return 1
    print("\n✅ All calculations complete!")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("path", type=Path, help="JSON file with a list of seasons")
    parser.add_argument("--write", dest="write_path", help="Write the corrected seasons to this file")
    args = parser.parse_args()

    settings_service.configure_logging()
    settings_service.configure_locale()
    return recalculate_all_seasons(args.path, args.write_path)


if __name__ == "__main__":
    sys.exit(main())
