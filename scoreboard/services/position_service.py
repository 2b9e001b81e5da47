"""
Position resolution service.
Turns per-match win counts into competition-ranked positions.
"""

import logging
from typing import Iterable, List, Union, Dict, Any
from scoreboard.models.schemas import RawMatchEntry, RankedMatchEntry
from scoreboard.utils.exceptions import InvalidMatchEntriesError

logger = logging.getLogger(__name__)

EntryInput = Union[RawMatchEntry, Dict[str, Any]]


def normalize_entries(entries: Iterable[EntryInput]) -> List[RawMatchEntry]:
    """
    Validate a match's raw entries.

    Accepts RawMatchEntry instances or plain dicts (snake_case or camelCase keys).

    Raises:
        InvalidMatchEntriesError: on negative win counts or duplicate player ids
    """
    normalized = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, RawMatchEntry):
            entry = RawMatchEntry.model_validate(entry)
        if entry.wins_in_match < 0:
            raise InvalidMatchEntriesError(
                f"Player {entry.player_id} has negative wins_in_match ({entry.wins_in_match})"
            )
        if entry.player_id in seen:
            raise InvalidMatchEntriesError(f"Player {entry.player_id} appears more than once in the match")
        seen.add(entry.player_id)
        normalized.append(entry)
    return normalized


def resolve_positions(entries: Iterable[EntryInput]) -> List[RankedMatchEntry]:
    """
    Rank match entries by wins_in_match, highest first.

    Uses standard competition ranking: tied entries share the position of the
    first entry with that value and the next distinct value skips ahead
    (5, 5, 1 -> 1, 1, 3). Output is ordered by position, ties keeping input order.

    Args:
        entries: Raw entries, one per participant

    Returns:
        Ranked entries (empty list for empty input)
    """
    normalized = normalize_entries(entries)
    ordered = sorted(normalized, key=lambda e: -e.wins_in_match)

    ranked = []
    position = 0
    previous_wins = None
    for index, entry in enumerate(ordered, start=1):
        if entry.wins_in_match != previous_wins:
            position = index
            previous_wins = entry.wins_in_match
        ranked.append(
            RankedMatchEntry(
                player_id=entry.player_id,
                wins_in_match=entry.wins_in_match,
                position=position,
            )
        )

    logger.debug(f"Resolved positions: {[(e.player_id, e.position) for e in ranked]}")
    return ranked


def count_at_position(position: int, ranked_entries: Iterable[RankedMatchEntry]) -> int:
    """Number of entries sharing the given position."""
    return sum(1 for entry in ranked_entries if entry.position == position)
