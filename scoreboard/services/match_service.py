"""
Match scoring service.

Scores a match from raw win counts and plans the SeasonPlayer updates for
saving, deleting, and editing a match. Nothing here touches storage: the plan_*
functions take the roster the caller just read and return the totals to write,
so the caller can run read, compute, and write inside one transaction.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Dict, Tuple, Optional
from scoreboard.models.schemas import (
    MatchRecord,
    ResolvedMatch,
    ResolvedMatchPlayer,
    SeasonPlayerRecord,
    StatsContribution,
    StatsUpdate,
)
from scoreboard.services.position_service import EntryInput, resolve_positions
from scoreboard.services.points_service import calculate_points
from scoreboard.services.stats_service import apply_contribution
from scoreboard.utils.exceptions import InvalidMatchEntriesError, PlayerNotInSeasonError

logger = logging.getLogger(__name__)


# ============================================================================
# Scoring
# ============================================================================

def score_match(entries: Iterable[EntryInput]) -> List[ResolvedMatchPlayer]:
    """
    Resolve positions and points for every participant of a match.

    Args:
        entries: Raw entries ({player_id, wins_in_match}), one per participant

    Returns:
        Resolved players ordered by position

    Raises:
        InvalidMatchEntriesError: if there are no participants or the entries are malformed
    """
    ranked = resolve_positions(entries)
    if not ranked:
        raise InvalidMatchEntriesError("A match needs at least one participant")

    return [
        ResolvedMatchPlayer(
            player_id=entry.player_id,
            wins_in_match=entry.wins_in_match,
            position=entry.position,
            points_earned=calculate_points(entry.position, ranked),
        )
        for entry in ranked
    ]


def resolve_match(match: MatchRecord) -> ResolvedMatch:
    """Score a stored match."""
    return ResolvedMatch(
        id=match.id,
        season_id=match.season_id,
        date=match.date,
        players=score_match(match.entries),
    )


def match_contributions(players: Iterable[ResolvedMatchPlayer]) -> List[StatsContribution]:
    """
    What each participant's result adds to their season totals.

    A match win (position 1, shared or not) counts as one season win.
    """
    return [
        StatsContribution(
            player_id=player.player_id,
            wins=1 if player.position == 1 else 0,
            points=player.points_earned,
        )
        for player in players
    ]


# ============================================================================
# Save / delete / edit plans
# ============================================================================

def _roster_by_player(roster: Iterable[SeasonPlayerRecord]) -> Dict[int, SeasonPlayerRecord]:
    return {player.player_id: player for player in roster}


def plan_match_save(
    roster: Iterable[SeasonPlayerRecord],
    entries: Iterable[EntryInput],
    season_id: Optional[int] = None,
) -> Tuple[List[ResolvedMatchPlayer], List[StatsUpdate]]:
    """
    Score a new match and compute the roster totals after saving it.

    Args:
        roster: Current SeasonPlayer totals of the season
        entries: Raw entries for the new match
        season_id: Used only for error messages

    Returns:
        Tuple of (resolved players to store, stat updates to write)

    Raises:
        PlayerNotInSeasonError: if a participant has no roster entry
    """
    by_player = _roster_by_player(roster)
    resolved = score_match(entries)

    updates = []
    for contribution in match_contributions(resolved):
        current = by_player.get(contribution.player_id)
        if current is None:
            raise PlayerNotInSeasonError(contribution.player_id, season_id)
        new_wins, new_points, clamped = apply_contribution(current.wins, current.points, contribution)
        updates.append(
            StatsUpdate(
                player_id=current.player_id,
                old_wins=current.wins,
                old_points=current.points,
                new_wins=new_wins,
                new_points=new_points,
                clamped=clamped,
            )
        )

    logger.debug(f"Planned match save for season {season_id}: {len(updates)} stat updates")
    return resolved, updates


def plan_match_delete(
    roster: Iterable[SeasonPlayerRecord],
    match: MatchRecord,
) -> List[StatsUpdate]:
    """
    Compute the roster totals after removing a match's contribution.

    Participants no longer on the roster have nothing to roll back and are
    skipped. Totals that would drop below zero are clamped and flagged. A match
    without entries contributed nothing, so deleting it changes nothing.
    """
    if not match.entries:
        logger.debug(f"Match {match.id} has no entries, nothing to roll back")
        return []

    by_player = _roster_by_player(roster)

    updates = []
    for contribution in match_contributions(score_match(match.entries)):
        current = by_player.get(contribution.player_id)
        if current is None:
            logger.debug(
                f"Skipping rollback for player {contribution.player_id}: not on roster of season {match.season_id}"
            )
            continue
        new_wins, new_points, clamped = apply_contribution(
            current.wins, current.points, contribution, sign=-1
        )
        updates.append(
            StatsUpdate(
                player_id=current.player_id,
                old_wins=current.wins,
                old_points=current.points,
                new_wins=new_wins,
                new_points=new_points,
                clamped=clamped,
            )
        )

    logger.debug(f"Planned deletion of match {match.id}: {len(updates)} stat updates")
    return updates


def plan_match_edit(
    roster: Iterable[SeasonPlayerRecord],
    old_match: MatchRecord,
    new_entries: Iterable[EntryInput],
) -> Tuple[List[ResolvedMatchPlayer], List[StatsUpdate]]:
    """
    Replace a match's results and compute the resulting roster totals.

    The old result is rolled back in full for every old participant, the new
    entries are scored from scratch, and the new result is applied. Players in
    both the old and new result get one combined update. A stored match without
    entries has nothing to roll back, so only the new result is applied.

    Returns:
        Tuple of (resolved players replacing the old ones, stat updates to write)

    Raises:
        PlayerNotInSeasonError: if a new participant has no roster entry
    """
    by_player = _roster_by_player(roster)
    old_contributions = []
    if old_match.entries:
        old_contributions = match_contributions(score_match(old_match.entries))
    resolved = score_match(new_entries)
    new_contributions = match_contributions(resolved)

    for contribution in new_contributions:
        if contribution.player_id not in by_player:
            raise PlayerNotInSeasonError(contribution.player_id, old_match.season_id)

    # Running totals per affected player: (wins, points, clamped)
    totals: Dict[int, Tuple[int, Decimal, bool]] = {}

    for contribution in old_contributions:
        current = by_player.get(contribution.player_id)
        if current is None:
            continue
        totals[current.player_id] = apply_contribution(current.wins, current.points, contribution, sign=-1)

    for contribution in new_contributions:
        current = by_player[contribution.player_id]
        wins, points, clamped = totals.get(current.player_id, (current.wins, current.points, False))
        new_wins, new_points, _ = apply_contribution(wins, points, contribution)
        totals[current.player_id] = (new_wins, new_points, clamped)

    updates = [
        StatsUpdate(
            player_id=player.player_id,
            old_wins=player.wins,
            old_points=player.points,
            new_wins=totals[player.player_id][0],
            new_points=totals[player.player_id][1],
            clamped=totals[player.player_id][2],
        )
        for player in by_player.values()
        if player.player_id in totals
    ]

    logger.debug(f"Planned edit of match {old_match.id}: {len(updates)} stat updates")
    return resolved, updates


def apply_updates(
    roster: Iterable[SeasonPlayerRecord],
    updates: Iterable[StatsUpdate],
) -> List[SeasonPlayerRecord]:
    """
    Return a copy of the roster with the planned totals written in.

    The input records are not modified.
    """
    by_player = {update.player_id: update for update in updates}
    updated = []
    for player in roster:
        update = by_player.get(player.player_id)
        if update is None:
            updated.append(player.model_copy())
        else:
            updated.append(player.model_copy(update={"wins": update.new_wins, "points": update.new_points}))
    return updated
