"""
Leaderboard builder - ranks user totals for any scoring context.

Ranking uses standard competition ranking: tied totals share a rank and the
next rank skips by the size of the tie group (1, 1, 3). Rank 1 is always the
best standing, whatever the sort direction of the context.
"""

from typing import Iterable, Optional, Sequence

from paddock_picks.models.leaderboard import (
    ContextKind,
    LeaderboardEntry,
    PositionChange,
    SortDirection,
)
from paddock_picks.models.score import UserTotal


CONTEXT_DIRECTIONS = {
    ContextKind.TRACK_ORDER: SortDirection.ASCENDING,
    ContextKind.WINNER_PICK: SortDirection.ASCENDING,
    ContextKind.MULTI_CLASS: SortDirection.DESCENDING,
}


def direction_for(kind: ContextKind) -> SortDirection:
    return CONTEXT_DIRECTIONS[kind]


def average_points(total_points: float, contexts_participated: int) -> float:
    """Average over contexts with a recorded result, never over possible ones."""
    if contexts_participated <= 0:
        return 0.0
    return total_points / contexts_participated


def build_leaderboard(
    user_totals: Iterable[UserTotal],
    direction: SortDirection,
    prior_leaderboard: Optional[Sequence[LeaderboardEntry]] = None
) -> list[LeaderboardEntry]:
    """
    Rank user totals.

    Args:
        user_totals: one total per user
        direction: ASCENDING for golf-style contexts, DESCENDING otherwise
        prior_leaderboard: previous run; when given every entry gets a
            position_change (prior rank - current rank, positive = moved up)

    Returns:
        New entries ordered by rank; ties are listed by display name then user id.
    """
    sign = 1 if direction == SortDirection.ASCENDING else -1
    ordered = sorted(
        user_totals,
        key=lambda t: (sign * t.total_points, t.display_name or "", t.user_id)
    )

    prior_ranks = None
    if prior_leaderboard is not None:
        prior_ranks = {entry.user_id: entry.rank for entry in prior_leaderboard}

    entries: list[LeaderboardEntry] = []
    rank = 0
    previous_points = None

    for position, total in enumerate(ordered, start=1):
        if total.total_points != previous_points:
            rank = position
            previous_points = total.total_points

        position_change = None
        if prior_ranks is not None:
            prior_rank = prior_ranks.get(total.user_id)
            if prior_rank is None:
                position_change = PositionChange(change=0, is_new=True)
            else:
                position_change = PositionChange(change=prior_rank - rank, is_new=False)

        entries.append(LeaderboardEntry(
            user_id=total.user_id,
            display_name=total.display_name,
            rank=rank,
            total_points=total.total_points,
            contexts_participated=total.contexts_participated,
            average_points=average_points(total.total_points, total.contexts_participated),
            breakdown=dict(total.breakdown),
            position_change=position_change,
        ))

    return entries


def aggregate_user_totals(totals: Iterable[UserTotal], context_id: str) -> list[UserTotal]:
    """
    Merge per-context totals (e.g. one per event) into one total per user
    for a wider context (a season or all time).
    """
    merged: dict[str, UserTotal] = {}

    for total in totals:
        current = merged.get(total.user_id)
        if current is None:
            merged[total.user_id] = UserTotal(
                user_id=total.user_id,
                context_id=context_id,
                display_name=total.display_name,
                total_points=total.total_points,
                contexts_participated=total.contexts_participated,
                breakdown=dict(total.breakdown),
            )
            continue

        current.total_points += total.total_points
        current.contexts_participated += total.contexts_participated
        current.display_name = current.display_name or total.display_name
        for key, value in total.breakdown.items():
            current.breakdown[key] = current.breakdown.get(key, 0) + value

    return list(merged.values())
