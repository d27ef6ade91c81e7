"""
Pool Standings - Round-robin rankings derived from match results.

Standings are never stored. They are recomputed from the pool's matches
every time they are needed.

Ordering:
1. Wins (desc)
2. Team name (asc)

The name tiebreak is a known simplification carried over from the club
app: it keeps the table deterministic but is not a sporting criterion.
Set and game counters are collected for display only and never affect
the order.
"""

from dataclasses import dataclass
from typing import Hashable, Iterable, Mapping, Optional

from models.match import Match, MatchStatus, Side


@dataclass
class PoolStanding:
    """Team standing within a pool."""
    team_ref: Hashable
    name: str
    win_count: int = 0
    played: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0

    @property
    def set_differential(self) -> int:
        return self.sets_won - self.sets_lost

    @property
    def game_differential(self) -> int:
        return self.games_won - self.games_lost


def _count_result(standings: dict, match: Match) -> None:
    """Add one completed match's wins, sets, and games to the table."""
    standings[match.winner_ref].win_count += 1

    for side in Side:
        ref = match.ref_for(side)
        if ref is None:
            continue
        standings[ref].played += 1

        score = match.score
        if score is None:
            continue
        opponent = side.opponent
        standings[ref].games_won += score.games_for(side)
        standings[ref].games_lost += score.games_for(opponent)

        deciders = list(score.sets)
        if score.super_tiebreak is not None:
            deciders.append(score.super_tiebreak)
        for decider in deciders:
            if decider.winner is side:
                standings[ref].sets_won += 1
            elif decider.winner is opponent:
                standings[ref].sets_lost += 1


def calculate_pool_standings(
    matches: Iterable[Match],
    names: Optional[Mapping[Hashable, str]] = None,
) -> list[PoolStanding]:
    """
    Rank the teams of one pool.

    Args:
        matches: Every match of the pool, in any state
        names: Display names by team reference; str(team_ref) if missing

    Returns:
        Standings sorted by wins desc, then name asc
    """
    names = names or {}
    standings: dict[Hashable, PoolStanding] = {}

    matches = list(matches)
    for match in matches:
        for ref in match.present_refs():
            if ref not in standings:
                standings[ref] = PoolStanding(
                    team_ref=ref,
                    name=names.get(ref, str(ref)),
                )

    for match in matches:
        if match.status != MatchStatus.COMPLETED or match.winner_ref is None:
            continue
        if match.winner_ref not in standings:
            continue
        _count_result(standings, match)

    return sorted(
        standings.values(),
        key=lambda s: (-s.win_count, s.name, str(s.team_ref)),
    )


def pool_qualifiers(standings: list[PoolStanding], count: int = 2) -> list[PoolStanding]:
    """Top `count` teams of a pool, or fewer if the pool is smaller."""
    return standings[:count]


def is_pool_complete(matches: Iterable[Match]) -> bool:
    """True when every match that is still on the schedule has a result."""
    return all(
        m.is_complete
        for m in matches
        if m.status != MatchStatus.CANCELLED
    )
