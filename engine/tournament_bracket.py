"""
Tournament Bracket Engine

Knockout planning and progression through rounds:
Pool -> Round of 16 -> Quarter-finals -> Semi-finals -> Final

The round order is an explicit RoundOrder value passed to every function
so it can be swapped in tests. The third-place match is never part of the
order and is never advanced automatically.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from config import BRACKET_SETTINGS, BracketSettings
from engine.errors import (
    AdvancementParityError,
    BracketError,
    InvalidWinnerError,
    NoNextRoundError,
    RoundAlreadyAdvancedError,
    RoundIncompleteError,
    UnsupportedBracketSizeError,
)
from models.match import Match, MatchStatus, RoundType


@dataclass(frozen=True)
class RoundOrder:
    """Ordered tournament rounds used for progression."""
    rounds: tuple[RoundType, ...]

    def __post_init__(self):
        if not self.rounds:
            raise ValueError("Round order cannot be empty")
        if len(set(self.rounds)) != len(self.rounds):
            raise ValueError(f"Round order has duplicate rounds: {self.rounds}")

    def __contains__(self, round_type: RoundType) -> bool:
        return round_type in self.rounds

    def index(self, round_type: RoundType) -> int:
        return self.rounds.index(round_type)

    def next_round(self, round_type: RoundType) -> Optional[RoundType]:
        """The round after `round_type`, or None if it is last or not in the order."""
        if round_type not in self.rounds:
            return None
        position = self.rounds.index(round_type)
        if position + 1 < len(self.rounds):
            return self.rounds[position + 1]
        return None

    @property
    def knockout_rounds(self) -> tuple[RoundType, ...]:
        return tuple(r for r in self.rounds if r != RoundType.POOL)


DEFAULT_ROUND_ORDER = RoundOrder(BRACKET_SETTINGS.round_order)

# Teams a knockout round holds when it is the first round of the bracket
ROUND_CAPACITY = {
    RoundType.ROUND_OF_16: 16,
    RoundType.QUARTERS: 8,
    RoundType.SEMIS: 4,
    RoundType.FINAL: 2,
}

# Starting round by bracket size, largest first
STARTING_ROUND_TABLE = [
    (16, RoundType.ROUND_OF_16),
    (8, RoundType.QUARTERS),
    (4, RoundType.SEMIS),
    (2, RoundType.FINAL),
]


@dataclass(frozen=True)
class KnockoutPlan:
    """Where a knockout bracket starts and how many slots it needs."""
    round_type: RoundType
    qualified_count: int
    bracket_size: int
    slot_count: int
    bye_count: int = 0

    @property
    def contested_matches(self) -> int:
        """First-round slots with two teams on court."""
        return self.slot_count - self.bye_count


def _next_power_of_two(n: int) -> int:
    size = 1
    while size < n:
        size *= 2
    return size


def plan_knockout(qualified_count: int,
                  order: RoundOrder = DEFAULT_ROUND_ORDER) -> Optional[KnockoutPlan]:
    """
    Pick the starting knockout round for a number of qualified teams.

    The count is rounded up to a power of two (the bracket size) and looked
    up in STARTING_ROUND_TABLE: >=16 round of 16, >=8 quarters, >=4 semis,
    >=2 final. Missing teams become byes.

    Args:
        qualified_count: Teams coming out of pool play
        order: Round order; only its knockout rounds can start a bracket

    Returns:
        KnockoutPlan, or None when fewer than 2 teams qualified

    Raises:
        UnsupportedBracketSizeError: If the bracket is bigger than the
            largest starting round in `order`
    """
    if qualified_count < 2:
        return None

    bracket_size = _next_power_of_two(qualified_count)
    for threshold, round_type in STARTING_ROUND_TABLE:
        if round_type not in order:
            continue
        if bracket_size >= threshold:
            if bracket_size > ROUND_CAPACITY[round_type]:
                break
            return KnockoutPlan(
                round_type=round_type,
                qualified_count=qualified_count,
                bracket_size=bracket_size,
                slot_count=bracket_size // 2,
                bye_count=bracket_size - qualified_count,
            )

    raise UnsupportedBracketSizeError(
        f"No starting round holds {qualified_count} teams "
        f"(bracket of {bracket_size})"
    )


def plan_knockout_from_pools(pool_count: int,
                             settings: BracketSettings = BRACKET_SETTINGS,
                             order: RoundOrder = DEFAULT_ROUND_ORDER) -> Optional[KnockoutPlan]:
    """Plan the bracket for a pool stage where the top N of each pool qualify."""
    return plan_knockout(pool_count * settings.qualifiers_per_pool, order)


def materialize_round(plan: KnockoutPlan) -> list[Match]:
    """
    Create empty match slots for the planned first round.

    Teams are left unset: who plays whom is decided by the seeding caller.
    """
    return [
        Match(
            id=None,
            round_type=plan.round_type,
            match_order=position + 1,
            status=MatchStatus.SCHEDULED,
        )
        for position in range(plan.slot_count)
    ]


def observe_existing_rounds(matches: Iterable[Match],
                            order: RoundOrder = DEFAULT_ROUND_ORDER) -> Optional[RoundType]:
    """
    Explicit-bracket mode: nothing is generated.

    Returns the earliest knockout round that already has matches, or None
    if the bracket has not been drawn yet.
    """
    present = {m.round_type for m in matches}
    for round_type in order.knockout_rounds:
        if round_type in present:
            return round_type
    return None


def advance_round(round_type: RoundType,
                  matches: Iterable[Match],
                  existing_next: Iterable[Match] = (),
                  order: RoundOrder = DEFAULT_ROUND_ORDER) -> list[Match]:
    """
    Build the next round from the winners of a completed round.

    Winners are paired in match_order: winner of match 1 vs winner of
    match 2 becomes next-round match 1, and so on.

    Args:
        round_type: The round that just finished
        matches: Matches of that round (other rounds are ignored)
        existing_next: Matches already stored for the next round
        order: Round order used to find the next round

    Returns:
        New scheduled matches for the next round, match_order from 1

    Raises:
        NoNextRoundError: If `round_type` is the last round or not in the order
        RoundIncompleteError: If the round is empty or has unfinished matches
        InvalidWinnerError: If a winner is not one of its match's teams
        RoundAlreadyAdvancedError: If the next round already has matches
        AdvancementParityError: If the round produced an odd number of winners
    """
    if round_type == RoundType.POOL:
        raise BracketError(
            "Pool results are turned into a bracket with plan_knockout",
            round_type=round_type,
        )

    next_round = order.next_round(round_type)
    if next_round is None:
        raise NoNextRoundError(
            f"No round follows {round_type.value}",
            round_type=round_type,
        )

    matches = list(matches)
    round_matches = [m for m in matches if m.round_type == round_type]
    if not round_matches:
        raise RoundIncompleteError(
            f"Round {round_type.value} has no matches",
            round_type=round_type,
        )

    unfinished = [m for m in round_matches if not m.is_complete]
    if unfinished:
        raise RoundIncompleteError(
            f"Round {round_type.value} has {len(unfinished)} unfinished matches",
            round_type=round_type,
        )

    for m in round_matches:
        if m.winner_ref not in m.present_refs():
            raise InvalidWinnerError(
                f"Match {m.id} in {round_type.value}: winner {m.winner_ref!r} "
                f"did not play it",
                round_type=round_type,
            )

    already = [m for m in [*matches, *existing_next] if m.round_type == next_round]
    if already:
        raise RoundAlreadyAdvancedError(
            f"Round {next_round.value} already has {len(already)} matches",
            round_type=next_round,
        )

    winners = [m.winner_ref for m in sorted(round_matches, key=lambda m: m.match_order)]
    if len(winners) % 2:
        raise AdvancementParityError(
            f"Round {round_type.value} produced {len(winners)} winners, "
            f"cannot pair an odd number",
            round_type=round_type,
        )

    return [
        Match(
            id=None,
            round_type=next_round,
            match_order=position + 1,
            team1_ref=winners[2 * position],
            team2_ref=winners[2 * position + 1],
            status=MatchStatus.SCHEDULED,
        )
        for position in range(len(winners) // 2)
    ]


def find_advanceable_round(matches: Iterable[Match],
                           order: RoundOrder = DEFAULT_ROUND_ORDER) -> Optional[RoundType]:
    """
    Find the round that can be advanced right now.

    That is the first knockout round in `order` whose matches are all
    complete and whose next round has no matches yet. None if there is no
    such round.
    """
    matches = list(matches)
    present = {m.round_type for m in matches}

    for round_type in order.knockout_rounds:
        next_round = order.next_round(round_type)
        if next_round is None or round_type not in present:
            continue
        if next_round in present:
            continue
        if all(m.is_complete for m in matches if m.round_type == round_type):
            return round_type

    return None
