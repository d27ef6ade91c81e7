"""
Match, Score, and round models for padel tournaments.

These are plain value objects. The tournament core never persists them;
the caller loads them from storage and writes back whatever the engine
returns.
"""

import enum
from dataclasses import dataclass
from typing import Any, Hashable, Optional


class MatchFormat(enum.Enum):
    """The four scoring regimes a tournament can be played under."""
    A1 = "A1"  # 3 sets to 6 games, real third set
    B1 = "B1"  # 2 sets to 6 games + super tie-break on 1-1
    C1 = "C1"  # 2 sets to 4 games + super tie-break on 1-1
    D1 = "D1"  # 1 set to 9 games


class MatchStatus(enum.Enum):
    """Match lifecycle states."""
    SCHEDULED = "scheduled"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FORFEIT = "forfeit"

    @property
    def is_closed(self) -> bool:
        """Cancelled and forfeit matches are terminal and set by the caller."""
        return self in (MatchStatus.CANCELLED, MatchStatus.FORFEIT)


class RoundType(enum.Enum):
    """Tournament rounds. Progression order lives in RoundOrder, not here."""
    POOL = "pool"
    ROUND_OF_16 = "round_of_16"
    QUARTERS = "quarters"
    SEMIS = "semis"
    FINAL = "final"
    THIRD_PLACE = "third_place"


class Side(enum.Enum):
    """One side of a match."""
    TEAM1 = "team1"
    TEAM2 = "team2"

    @property
    def opponent(self) -> "Side":
        return Side.TEAM2 if self is Side.TEAM1 else Side.TEAM1


@dataclass(frozen=True)
class SetScore:
    """Games won by each side in one set."""
    team1: int
    team2: int

    @property
    def winner(self) -> Optional[Side]:
        if self.team1 > self.team2:
            return Side.TEAM1
        if self.team2 > self.team1:
            return Side.TEAM2
        return None

    def as_pair(self) -> tuple[int, int]:
        return (self.team1, self.team2)


@dataclass(frozen=True)
class SuperTiebreak:
    """Points won by each side in a super tie-break."""
    team1: int
    team2: int

    @property
    def winner(self) -> Optional[Side]:
        if self.team1 > self.team2:
            return Side.TEAM1
        if self.team2 > self.team1:
            return Side.TEAM2
        return None

    def as_pair(self) -> tuple[int, int]:
        return (self.team1, self.team2)


@dataclass(frozen=True)
class Score:
    """
    A structured match score.

    Set count and super tie-break presence depend on the format:
    A1 has 2 or 3 sets and no tie-break, B1/C1 have exactly 2 sets and a
    tie-break only on a 1-1 split, D1 has a single set.
    """
    sets: tuple[SetScore, ...]
    super_tiebreak: Optional[SuperTiebreak] = None

    def games_for(self, side: Side) -> int:
        """Total games won by a side across all sets (tie-break excluded)."""
        if side is Side.TEAM1:
            return sum(s.team1 for s in self.sets)
        return sum(s.team2 for s in self.sets)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "sets": [{"team1": s.team1, "team2": s.team2} for s in self.sets],
        }
        if self.super_tiebreak is not None:
            data["super_tiebreak"] = {
                "team1": self.super_tiebreak.team1,
                "team2": self.super_tiebreak.team2,
            }
        return data


@dataclass
class Match:
    """
    A tournament match.

    team1_ref / team2_ref / pool_id are opaque identifiers owned by the
    registration and pool store. The engine only compares them for equality.
    """
    id: Optional[Hashable]  # None until the store assigns one
    round_type: RoundType
    match_order: int
    team1_ref: Optional[Hashable] = None
    team2_ref: Optional[Hashable] = None
    round_number: Optional[int] = None
    pool_id: Optional[Hashable] = None
    is_bye: bool = False
    status: MatchStatus = MatchStatus.SCHEDULED
    winner_ref: Optional[Hashable] = None
    score: Optional[Score] = None

    @property
    def is_complete(self) -> bool:
        return self.status == MatchStatus.COMPLETED and self.winner_ref is not None

    def ref_for(self, side: Side) -> Optional[Hashable]:
        return self.team1_ref if side is Side.TEAM1 else self.team2_ref

    def present_refs(self) -> list[Hashable]:
        """Team references actually on court (the empty side of a bye is skipped)."""
        return [ref for ref in (self.team1_ref, self.team2_ref) if ref is not None]
