"""
Pydantic schemas for data validation at the service boundary.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from models.match import (
    Match,
    MatchFormat,
    MatchStatus,
    RoundType,
    Score,
    SetScore,
    Side,
    SuperTiebreak,
)


# Opaque registration / pool identifiers as they come out of the store
TeamRef = Union[int, str]


# ============ Score Schemas ============

class SetScoreIn(BaseModel):
    """Games (or tie-break points) for one set."""
    team1: int = Field(..., ge=0)
    team2: int = Field(..., ge=0)

    class Config:
        from_attributes = True


class ScoreIn(BaseModel):
    """A score already split into sets and an optional super tie-break."""
    sets: list[SetScoreIn] = Field(..., min_length=1, max_length=3)
    super_tiebreak: Optional[SetScoreIn] = None

    class Config:
        from_attributes = True

    def to_score(self) -> Score:
        return Score(
            sets=tuple(SetScore(s.team1, s.team2) for s in self.sets),
            super_tiebreak=(
                SuperTiebreak(self.super_tiebreak.team1, self.super_tiebreak.team2)
                if self.super_tiebreak is not None else None
            ),
        )


class ScoreSubmission(BaseModel):
    """Schema for submitting a match score."""
    match_format: MatchFormat
    score: Union[str, ScoreIn]
    team1_ref: Optional[TeamRef] = None
    team2_ref: Optional[TeamRef] = None

    @field_validator("score")
    @classmethod
    def strip_score(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ScoreSubmissionResult(BaseModel):
    """
    Result of a score submission.

    Either ok=True with the score and winner, or ok=False with a tagged error.
    """
    ok: bool
    score: Optional[ScoreIn] = None
    final_score: Optional[str] = None
    winner: Optional[Side] = None
    winner_ref: Optional[TeamRef] = None
    decided_by_super_tiebreak: bool = False
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_token: Optional[str] = None


# ============ Match Schemas ============

class MatchIn(BaseModel):
    """Schema for a match snapshot handed to the engine."""
    id: Optional[TeamRef] = None
    round_type: RoundType
    match_order: int = Field(..., ge=1)
    team1_ref: Optional[TeamRef] = None
    team2_ref: Optional[TeamRef] = None
    round_number: Optional[int] = None
    pool_id: Optional[TeamRef] = None
    is_bye: bool = False
    status: MatchStatus = MatchStatus.SCHEDULED
    winner_ref: Optional[TeamRef] = None
    score: Optional[ScoreIn] = None

    def to_match(self) -> Match:
        return Match(
            id=self.id,
            round_type=self.round_type,
            match_order=self.match_order,
            team1_ref=self.team1_ref,
            team2_ref=self.team2_ref,
            round_number=self.round_number,
            pool_id=self.pool_id,
            is_bye=self.is_bye,
            status=self.status,
            winner_ref=self.winner_ref,
            score=self.score.to_score() if self.score is not None else None,
        )


class MatchResponse(BaseModel):
    """Schema for match response."""
    id: Optional[TeamRef]
    round_type: RoundType
    match_order: int
    team1_ref: Optional[TeamRef]
    team2_ref: Optional[TeamRef]
    round_number: Optional[int]
    pool_id: Optional[TeamRef]
    is_bye: bool
    status: MatchStatus
    winner_ref: Optional[TeamRef]
    score: Optional[ScoreIn]

    class Config:
        from_attributes = True


# ============ Standings Schemas ============

class StandingResponse(BaseModel):
    """Schema for one row of a pool table."""
    position: int
    team_ref: TeamRef
    name: str
    win_count: int
    played: int
    sets_won: int
    sets_lost: int
    set_differential: int
    games_won: int
    games_lost: int
    game_differential: int


# ============ Bracket Schemas ============

class KnockoutPlanResponse(BaseModel):
    """
    Starting round of a knockout bracket, or has_knockout=False.

    error_code is set when the teams do not fit any starting round.
    """
    has_knockout: bool
    qualified_count: int
    round_type: Optional[RoundType] = None
    bracket_size: int = 0
    slot_count: int = 0
    bye_count: int = 0
    contested_matches: int = 0
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class AdvanceRequest(BaseModel):
    """Schema for advancing a knockout round."""
    round_type: RoundType
    matches: list[MatchIn]
    existing_next: list[MatchIn] = Field(default_factory=list)


class AdvanceResult(BaseModel):
    """Next-round matches, or a tagged error."""
    ok: bool
    round_type: RoundType
    next_round: Optional[RoundType] = None
    matches: list[MatchResponse] = Field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
