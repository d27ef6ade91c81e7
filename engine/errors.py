"""
Exceptions raised by the tournament core.

Every error here is a recoverable validation or business-rule failure. Each
class carries a stable ``code`` so callers can map it to a user-facing
message without matching on text.
"""

from typing import Optional

from models.match import MatchFormat, RoundType


# ========== Base Exception ==========


class TournamentCoreError(Exception):
    """Base exception for all tournament core errors."""

    code = "tournament_error"

    def __init__(self, message: str, *, token: Optional[str] = None,
                 match_format: Optional[MatchFormat] = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.match_format = match_format


# ========== Score Errors ==========


class ScoreError(TournamentCoreError):
    """Base exception for score parsing and validation errors."""

    code = "score_error"


class ParseError(ScoreError):
    """Raised when a score string is empty or contains a malformed token."""

    code = "parse_error"


class InvalidSetCountError(ScoreError):
    """Raised when the number of score pairs does not fit the format."""

    code = "invalid_set_count"


class InvalidSetScoreError(ScoreError):
    """Raised when a set's game counts break the format's win-margin rule."""

    code = "invalid_set_score"


class MissingThirdSetError(ScoreError):
    """Raised when an A1 match is split 1-1 after two sets with no third set."""

    code = "missing_third_set"


class MissingSuperTiebreakError(ScoreError):
    """Raised when a B1/C1 match is split 1-1 with no super tie-break."""

    code = "missing_super_tiebreak"


class UnexpectedSuperTiebreakError(ScoreError):
    """Raised when a super tie-break is given for a match that was not split."""

    code = "unexpected_super_tiebreak"


class InvalidSuperTiebreakError(ScoreError):
    """Raised when a super tie-break misses the point minimum or the margin."""

    code = "invalid_super_tiebreak"


class InconsistentScoreError(ScoreError):
    """
    Raised when a validated score does not produce a strict set majority.

    This cannot happen for scores that went through the validator, so it
    signals a bug and must never be turned into a user-facing message.
    """

    code = "inconsistent_score"


# ========== Match Errors ==========


class MatchError(TournamentCoreError):
    """Base exception for match state errors."""

    code = "match_error"


class InvalidByeError(MatchError):
    """Raised when a bye match does not have exactly one team present."""

    code = "invalid_bye"


class MatchClosedError(MatchError):
    """Raised when recording a result on a cancelled or forfeited match."""

    code = "match_closed"


class TeamsNotAssignedError(MatchError):
    """Raised when the winning side of a scored match has no team."""

    code = "teams_not_assigned"


# ========== Bracket Errors ==========


class BracketError(TournamentCoreError):
    """Base exception for knockout bracket errors."""

    code = "bracket_error"

    def __init__(self, message: str, *, round_type: Optional[RoundType] = None):
        super().__init__(message)
        self.round_type = round_type


class RoundIncompleteError(BracketError):
    """Raised when advancing a round that still has unfinished matches."""

    code = "round_incomplete"


class RoundAlreadyAdvancedError(BracketError):
    """Raised when the next round already has materialized matches."""

    code = "round_already_advanced"


class AdvancementParityError(BracketError):
    """Raised when a round produced an odd number of winners."""

    code = "advancement_parity"


class InvalidWinnerError(BracketError):
    """Raised when a match winner is not one of the teams that played it."""

    code = "invalid_winner"


class NoNextRoundError(BracketError):
    """Raised when advancing past the last round of the bracket."""

    code = "no_next_round"


class UnsupportedBracketSizeError(BracketError):
    """Raised when more teams qualify than the largest bracket can hold."""

    code = "unsupported_bracket_size"
