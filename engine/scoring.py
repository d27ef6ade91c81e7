"""
Scoring Engine - Score validation and match outcome resolution.

The pipeline for a submitted score is parse -> validate -> resolve ->
record. Every function here is pure: matches are returned as new objects
and the caller decides what to persist.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

from config import SCORING_SETTINGS, ScoringSettings
from engine.errors import (
    InconsistentScoreError,
    InvalidByeError,
    MatchClosedError,
    TeamsNotAssignedError,
)
from engine.rules import get_rules
from engine.score_parser import parse_score
from models.match import Match, MatchFormat, MatchStatus, Score, Side


@dataclass(frozen=True)
class MatchOutcome:
    """Who won a match, and whether a super tie-break settled it."""
    winner: Side
    decided_by_super_tiebreak: bool = False
    team1_sets: int = 0
    team2_sets: int = 0


def validate_score(pairs: list[tuple[int, int]], match_format: MatchFormat,
                   settings: ScoringSettings = SCORING_SETTINGS) -> Score:
    """
    Validate raw score pairs against a match format.

    Args:
        pairs: Output of parse_score
        match_format: Format the match is played under
        settings: Super tie-break thresholds

    Returns:
        The validated Score

    Raises:
        ScoreError subclass describing the first rule the score breaks
    """
    return get_rules(match_format).validate(pairs, settings)


def parse_and_validate(raw: str, match_format: MatchFormat,
                       settings: ScoringSettings = SCORING_SETTINGS) -> Score:
    """Parse a score string and validate it in one step."""
    return validate_score(parse_score(raw), match_format, settings)


def validate_structured_score(score: Score, match_format: MatchFormat,
                              settings: ScoringSettings = SCORING_SETTINGS) -> Score:
    """Validate a pre-split score, keeping the caller's sets and tie-break apart."""
    return get_rules(match_format).validate_structured(score, settings)


def resolve_outcome(score: Score, match_format: MatchFormat) -> MatchOutcome:
    """
    Determine the winner of a validated score.

    Sets are counted per side; for B1/C1 the super tie-break counts as the
    deciding set.

    Raises:
        InconsistentScoreError: If the counts give no strict majority. This
            only happens when the score skipped validation.
    """
    rules = get_rules(match_format)
    wins = rules.count_set_wins(score.sets)

    decided_by_super_tiebreak = False
    if score.super_tiebreak is not None:
        tiebreak_winner = score.super_tiebreak.winner
        if tiebreak_winner is not None:
            decided_by_super_tiebreak = wins[Side.TEAM1] == wins[Side.TEAM2]
            wins[tiebreak_winner] += 1

    team1_sets, team2_sets = wins[Side.TEAM1], wins[Side.TEAM2]
    if team1_sets > team2_sets:
        winner = Side.TEAM1
    elif team2_sets > team1_sets:
        winner = Side.TEAM2
    else:
        raise InconsistentScoreError(
            f"Format {match_format.value}: sets split {team1_sets}-{team2_sets}, no winner",
            match_format=match_format,
        )

    if wins[winner] < rules.sets_to_win:
        raise InconsistentScoreError(
            f"Format {match_format.value}: winner took {wins[winner]} sets, "
            f"{rules.sets_to_win} required",
            match_format=match_format,
        )

    return MatchOutcome(
        winner=winner,
        decided_by_super_tiebreak=decided_by_super_tiebreak,
        team1_sets=team1_sets,
        team2_sets=team2_sets,
    )


def resolve_bye(match: Match) -> Side:
    """
    The present side of a bye match always wins.

    Raises:
        InvalidByeError: If the match is not a bye or does not have exactly
            one team present
    """
    if not match.is_bye:
        raise InvalidByeError(f"Match {match.id} is not a bye")

    present = [side for side in Side if match.ref_for(side) is not None]
    if len(present) != 1:
        raise InvalidByeError(
            f"Bye match {match.id} must have exactly one team, has {len(present)}"
        )
    return present[0]


def complete_bye(match: Match) -> Match:
    """Return a copy of a bye match completed in favour of its only team."""
    winner = resolve_bye(match)
    return dataclasses.replace(
        match,
        status=MatchStatus.COMPLETED,
        winner_ref=match.ref_for(winner),
        score=None,
    )


def record_result(match: Match, score: Score, match_format: MatchFormat,
                  outcome: Optional[MatchOutcome] = None) -> Match:
    """
    Return a copy of the match completed with a validated score.

    Args:
        match: The match being scored
        score: Validated score
        match_format: Format the score was validated under
        outcome: Pre-computed outcome, resolved from the score if omitted

    Raises:
        MatchClosedError: If the match was cancelled or forfeited
        InvalidByeError: If the match is a bye (byes take no score)
        TeamsNotAssignedError: If the winning side has no team on the match
    """
    if match.status.is_closed:
        raise MatchClosedError(
            f"Match {match.id} is {match.status.value} and cannot take a score"
        )
    if match.is_bye:
        raise InvalidByeError(f"Bye match {match.id} does not take a score")

    outcome = outcome or resolve_outcome(score, match_format)
    winner_ref = match.ref_for(outcome.winner)
    if winner_ref is None:
        raise TeamsNotAssignedError(
            f"Match {match.id}: {outcome.winner.value} won but has no team assigned"
        )

    return dataclasses.replace(
        match,
        score=score,
        status=MatchStatus.COMPLETED,
        winner_ref=winner_ref,
    )
