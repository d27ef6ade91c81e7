"""
Tournament Service - The in-process boundary of the tournament core.

Wraps the pure engine functions behind the four calls the web layer makes:
score submission, pool standings, bracket planning, and round advancement.
Rule violations come back as tagged results; internal consistency faults
are raised.
"""

import logging
from typing import Hashable, Iterable, Mapping, Optional

from config import (
    BRACKET_SETTINGS,
    SCORING_SETTINGS,
    BracketSettings,
    ScoringSettings,
)
from engine.errors import BracketError, InconsistentScoreError, ScoreError
from engine.score_parser import format_score, parse_score
from engine.scoring import resolve_outcome, validate_score, validate_structured_score
from engine.standings import calculate_pool_standings
from engine.tournament_bracket import (
    RoundOrder,
    advance_round,
    find_advanceable_round,
    plan_knockout,
)
from models.match import Match, RoundType, Side
from models.schemas import (
    AdvanceRequest,
    AdvanceResult,
    KnockoutPlanResponse,
    MatchResponse,
    ScoreIn,
    ScoreSubmission,
    ScoreSubmissionResult,
    StandingResponse,
)

logger = logging.getLogger(__name__)


class TournamentService:
    """
    Runs the scoring and bracket pipeline for one tournament's settings.

    Usage:
        service = TournamentService()
        result = service.submit_score(ScoreSubmission(match_format="B1", score="6/3 4/6 10/8"))
        table = service.pool_standings(pool_matches, names)
        plan = service.plan_from_pools(pool_count=4)
        next_round = service.advance(RoundType.QUARTERS, quarter_matches)
    """

    def __init__(self,
                 scoring_settings: ScoringSettings = SCORING_SETTINGS,
                 bracket_settings: BracketSettings = BRACKET_SETTINGS):
        self.scoring_settings = scoring_settings
        self.bracket_settings = bracket_settings
        self.round_order = RoundOrder(bracket_settings.round_order)

    # ============ Score Submission ============

    def submit_score(self, submission: ScoreSubmission) -> ScoreSubmissionResult:
        """
        Parse, validate, and resolve a submitted score.

        Returns:
            ScoreSubmissionResult with ok=False and the error code when the
            score breaks a format rule

        Raises:
            InconsistentScoreError: If a validated score has no winner
        """
        fmt = submission.match_format
        try:
            if isinstance(submission.score, str):
                score = validate_score(
                    parse_score(submission.score), fmt, self.scoring_settings
                )
            else:
                score = validate_structured_score(
                    submission.score.to_score(), fmt, self.scoring_settings
                )
            outcome = resolve_outcome(score, fmt)
        except InconsistentScoreError as e:
            logger.error(f"Format {fmt.value}: score {submission.score!r} has no winner: {e.message}")
            raise
        except ScoreError as e:
            logger.info(f"Rejected {fmt.value} score {submission.score!r}: {e.code}")
            return ScoreSubmissionResult(
                ok=False,
                error_code=e.code,
                error_message=e.message,
                error_token=e.token,
            )

        winner_ref = (
            submission.team1_ref if outcome.winner is Side.TEAM1 else submission.team2_ref
        )
        final_score = format_score(score)
        logger.debug(f"Accepted {fmt.value} score {final_score}, winner {outcome.winner.value}")

        return ScoreSubmissionResult(
            ok=True,
            score=ScoreIn.model_validate(score, from_attributes=True),
            final_score=final_score,
            winner=outcome.winner,
            winner_ref=winner_ref,
            decided_by_super_tiebreak=outcome.decided_by_super_tiebreak,
        )

    # ============ Pool Standings ============

    def pool_standings(self, matches: Iterable[Match],
                       names: Optional[Mapping[Hashable, str]] = None) -> list[StandingResponse]:
        """Ranked table for one pool."""
        standings = calculate_pool_standings(matches, names)
        return [
            StandingResponse(
                position=position,
                team_ref=s.team_ref,
                name=s.name,
                win_count=s.win_count,
                played=s.played,
                sets_won=s.sets_won,
                sets_lost=s.sets_lost,
                set_differential=s.set_differential,
                games_won=s.games_won,
                games_lost=s.games_lost,
                game_differential=s.game_differential,
            )
            for position, s in enumerate(standings, start=1)
        ]

    # ============ Bracket Planning ============

    def plan_from_qualified(self, qualified_count: int) -> KnockoutPlanResponse:
        """
        Starting round and slot count for a number of qualified teams.

        Returns:
            KnockoutPlanResponse with the error code set when no starting
            round is big enough
        """
        try:
            plan = plan_knockout(qualified_count, self.round_order)
        except BracketError as e:
            logger.warning(f"Cannot plan a bracket for {qualified_count} teams: {e.message}")
            return KnockoutPlanResponse(
                has_knockout=False,
                qualified_count=qualified_count,
                error_code=e.code,
                error_message=e.message,
            )

        if plan is None:
            logger.info(f"{qualified_count} qualified teams: no knockout stage")
            return KnockoutPlanResponse(has_knockout=False, qualified_count=qualified_count)

        logger.info(
            f"{qualified_count} qualified teams: bracket starts at "
            f"{plan.round_type.value} with {plan.slot_count} slots, {plan.bye_count} byes"
        )
        return KnockoutPlanResponse(
            has_knockout=True,
            qualified_count=plan.qualified_count,
            round_type=plan.round_type,
            bracket_size=plan.bracket_size,
            slot_count=plan.slot_count,
            bye_count=plan.bye_count,
            contested_matches=plan.contested_matches,
        )

    def plan_from_pools(self, pool_count: int) -> KnockoutPlanResponse:
        """Plan the bracket when the top teams of each pool qualify."""
        return self.plan_from_qualified(pool_count * self.bracket_settings.qualifiers_per_pool)

    # ============ Round Advancement ============

    def advance(self, round_type: RoundType, matches: Iterable[Match],
                existing_next: Iterable[Match] = ()) -> AdvanceResult:
        """Build the next knockout round, or return the reason it cannot be built."""
        try:
            new_matches = advance_round(round_type, matches, existing_next, self.round_order)
        except BracketError as e:
            logger.warning(f"Cannot advance {round_type.value}: {e.message}")
            return AdvanceResult(
                ok=False,
                round_type=round_type,
                error_code=e.code,
                error_message=e.message,
            )

        next_round = self.round_order.next_round(round_type)
        logger.info(
            f"Advanced {round_type.value} -> {next_round.value}: "
            f"{len(new_matches)} matches created"
        )
        return AdvanceResult(
            ok=True,
            round_type=round_type,
            next_round=next_round,
            matches=[MatchResponse.model_validate(m, from_attributes=True) for m in new_matches],
        )

    def advance_request(self, request: AdvanceRequest) -> AdvanceResult:
        """Same as advance, from a validated request body."""
        return self.advance(
            request.round_type,
            [m.to_match() for m in request.matches],
            [m.to_match() for m in request.existing_next],
        )

    def next_advanceable_round(self, matches: Iterable[Match]) -> Optional[RoundType]:
        """The knockout round that can be advanced now, if any."""
        return find_advanceable_round(matches, self.round_order)
