"""
Unit tests for outcome resolution and result recording.
"""

import pytest

from engine.errors import (
    InconsistentScoreError,
    InvalidByeError,
    MatchClosedError,
    TeamsNotAssignedError,
)
from engine.scoring import (
    MatchOutcome,
    complete_bye,
    parse_and_validate,
    record_result,
    resolve_bye,
    resolve_outcome,
)
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


def _resolve(raw: str, fmt: MatchFormat) -> MatchOutcome:
    return resolve_outcome(parse_and_validate(raw, fmt), fmt)


class TestResolveOutcome:
    """Tests for picking the winner of a validated score."""

    def test_a1_three_sets(self):
        """Team 1 wins sets 1 and 3."""
        outcome = _resolve("6/3 4/6 6/4", MatchFormat.A1)

        assert outcome.winner is Side.TEAM1
        assert not outcome.decided_by_super_tiebreak
        assert (outcome.team1_sets, outcome.team2_sets) == (2, 1)

    def test_a1_straight_sets_team2(self):
        outcome = _resolve("3/6 5/7", MatchFormat.A1)
        assert outcome.winner is Side.TEAM2

    def test_b1_super_tiebreak_decides(self):
        outcome = _resolve("6/3 4/6 10/8", MatchFormat.B1)

        assert outcome.winner is Side.TEAM1
        assert outcome.decided_by_super_tiebreak

    def test_b1_straight_sets_not_decided_by_tiebreak(self):
        outcome = _resolve("6/3 6/4", MatchFormat.B1)

        assert outcome.winner is Side.TEAM1
        assert not outcome.decided_by_super_tiebreak

    def test_c1_tiebreak_winner_takes_match(self):
        outcome = _resolve("4/1 3/5 10/6", MatchFormat.C1)

        assert outcome.winner is Side.TEAM1
        assert outcome.decided_by_super_tiebreak

    def test_c1_team2_wins_tiebreak(self):
        outcome = _resolve("4/1 3/5 8/10", MatchFormat.C1)
        assert outcome.winner is Side.TEAM2

    def test_d1_single_set(self):
        outcome = _resolve("8/9", MatchFormat.D1)
        assert outcome.winner is Side.TEAM2

    def test_resolution_is_deterministic(self):
        """Resolving the same input twice gives the same winner."""
        first = _resolve("6/3 4/6 10/8", MatchFormat.B1)
        second = _resolve("6/3 4/6 10/8", MatchFormat.B1)
        assert first == second

    def test_unvalidated_split_raises(self):
        """A 1-1 score with no decider has no winner."""
        score = Score(sets=(SetScore(6, 3), SetScore(4, 6)))

        with pytest.raises(InconsistentScoreError):
            resolve_outcome(score, MatchFormat.B1)

    def test_unvalidated_short_score_raises(self):
        """One set is not enough to win an A1 match."""
        score = Score(sets=(SetScore(6, 3),))

        with pytest.raises(InconsistentScoreError):
            resolve_outcome(score, MatchFormat.A1)

    def test_tiebreak_counts_as_deciding_set(self):
        score = Score(
            sets=(SetScore(2, 6), SetScore(6, 2)),
            super_tiebreak=SuperTiebreak(7, 10),
        )
        outcome = resolve_outcome(score, MatchFormat.B1)

        assert outcome.winner is Side.TEAM2
        assert (outcome.team1_sets, outcome.team2_sets) == (1, 2)


class TestByes:
    """Tests for bye matches."""

    def test_present_side_wins(self):
        match = Match(id=1, round_type=RoundType.QUARTERS, match_order=1,
                      team1_ref="r1", is_bye=True)
        assert resolve_bye(match) is Side.TEAM1

    def test_team2_only_bye(self):
        match = Match(id=1, round_type=RoundType.QUARTERS, match_order=1,
                      team2_ref="r2", is_bye=True)
        assert resolve_bye(match) is Side.TEAM2

    def test_complete_bye(self):
        match = Match(id=1, round_type=RoundType.QUARTERS, match_order=1,
                      team1_ref="r1", is_bye=True)
        completed = complete_bye(match)

        assert completed.status == MatchStatus.COMPLETED
        assert completed.winner_ref == "r1"
        assert completed.score is None
        # Original snapshot untouched
        assert match.status == MatchStatus.SCHEDULED

    def test_bye_with_two_teams_raises(self):
        match = Match(id=1, round_type=RoundType.QUARTERS, match_order=1,
                      team1_ref="r1", team2_ref="r2", is_bye=True)
        with pytest.raises(InvalidByeError):
            resolve_bye(match)

    def test_non_bye_raises(self):
        match = Match(id=1, round_type=RoundType.QUARTERS, match_order=1,
                      team1_ref="r1", team2_ref="r2")
        with pytest.raises(InvalidByeError):
            resolve_bye(match)


class TestRecordResult:
    """Tests for applying a score to a match."""

    def setup_method(self):
        self.match = Match(
            id=10, round_type=RoundType.POOL, match_order=3,
            team1_ref="reg-a", team2_ref="reg-b", pool_id="pool-1",
        )

    def test_completes_match_with_winner(self):
        score = parse_and_validate("3/6 4/6", MatchFormat.B1)
        completed = record_result(self.match, score, MatchFormat.B1)

        assert completed.status == MatchStatus.COMPLETED
        assert completed.winner_ref == "reg-b"
        assert completed.score == score
        assert completed.pool_id == "pool-1"

    def test_does_not_mutate_input(self):
        score = parse_and_validate("9/2", MatchFormat.D1)
        record_result(self.match, score, MatchFormat.D1)

        assert self.match.status == MatchStatus.SCHEDULED
        assert self.match.winner_ref is None

    def test_rescoring_overwrites_previous_result(self):
        """Last write wins for a match that is submitted twice."""
        first = record_result(self.match, parse_and_validate("9/2", MatchFormat.D1), MatchFormat.D1)
        second = record_result(first, parse_and_validate("2/9", MatchFormat.D1), MatchFormat.D1)

        assert second.winner_ref == "reg-b"

    @pytest.mark.parametrize("status", [MatchStatus.CANCELLED, MatchStatus.FORFEIT])
    def test_closed_match_raises(self, status):
        self.match.status = status
        score = parse_and_validate("9/2", MatchFormat.D1)

        with pytest.raises(MatchClosedError):
            record_result(self.match, score, MatchFormat.D1)

    def test_bye_takes_no_score(self):
        bye = Match(id=1, round_type=RoundType.SEMIS, match_order=1,
                    team1_ref="r1", is_bye=True)
        score = parse_and_validate("9/2", MatchFormat.D1)

        with pytest.raises(InvalidByeError):
            record_result(bye, score, MatchFormat.D1)

    def test_empty_slot_takes_no_score(self):
        """A slot without teams cannot be completed, it would never have a winner."""
        slot = Match(id=None, round_type=RoundType.SEMIS, match_order=1)
        score = parse_and_validate("9/2", MatchFormat.D1)

        with pytest.raises(TeamsNotAssignedError):
            record_result(slot, score, MatchFormat.D1)

    def test_winning_side_without_team_raises(self):
        half_drawn = Match(id=5, round_type=RoundType.QUARTERS, match_order=2,
                           team1_ref="reg-a")
        score = parse_and_validate("2/9", MatchFormat.D1)

        with pytest.raises(TeamsNotAssignedError):
            record_result(half_drawn, score, MatchFormat.D1)
