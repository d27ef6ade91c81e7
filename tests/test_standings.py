"""
Tests for pool standings.

Covers win counting, the name tiebreak, bye handling, and the
informational set/game counters.
"""

import pytest

from engine.scoring import parse_and_validate, record_result
from engine.standings import (
    calculate_pool_standings,
    is_pool_complete,
    pool_qualifiers,
)
from models.match import Match, MatchFormat, MatchStatus, RoundType


def _pool_match(match_id, team1, team2, order=1):
    return Match(
        id=match_id, round_type=RoundType.POOL, match_order=order,
        team1_ref=team1, team2_ref=team2, pool_id="P1",
    )


def _played(match_id, team1, team2, raw, fmt=MatchFormat.B1):
    return record_result(_pool_match(match_id, team1, team2), parse_and_validate(raw, fmt), fmt)


class TestPoolStandings:
    """Tests for ranking a round-robin pool."""

    @pytest.fixture
    def three_team_pool(self):
        """A beats B and C, B beats C."""
        return [
            _played(1, "A", "B", "6/3 6/4"),
            _played(2, "A", "C", "6/1 6/2"),
            _played(3, "B", "C", "4/6 6/3 10/7"),
        ]

    def test_round_robin_order(self, three_team_pool):
        standings = calculate_pool_standings(three_team_pool)

        assert [(s.team_ref, s.win_count) for s in standings] == [("A", 2), ("B", 1), ("C", 0)]

    def test_counts_matches_played(self, three_team_pool):
        standings = {s.team_ref: s for s in calculate_pool_standings(three_team_pool)}

        assert standings["A"].played == 2
        assert standings["B"].played == 2
        assert standings["C"].played == 2

    def test_set_and_game_counters(self, three_team_pool):
        """The super tie-break counts as a set, its points are not games."""
        standings = {s.team_ref: s for s in calculate_pool_standings(three_team_pool)}

        b = standings["B"]
        assert (b.sets_won, b.sets_lost) == (2, 3)
        assert (b.games_won, b.games_lost) == (3 + 4 + 4 + 6, 6 + 6 + 6 + 3)

        c = standings["C"]
        assert (c.sets_won, c.sets_lost) == (1, 4)
        assert c.set_differential == -3

    def test_tie_broken_by_name(self):
        """Equal wins fall back to alphabetical order."""
        matches = [
            _played(1, "t1", "t2", "9/4", MatchFormat.D1),
            _played(2, "t2", "t3", "9/4", MatchFormat.D1),
            _played(3, "t3", "t1", "9/4", MatchFormat.D1),
        ]
        names = {"t1": "Zeta", "t2": "Alpha", "t3": "Mu"}

        standings = calculate_pool_standings(matches, names)

        assert [s.name for s in standings] == ["Alpha", "Mu", "Zeta"]
        assert all(s.win_count == 1 for s in standings)

    def test_unfinished_matches_seed_teams_without_wins(self):
        matches = [
            _played(1, "A", "B", "9/4", MatchFormat.D1),
            _pool_match(2, "C", "D"),
        ]
        standings = calculate_pool_standings(matches)

        assert [s.team_ref for s in standings] == ["A", "B", "C", "D"]
        assert [s.win_count for s in standings] == [1, 0, 0, 0]

    def test_in_progress_match_with_winner_is_ignored(self):
        match = _pool_match(1, "A", "B")
        match.winner_ref = "A"
        match.status = MatchStatus.IN_PROGRESS

        standings = calculate_pool_standings([match])
        assert all(s.win_count == 0 for s in standings)

    def test_bye_side_is_not_a_team(self):
        bye = Match(id=9, round_type=RoundType.POOL, match_order=1,
                    team1_ref="A", is_bye=True,
                    status=MatchStatus.COMPLETED, winner_ref="A")

        standings = calculate_pool_standings([bye])

        assert [(s.team_ref, s.win_count) for s in standings] == [("A", 1)]

    def test_missing_names_fall_back_to_ref(self):
        standings = calculate_pool_standings([_pool_match(1, 42, 7)])
        assert [s.name for s in standings] == ["42", "7"]

    def test_recomputing_gives_same_table(self, three_team_pool):
        assert calculate_pool_standings(three_team_pool) == calculate_pool_standings(three_team_pool)

    def test_empty_pool(self):
        assert calculate_pool_standings([]) == []


class TestQualifiers:
    """Tests for picking pool qualifiers."""

    def test_top_two(self):
        matches = [
            _played(1, "A", "B", "9/4", MatchFormat.D1),
            _played(2, "A", "C", "9/4", MatchFormat.D1),
            _played(3, "B", "C", "9/4", MatchFormat.D1),
        ]
        qualifiers = pool_qualifiers(calculate_pool_standings(matches))

        assert [q.team_ref for q in qualifiers] == ["A", "B"]

    def test_small_pool_returns_everyone(self):
        standings = calculate_pool_standings([_pool_match(1, "A", "B")])
        assert len(pool_qualifiers(standings, count=3)) == 2

    def test_pool_complete(self):
        done = _played(1, "A", "B", "9/4", MatchFormat.D1)
        cancelled = _pool_match(2, "A", "C")
        cancelled.status = MatchStatus.CANCELLED

        assert is_pool_complete([done, cancelled])
        assert not is_pool_complete([done, _pool_match(3, "B", "C")])
