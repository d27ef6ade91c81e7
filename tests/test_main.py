"""
Tests for the command-line entry point.
"""

import json

import pytest

from main import main


@pytest.fixture
def no_settings(tmp_path):
    """Point the CLI at a settings file that does not exist."""
    return ["--settings", str(tmp_path / "missing.json")]


class TestScoreCommand:

    def test_valid_score(self, no_settings, capsys):
        code = main([*no_settings, "score", "6/3 4/6 10/8", "--format", "B1"])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output["ok"] is True
        assert output["winner"] == "team1"
        assert output["final_score"] == "6-3, 4-6 [10-8]"

    def test_rejected_score(self, no_settings, capsys):
        code = main([*no_settings, "score", "6/3 4/6", "--format", "C1"])
        output = json.loads(capsys.readouterr().out)

        assert code == 1
        assert output["error_code"] == "invalid_set_score"

    def test_blank_score_is_rejected(self, no_settings, capsys):
        code = main([*no_settings, "score", "  ", "--format", "A1"])
        output = json.loads(capsys.readouterr().out)

        assert code == 1
        assert output["error_code"] == "parse_error"


class TestPlanCommand:

    def test_plan_from_pools(self, no_settings, capsys):
        assert main([*no_settings, "plan", "--pools", "3"]) == 0
        output = json.loads(capsys.readouterr().out)

        assert output["round_type"] == "quarters"
        assert output["bye_count"] == 2

    def test_oversized_bracket(self, no_settings, capsys):
        assert main([*no_settings, "plan", "--qualified", "40"]) == 1
        output = json.loads(capsys.readouterr().out)

        assert output["error_code"] == "unsupported_bracket_size"
        assert output["has_knockout"] is False


class TestFileCommands:

    def test_standings(self, no_settings, tmp_path, capsys):
        path = tmp_path / "pool.json"
        path.write_text(json.dumps({
            "matches": [
                {"id": 1, "round_type": "pool", "match_order": 1, "team1_ref": 11,
                 "team2_ref": 12, "status": "completed", "winner_ref": 12},
            ],
            "names": {"11": "Lopez / Ruiz", "12": "Bela / Tapia"},
        }))

        assert main([*no_settings, "standings", str(path)]) == 0
        table = json.loads(capsys.readouterr().out)

        assert [(row["position"], row["name"]) for row in table] == [
            (1, "Bela / Tapia"),
            (2, "Lopez / Ruiz"),
        ]

    def test_advance(self, no_settings, tmp_path, capsys):
        path = tmp_path / "semis.json"
        path.write_text(json.dumps({
            "round_type": "semis",
            "matches": [
                {"id": "s1", "round_type": "semis", "match_order": 1, "team1_ref": "a",
                 "team2_ref": "b", "status": "completed", "winner_ref": "a"},
                {"id": "s2", "round_type": "semis", "match_order": 2, "team1_ref": "c",
                 "team2_ref": "d", "status": "in_progress"},
            ],
        }))

        assert main([*no_settings, "advance", str(path)]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["error_code"] == "round_incomplete"

    def test_missing_file(self, no_settings, tmp_path):
        assert main([*no_settings, "standings", str(tmp_path / "nope.json")]) == 2
