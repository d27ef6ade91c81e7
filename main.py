"""
Padelboard - Tournament scoring and bracket tools

Command-line entry point for checking scores and brackets by hand.

    python main.py score "6/3 4/6 10/8" --format B1
    python main.py plan --pools 4
    python main.py standings pool_a.json
    python main.py advance quarters.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from config import APP_NAME, APP_VERSION, load_settings
from engine.errors import TournamentCoreError
from models.match import MatchFormat
from models.schemas import AdvanceRequest, MatchIn, ScoreSubmission, StandingResponse
from services.tournament_service import TournamentService

logger = logging.getLogger(__name__)


class StandingsFile(BaseModel):
    """Input file for the standings command."""
    matches: list[MatchIn]
    names: dict[str, str] = Field(default_factory=dict)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME.lower(),
        description="Padel tournament scoring and bracket tools",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--settings", type=Path, help="Settings file (defaults to the user config dir)")

    commands = parser.add_subparsers(dest="command", required=True)

    score = commands.add_parser("score", help="Validate a score and print the winner")
    score.add_argument("score", help='Score string, e.g. "6/3 4/6 10/8"')
    score.add_argument(
        "--format", dest="match_format", required=True,
        choices=[f.value for f in MatchFormat],
    )

    plan = commands.add_parser("plan", help="Show where the knockout bracket starts")
    group = plan.add_mutually_exclusive_group(required=True)
    group.add_argument("--pools", type=int, help="Number of pools")
    group.add_argument("--qualified", type=int, help="Number of qualified teams")

    standings = commands.add_parser("standings", help="Rank a pool from a JSON file")
    standings.add_argument("path", type=Path)

    advance = commands.add_parser("advance", help="Build the next knockout round from a JSON file")
    advance.add_argument("path", type=Path)

    return parser


def _read_json(path: Path):
    with open(path, "r") as f:
        return json.load(f)


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command. Returns the process exit code."""
    scoring_settings, bracket_settings = load_settings(args.settings)
    service = TournamentService(scoring_settings, bracket_settings)

    if args.command == "score":
        result = service.submit_score(
            ScoreSubmission(match_format=args.match_format, score=args.score)
        )
        print(result.model_dump_json(indent=2, exclude_none=True))
        return 0 if result.ok else 1

    if args.command == "plan":
        if args.pools is not None:
            plan = service.plan_from_pools(args.pools)
        else:
            plan = service.plan_from_qualified(args.qualified)
        print(plan.model_dump_json(indent=2, exclude_none=True))
        return 0 if plan.error_code is None else 1

    if args.command == "standings":
        data = StandingsFile.model_validate(_read_json(args.path))
        matches = [m.to_match() for m in data.matches]
        # JSON object keys are always strings, team refs may not be
        names = {
            ref: data.names[str(ref)]
            for m in matches
            for ref in m.present_refs()
            if str(ref) in data.names
        }
        table = service.pool_standings(matches, names)
        print(TypeAdapter(list[StandingResponse]).dump_json(table, indent=2).decode())
        return 0

    if args.command == "advance":
        request = AdvanceRequest.model_validate(_read_json(args.path))
        result = service.advance_request(request)
        print(result.model_dump_json(indent=2, exclude_none=True))
        return 0 if result.ok else 1

    return 2


def main(argv=None) -> int:
    """Main entry point for Padelboard."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return run(args)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except TournamentCoreError as e:
        logger.error(f"{e.code}: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
