"""
Padelboard Tournament Engine

Score parsing, validation, outcome resolution, pool standings, and knockout
progression. Pure functions only: no I/O, no persistence, no logging.
"""

from engine.score_parser import parse_score, format_score
from engine.rules import FormatRules, get_rules
from engine.scoring import (
    MatchOutcome,
    validate_score,
    validate_structured_score,
    parse_and_validate,
    resolve_outcome,
    record_result,
    complete_bye,
)
from engine.standings import PoolStanding, calculate_pool_standings
from engine.tournament_bracket import (
    RoundOrder,
    KnockoutPlan,
    DEFAULT_ROUND_ORDER,
    plan_knockout,
    advance_round,
)

__all__ = [
    "parse_score",
    "format_score",
    "FormatRules",
    "get_rules",
    "MatchOutcome",
    "validate_score",
    "validate_structured_score",
    "parse_and_validate",
    "resolve_outcome",
    "record_result",
    "complete_bye",
    "PoolStanding",
    "calculate_pool_standings",
    "RoundOrder",
    "KnockoutPlan",
    "DEFAULT_ROUND_ORDER",
    "plan_knockout",
    "advance_round",
]
