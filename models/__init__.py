"""
Padelboard Models

Value objects for matches and scores, plus the pydantic schemas used at the
service boundary.
"""

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

__all__ = [
    "Match",
    "MatchFormat",
    "MatchStatus",
    "RoundType",
    "Score",
    "SetScore",
    "Side",
    "SuperTiebreak",
]
