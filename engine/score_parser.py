"""
Score Parser - Turns free-form score strings into raw game pairs.

The parser knows nothing about match formats: "6/3 4/6 10/8" becomes
[(6, 3), (4, 6), (10, 8)] and it is up to the validator to decide which
pairs are sets and which one is a super tie-break.
"""

import re

from engine.errors import ParseError
from models.match import Score


# One token per set, "6/3" or "6-3"
TOKEN_PATTERN = re.compile(r"^(\d+)[/-](\d+)$")


def parse_score(raw: str) -> list[tuple[int, int]]:
    """
    Parse a score string into ordered (team1, team2) pairs.

    Args:
        raw: Whitespace-separated tokens such as "6/3 4/6 10/8"

    Returns:
        List of integer pairs in token order

    Raises:
        ParseError: If the string is empty or a token is malformed
    """
    tokens = (raw or "").split()
    if not tokens:
        raise ParseError("Score is empty")

    pairs = []
    for token in tokens:
        match = TOKEN_PATTERN.match(token)
        if not match:
            raise ParseError(f"Invalid score token: {token!r}", token=token)
        pairs.append((int(match.group(1)), int(match.group(2))))

    return pairs


def pairs_from_score(score: Score) -> list[tuple[int, int]]:
    """Flatten a structured score back into raw pairs, tie-break last."""
    pairs = [s.as_pair() for s in score.sets]
    if score.super_tiebreak is not None:
        pairs.append(score.super_tiebreak.as_pair())
    return pairs


def format_score(score: Score) -> str:
    """
    Render a score for display, e.g. "6-3, 4-6 [10-8]".

    The super tie-break is bracketed so it cannot be mistaken for a set.
    """
    text = ", ".join(f"{s.team1}-{s.team2}" for s in score.sets)
    if score.super_tiebreak is not None:
        tb = score.super_tiebreak
        text += f" [{tb.team1}-{tb.team2}]"
    return text
