"""
Rules Engine - Per-format scoring rules for padel matches.

Each MatchFormat has one FormatRules strategy that knows how many score
pairs the format takes, which of them are sets, how a set is won, and when
a deciding third set or super tie-break is required. Adding a format means
adding one subclass decorated with @register_rules.
"""

from dataclasses import dataclass
from typing import Optional

from config import SCORING_SETTINGS, ScoringSettings
from engine.errors import (
    InvalidSetCountError,
    InvalidSetScoreError,
    InvalidSuperTiebreakError,
    MissingSuperTiebreakError,
    MissingThirdSetError,
    UnexpectedSuperTiebreakError,
)
from engine.score_parser import pairs_from_score
from models.match import MatchFormat, Score, SetScore, Side, SuperTiebreak


Pair = tuple[int, int]


def _token(pair: Pair) -> str:
    return f"{pair[0]}/{pair[1]}"


@dataclass(frozen=True)
class SetRule:
    """
    How a set is won.

    A set ends when one side reaches `target` with the other on at most
    `max_loser_at_target` games, or reaches target + 1 with the other on one
    of `extended_losers` games (7-5 / 7-6 for six-game sets).
    """
    target: int
    max_loser_at_target: int
    extended_losers: frozenset[int] = frozenset()

    def is_valid(self, team1: int, team2: int) -> bool:
        high, low = max(team1, team2), min(team1, team2)
        if high == low:
            return False
        if high == self.target:
            return low <= self.max_loser_at_target
        if high == self.target + 1 and self.extended_losers:
            return low in self.extended_losers
        return False


SIX_GAME_SET = SetRule(target=6, max_loser_at_target=4, extended_losers=frozenset({5, 6}))
FOUR_GAME_SET = SetRule(target=4, max_loser_at_target=2, extended_losers=frozenset({3, 4}))
NINE_GAME_SET = SetRule(target=9, max_loser_at_target=8)


class FormatRules:
    """
    Validation strategy for one match format.

    Subclasses set the class attributes and override `designate` and
    `check_decider` where the format differs.
    """

    match_format: MatchFormat
    set_rule: SetRule
    min_pairs: int = 1
    max_pairs: int = 1

    # Sets (super tie-break included) a side needs to take the match
    sets_to_win: int = 1

    # Shape of a pre-split Score: set count range and whether a super
    # tie-break object may be present
    min_sets: int = 1
    max_sets: int = 1
    has_super_tiebreak: bool = False

    def validate(self, pairs: list[Pair],
                 settings: ScoringSettings = SCORING_SETTINGS) -> Score:
        """
        Validate raw pairs against this format and build a Score.

        Checks run in order: pair count, each set's games, the deciding
        set or super tie-break, then the super tie-break's points.
        """
        self.check_arity(pairs)

        set_pairs, tiebreak_pair = self.designate(pairs)
        for pair in set_pairs:
            if not self.set_rule.is_valid(*pair):
                raise InvalidSetScoreError(
                    f"Format {self.match_format.value}: invalid set score {_token(pair)}",
                    token=_token(pair),
                    match_format=self.match_format,
                )

        self.check_decider(set_pairs, tiebreak_pair)

        if tiebreak_pair is not None:
            self.check_super_tiebreak(tiebreak_pair, settings)

        return Score(
            sets=tuple(SetScore(a, b) for a, b in set_pairs),
            super_tiebreak=SuperTiebreak(*tiebreak_pair) if tiebreak_pair else None,
        )

    def validate_structured(self, score: Score,
                            settings: ScoringSettings = SCORING_SETTINGS) -> Score:
        """
        Validate a score the caller already split into sets and tie-break.

        The split is checked against the format first, so a tie-break can
        never be read as a set or the other way round. The pairs then go
        through the same checks as a parsed string.
        """
        if not self.min_sets <= len(score.sets) <= self.max_sets:
            if self.min_sets == self.max_sets:
                expected = str(self.min_sets)
            else:
                expected = f"{self.min_sets} to {self.max_sets}"
            raise InvalidSetCountError(
                f"Format {self.match_format.value}: expected {expected} "
                f"sets, got {len(score.sets)}",
                match_format=self.match_format,
            )
        if score.super_tiebreak is not None and not self.has_super_tiebreak:
            raise UnexpectedSuperTiebreakError(
                f"Format {self.match_format.value}: no super tie-break is played",
                token=_token(score.super_tiebreak.as_pair()),
                match_format=self.match_format,
            )

        return self.validate(pairs_from_score(score), settings)

    def check_arity(self, pairs: list[Pair]) -> None:
        if not self.min_pairs <= len(pairs) <= self.max_pairs:
            if self.min_pairs == self.max_pairs:
                expected = str(self.min_pairs)
            else:
                expected = f"{self.min_pairs} to {self.max_pairs}"
            raise InvalidSetCountError(
                f"Format {self.match_format.value}: expected {expected} "
                f"score pairs, got {len(pairs)}",
                match_format=self.match_format,
            )

    def designate(self, pairs: list[Pair]) -> tuple[list[Pair], Optional[Pair]]:
        """Split pairs into (sets, super tie-break). Default: all sets."""
        return list(pairs), None

    def check_decider(self, set_pairs: list[Pair], tiebreak_pair: Optional[Pair]) -> None:
        """Enforce the format's rule for deciding a split match."""

    def check_super_tiebreak(self, pair: Pair, settings: ScoringSettings) -> None:
        high, low = max(pair), min(pair)
        if high < settings.super_tiebreak_min_points or high - low < settings.super_tiebreak_margin:
            raise InvalidSuperTiebreakError(
                f"Format {self.match_format.value}: super tie-break {_token(pair)} "
                f"must reach {settings.super_tiebreak_min_points} points "
                f"with a {settings.super_tiebreak_margin}-point lead",
                token=_token(pair),
                match_format=self.match_format,
            )

    @staticmethod
    def count_set_wins(sets) -> dict[Side, int]:
        """Count sets won per side. Accepts SetScore objects."""
        wins = {Side.TEAM1: 0, Side.TEAM2: 0}
        for s in sets:
            if s.winner is not None:
                wins[s.winner] += 1
        return wins

    @staticmethod
    def _is_split(set_pairs: list[Pair]) -> bool:
        team1_sets = sum(1 for a, b in set_pairs if a > b)
        team2_sets = sum(1 for a, b in set_pairs if b > a)
        return team1_sets == 1 and team2_sets == 1


# Registry: one strategy instance per format
RULES: dict[MatchFormat, FormatRules] = {}


def register_rules(cls: type[FormatRules]) -> type[FormatRules]:
    """Class decorator adding a strategy to the registry."""
    RULES[cls.match_format] = cls()
    return cls


def get_rules(match_format: MatchFormat) -> FormatRules:
    """Look up the strategy for a format."""
    try:
        return RULES[match_format]
    except KeyError:
        raise ValueError(f"No scoring rules registered for format {match_format!r}") from None


@register_rules
class A1Rules(FormatRules):
    """Best of 3 sets to 6 games. A 1-1 split is decided by a real third set."""

    match_format = MatchFormat.A1
    set_rule = SIX_GAME_SET
    min_pairs = 2
    max_pairs = 3
    sets_to_win = 2
    min_sets = 2
    max_sets = 3

    def check_decider(self, set_pairs: list[Pair], tiebreak_pair: Optional[Pair]) -> None:
        split = self._is_split(set_pairs[:2])
        if split and len(set_pairs) == 2:
            raise MissingThirdSetError(
                "Format A1: a third set is required after a 1-1 split",
                match_format=self.match_format,
            )
        if not split and len(set_pairs) == 3:
            raise InvalidSetCountError(
                "Format A1: no third set is played after a 2-0 win",
                token=_token(set_pairs[2]),
                match_format=self.match_format,
            )


class SuperTiebreakRules(FormatRules):
    """Two sets plus a super tie-break that is played only on a 1-1 split."""

    min_pairs = 2
    max_pairs = 3
    sets_to_win = 2
    min_sets = 2
    max_sets = 2
    has_super_tiebreak = True

    def designate(self, pairs: list[Pair]) -> tuple[list[Pair], Optional[Pair]]:
        return list(pairs[:2]), (pairs[2] if len(pairs) == 3 else None)

    def check_decider(self, set_pairs: list[Pair], tiebreak_pair: Optional[Pair]) -> None:
        split = self._is_split(set_pairs)
        if split and tiebreak_pair is None:
            raise MissingSuperTiebreakError(
                f"Format {self.match_format.value}: a super tie-break is "
                f"required after a 1-1 split",
                match_format=self.match_format,
            )
        if not split and tiebreak_pair is not None:
            raise UnexpectedSuperTiebreakError(
                f"Format {self.match_format.value}: no super tie-break "
                f"after a 2-0 win",
                token=_token(tiebreak_pair),
                match_format=self.match_format,
            )


@register_rules
class B1Rules(SuperTiebreakRules):
    """Two sets to 6 games, super tie-break on 1-1."""

    match_format = MatchFormat.B1
    set_rule = SIX_GAME_SET


@register_rules
class C1Rules(SuperTiebreakRules):
    """Two short sets to 4 games, super tie-break on 1-1."""

    match_format = MatchFormat.C1
    set_rule = FOUR_GAME_SET


@register_rules
class D1Rules(FormatRules):
    """A single set to 9 games."""

    match_format = MatchFormat.D1
    set_rule = NINE_GAME_SET
    min_pairs = 1
    max_pairs = 1
