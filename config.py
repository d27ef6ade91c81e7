"""
Padelboard Configuration

Centralized settings, paths, and constants for the tournament core.
"""

import json
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

import appdirs
from pydantic import BaseModel, Field

from models.match import RoundType


# Application info
APP_NAME = "Padelboard"
APP_AUTHOR = "Padelboard"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def settings(self) -> Path:
        return self.config_dir / "settings.json"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "padelboard.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.config_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class ScoringSettings:
    """Score validation thresholds."""
    # A super tie-break is won by reaching at least this many points
    super_tiebreak_min_points: int = 10

    # ...with at least this lead
    super_tiebreak_margin: int = 2


@dataclass(frozen=True)
class BracketSettings:
    """Pool and knockout progression settings."""
    # Top N of each pool qualify for the knockout bracket
    qualifiers_per_pool: int = 2

    # Fixed progression order; third_place is never advanced automatically
    round_order: tuple[RoundType, ...] = (
        RoundType.POOL,
        RoundType.ROUND_OF_16,
        RoundType.QUARTERS,
        RoundType.SEMIS,
        RoundType.FINAL,
    )


class SettingsFile(BaseModel):
    """On-disk overrides read from settings.json. Every key is optional."""
    super_tiebreak_min_points: Optional[int] = Field(None, ge=1)
    super_tiebreak_margin: Optional[int] = Field(None, ge=1)
    qualifiers_per_pool: Optional[int] = Field(None, ge=1)
    round_order: Optional[list[RoundType]] = Field(None, min_length=2)


# Singleton instances
PATHS = Paths()
SCORING_SETTINGS = ScoringSettings()
BRACKET_SETTINGS = BracketSettings()


def load_settings(path: Optional[Path] = None) -> tuple[ScoringSettings, BracketSettings]:
    """
    Build settings from defaults plus the optional settings.json overrides.

    Args:
        path: Settings file to read, defaults to PATHS.settings

    Returns:
        (ScoringSettings, BracketSettings); the defaults if the file is absent
    """
    path = path or PATHS.settings
    if not path.exists():
        return SCORING_SETTINGS, BRACKET_SETTINGS

    with open(path, "r") as f:
        overrides = SettingsFile.model_validate(json.load(f))

    scoring_kwargs = overrides.model_dump(
        include={"super_tiebreak_min_points", "super_tiebreak_margin"},
        exclude_none=True,
    )
    bracket_kwargs = overrides.model_dump(
        include={"qualifiers_per_pool"},
        exclude_none=True,
    )
    if overrides.round_order is not None:
        bracket_kwargs["round_order"] = tuple(overrides.round_order)

    return ScoringSettings(**scoring_kwargs), BracketSettings(**bracket_kwargs)


def init_config() -> None:
    """Initialize configuration and create required directories."""
    PATHS.ensure_directories()
