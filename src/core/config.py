"""
Settings for a game session.

Defaults match the mobile app (10 minute clocks, 10 finished games remembered, 3 second hints).
A host can override them by passing its own GameSettings, or pick them up from VOIDCHESS_* environment variables.
"""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.core.exceptions import ConfigurationError
from src.core.shared_types import Difficulty, HintStrategy

ENV_PREFIX = "VOIDCHESS_"


class GameSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_clock_seconds: int = Field(default=600, gt=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    clock_autorun: bool = True
    history_limit: int = Field(default=10, gt=0)
    hint_display_seconds: float = Field(default=3.0, ge=0)
    default_difficulty: Difficulty = Difficulty.INTERMEDIATE
    hint_strategy: HintStrategy = HintStrategy.RANKED
    # NOTE: Earlier releases only moved the king when castling. Set to False to get that behaviour back.
    castling_moves_rook: bool = True
    database_url: str = "sqlite:///void_chess_history.db"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Collect VOIDCHESS_<FIELD> variables and let pydantic do the type conversion."""
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls(**overrides)
        except ValidationError as error:
            raise ConfigurationError(
                f"Invalid settings in environment: {error}"
            ) from error
