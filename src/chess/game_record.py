"""
Contract for the Service / DB layers.

Record of a finished game, as it gets stored in the (capped) game history.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.chess.moves import Move


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GameRecord:
    """Chess specific data of a completed game"""

    moves: list[Move]
    result: str
    white_time_remaining: float
    black_time_remaining: float
    date: datetime = field(default_factory=utc_now)
    id: UUID = field(default_factory=uuid4)

    @property
    def notation(self) -> list[str]:
        return [move.notation for move in self.moves]
