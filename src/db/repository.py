"""Protocol repository for finished games (in-memory list for the session, SQLAlchemy for hosts that want it durable)"""

from typing import Protocol
from uuid import UUID

from src.chess.game_record import GameRecord


class GameHistoryRepository(Protocol):
    """Append-only log of finished games, most recent first"""

    def add_record(self, record: GameRecord) -> GameRecord:
        """Store a finished game. Oldest records beyond the limit are dropped."""
        ...

    def get_record(self, record_id: UUID) -> GameRecord | None:
        """Get a record by ID, if it still exists."""
        ...

    def list_records(self) -> list[GameRecord]:
        """All stored records, most recent first."""
        ...

    def clear(self) -> None:
        """Forget all records."""
        ...

    def close(self) -> None:
        """Release whatever the repository holds on to (a database session, ...)."""
        ...
