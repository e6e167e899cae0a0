"""In-memory implementation of the GameHistoryRepository: the game history of a running session"""

import logging
from uuid import UUID

from src.chess.game_record import GameRecord

logger = logging.getLogger(__name__)


class InMemoryGameHistory:
    """Keeps only the `limit` most recent games (10 by default)"""

    def __init__(self, limit: int = 10) -> None:
        self.limit = limit
        self._records: list[GameRecord] = []

    def add_record(self, record: GameRecord) -> GameRecord:
        self._records = [record, *self._records][: self.limit]
        logger.info("Stored game %s (%s), %d in history", record.id, record.result, len(self._records))
        return record

    def get_record(self, record_id: UUID) -> GameRecord | None:
        return next((record for record in self._records if record.id == record_id), None)

    def list_records(self) -> list[GameRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def close(self) -> None:
        """Nothing to release: the history lives as long as the session"""
