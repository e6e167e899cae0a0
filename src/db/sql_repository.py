"""Implementation of GameHistoryRepository using SQLAlchemy"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.chess.game_record import GameRecord
from src.chess.moves import Move
from src.db.schema import DBGameRecord

logger = logging.getLogger(__name__)


class SQLGameHistory:
    """Data stored using SQL / methods implemented using SQLAlchemy. Capped like the in-memory history."""

    def __init__(self, db_session: Session, limit: int = 10) -> None:
        self.db = db_session
        self.limit = limit

    def add_record(self, record: GameRecord) -> GameRecord:
        record_db = DBGameRecord(
            id=record.id,
            moves=[move.to_dict() for move in record.moves],
            result=record.result,
            date=record.date,
            white_time_remaining=record.white_time_remaining,
            black_time_remaining=record.black_time_remaining,
        )
        self.db.add(record_db)
        self.db.commit()
        self.db.refresh(record_db)
        stored = self._to_record(record_db)
        self._drop_oldest()
        logger.info("Stored game %s (%s)", record.id, record.result)
        return stored

    def get_record(self, record_id: UUID) -> GameRecord | None:
        record_db = self._fetch_record(record_id)
        if record_db:
            return self._to_record(record_db)
        return None

    def list_records(self) -> list[GameRecord]:
        query = select(DBGameRecord).order_by(DBGameRecord.date.desc())
        return [self._to_record(record_db) for record_db in self.db.scalars(query)]

    def clear(self) -> None:
        self.db.execute(delete(DBGameRecord))
        self.db.commit()

    def close(self) -> None:
        self.db.close()

    def _drop_oldest(self) -> None:
        """Only the `limit` most recent games are kept"""
        query = select(DBGameRecord.id).order_by(DBGameRecord.date.desc()).offset(self.limit)
        stale_ids = list(self.db.scalars(query))
        if not stale_ids:
            return
        self.db.execute(delete(DBGameRecord).where(DBGameRecord.id.in_(stale_ids)))
        self.db.commit()

    def _fetch_record(self, record_id: UUID) -> DBGameRecord | None:
        query = select(DBGameRecord).where(DBGameRecord.id == record_id)
        return self.db.scalar(query)

    def _to_record(self, record_db: DBGameRecord) -> GameRecord:
        """Convert SQLAlchemy model to the domain record."""
        return GameRecord(
            moves=[Move.from_dict(move) for move in record_db.moves],
            result=record_db.result,
            white_time_remaining=record_db.white_time_remaining,
            black_time_remaining=record_db.black_time_remaining,
            date=record_db.date,
            id=record_db.id,
        )
