"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime, Dialect, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator[datetime]):
    """
    Timestamps are stored in UTC and always come back timezone aware.

    NOTE: SQLite has no timezone support, it hands back naive datetimes. Those are read as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect: Dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGameRecord(Base):
    __tablename__ = "game_history"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    result: Mapped[str]
    date: Mapped[datetime] = mapped_column(UTCDateTime)
    white_time_remaining: Mapped[float]
    black_time_remaining: Mapped[float]
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
