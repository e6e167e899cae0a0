"""Generate database sessions for the durable game history"""

from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import GameSettings
from src.db.schema import Base


def create_session_factory(settings: Optional[GameSettings] = None) -> sessionmaker[Session]:
    """Engine for the configured URL. Ensures all tables are created."""
    settings = settings or GameSettings()
    engine: Engine = create_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autoflush=False, bind=engine)
