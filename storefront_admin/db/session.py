from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from storefront_admin.core.config import DatabaseSettings, settings
from storefront_admin.db.base import Base
from storefront_admin.utils.logger import get_logger

logger = get_logger("db_session")


class DBSessionManager:

    def __init__(self, db_settings: DatabaseSettings | None = None) -> None:
        db_settings = db_settings or settings.database
        url = db_settings.database_url
        if db_settings.is_sqlite:
            # SQLite pools take no sizing options
            self.engine = create_engine(
                url,
                future=True,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(
                url,
                future=True,
                pool_size=db_settings.pool_size,
                max_overflow=db_settings.max_overflow,
                pool_timeout=db_settings.pool_timeout,
                pool_recycle=db_settings.pool_recycle,
                pool_pre_ping=db_settings.pool_pre_ping,
            )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )

    def create_tables(self) -> None:
        # Registers the Category mapping on Base.metadata
        import storefront_admin.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready")

    def get_session(self) -> Generator[Session, None, None]:
        session: Session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


db_manager = DBSessionManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is closed after the request."""
    yield from db_manager.get_session()
