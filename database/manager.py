"""Engine and session management."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

_db_manager: DatabaseManager | None = None


class DatabaseManager:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        kwargs = {}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # a single shared connection keeps the in-memory database alive
            kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        self.engine: Engine = create_engine(database_url, **kwargs)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        # register the models on Base.metadata before creating tables
        import machines.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Yield a session; commit on success, roll back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def init_database(database_url: str) -> DatabaseManager:
    """Create the process-wide manager and its tables."""
    global _db_manager
    _db_manager = DatabaseManager(database_url)
    _db_manager.create_tables()
    logger.info("Database initialised at %s", _db_manager.engine.url.render_as_string(hide_password=True))
    return _db_manager


def get_db_manager() -> DatabaseManager:
    if _db_manager is None:
        raise RuntimeError("Database not initialised; call init_database() first")
    return _db_manager
