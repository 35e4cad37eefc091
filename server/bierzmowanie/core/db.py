from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from bierzmowanie.core.config import settings
from bierzmowanie.core.errors import PersistenceError

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine (and its bounded connection pool) for one process."""

    def __init__(self, url: str, **engine_options: Any) -> None:
        self.url = url
        self.engine_options = engine_options
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @classmethod
    def from_settings(cls) -> "Database":
        options: dict[str, Any] = {"pool_pre_ping": True}
        if not settings.DATABASE_URL.startswith("sqlite"):
            options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )
        return cls(settings.DATABASE_URL, **options)

    def open(self) -> "Database":
        if self.engine is None:
            self.engine = create_engine(self.url, future=True, **self.engine_options)
            self._session_factory = sessionmaker(
                bind=self.engine,
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
                future=True,
            )
            logger.info("database_opened", extra={"dialect": self.engine.dialect.name})
        return self

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("database_closed")
        self.engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a unit of work: commit on success, roll back on any failure.

    Driver errors are re-raised as ``PersistenceError`` after the rollback;
    application errors (validation, not found, ...) propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("transaction_rolled_back")
        raise PersistenceError(detail=str(exc.__cause__ or exc)) from exc
    except Exception:
        db.rollback()
        raise
