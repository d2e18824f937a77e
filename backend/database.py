"""SQLAlchemy engine, session factory and transaction helpers for the expense store."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

LOG = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: str, *, shared_connection: bool = False) -> Engine:
    """Create a SQLite engine usable from FastAPI's worker threads.

    ``shared_connection`` pins a single connection, which keeps an in-memory
    database alive for the engine's lifetime.
    """

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}, "future": True}
    if shared_connection:
        options["poolclass"] = StaticPool
    return create_engine(url, **options)


def build_sessionmaker(bind: Engine | Connection) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, future=True)


engine = build_engine(settings.database_url)
SessionLocal = build_sessionmaker(engine)


def init_db(bind: Engine | None = None) -> None:
    """Create the expense tables on ``bind`` (the configured engine by default)."""

    from . import models  # noqa: F401  # registers the expenses table on Base.metadata

    target = bind or engine
    Base.metadata.create_all(bind=target)
    LOG.info("Expense store ready at %s", target.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Commit on success, roll back and re-raise on any error, always close."""

    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Iterator[Session]:
    with session_scope() as session:
        yield session
