from __future__ import annotations

import os
import pathlib
import sys
import tempfile
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# The app lifespan creates tables on the configured file; keep it out of the source tree.
os.environ.setdefault("VAULTTRACK_DB_PATH", os.path.join(tempfile.gettempdir(), "vaulttrack-tests.db"))

from backend import database  # noqa: E402
from backend.server import app  # noqa: E402


@pytest.fixture(scope="session")
def engine() -> Iterator[Engine]:
    memory_engine = database.build_engine("sqlite://", shared_connection=True)
    database.init_db(memory_engine)
    yield memory_engine
    database.Base.metadata.drop_all(bind=memory_engine)
    memory_engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """A session whose work is discarded when the test ends."""

    connection = engine.connect()
    outer = connection.begin()
    session = database.build_sessionmaker(connection)()
    try:
        yield session
    finally:
        session.close()
        outer.rollback()
        connection.close()


@pytest.fixture()
def client(db_session: Session) -> Iterator[TestClient]:
    def _shared_session() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[database.get_db] = _shared_session
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def coffee() -> dict:
    return {"title": "Coffee", "amount": 150, "category": "Food"}


@pytest.fixture()
def committing_client() -> Iterator[TestClient]:
    """A client whose requests commit for real, one session per request."""

    memory_engine = database.build_engine("sqlite://", shared_connection=True)
    database.init_db(memory_engine)
    factory = database.build_sessionmaker(memory_engine)

    def _request_session() -> Iterator[Session]:
        with database.session_scope(factory) as session:
            yield session

    app.dependency_overrides[database.get_db] = _request_session
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        memory_engine.dispose()
