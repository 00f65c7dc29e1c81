"""Shared fixtures: a throwaway SQLite database and user factories."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"shopfeed_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"

from shopfeed.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from shopfeed.domain.entities import User  # noqa: E402
from shopfeed.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from shopfeed.infrastructure.notifications import (  # noqa: E402
    NotificationFeed,
    NotificationPublisher,
)
from shopfeed.infrastructure.repositories import UserRepository  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Return a factory that stores a user and returns the entity."""

    def _make_user(
        name: str = "User",
        *,
        role: str = "member",
        leader_id: str | None = None,
        is_active: bool = True,
    ) -> User:
        user_id = str(uuid4())
        return UserRepository(session).create(
            User(
                id=user_id,
                name=name,
                email=f"{user_id}@example.com",
                role=role,
                leader_id=leader_id,
                is_active=is_active,
            )
        )

    return _make_user


@pytest.fixture()
def unreachable_session_factory(tmp_path):
    """Return a session factory whose database file cannot be opened."""

    missing_path = tmp_path / "missing" / "shopfeed.db"
    broken_engine = create_engine(f"sqlite:///{missing_path}")
    yield sessionmaker(bind=broken_engine, autoflush=False)
    broken_engine.dispose()


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def feed() -> NotificationFeed:
    return NotificationFeed(queue_size=10)


@pytest.fixture()
def publisher(feed) -> NotificationPublisher:
    return NotificationPublisher(feed)


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
