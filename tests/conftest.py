"""
Pytest fixtures for testing
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from budgetly.infrastructure.db.session import Base
from budgetly.infrastructure.db import models  # noqa: F401  (register tables)
from budgetly.infrastructure.store import InMemoryLedgerStore, SqlAlchemyLedgerStore


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def memory_store():
    return InMemoryLedgerStore()


@pytest.fixture
def sql_store(db_session):
    return SqlAlchemyLedgerStore(db_session)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every store-level behaviour is checked against both implementations"""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def user_id():
    """Sample user ID for tests"""
    return "u1"


class FixedClock:
    """Settable wall clock for rollover tests"""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, year: int, month: int, day: int = 15, hour: int = 12) -> None:
        self.now = datetime(year, month, day, hour, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc))
