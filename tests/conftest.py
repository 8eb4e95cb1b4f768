"""
Pytest configuration and fixtures for testing.

This module provides common fixtures for:
- Database engine and session management
- A frozen clock shared by the test models
- In-memory records for unit tests
"""

import pytest
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker

from logable.core.database import Base, create_db_engine, init_db
from tests import models
from tests.fakes import FROZEN_TIME, FrozenClock, StaticActorProvider


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="session")
def test_db_engine():
    """Create an in-memory SQLite engine with working SAVEPOINT support."""
    engine = create_db_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_db_engine):
    """Create a fresh database session for each test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Clear all tables for next test
        Base.metadata.drop_all(bind=test_db_engine)
        init_db(test_db_engine)


@pytest.fixture(scope="function")
def model_clock():
    """Reset the clock used by the test models."""
    models.clock.current = FROZEN_TIME
    models.clock.calls = 0
    yield models.clock
    models.clock.current = FROZEN_TIME


# ==================== UNIT FIXTURES ====================

@pytest.fixture(scope="function")
def clock():
    """Provide a frozen clock."""
    return FrozenClock()


@pytest.fixture(scope="function")
def actor():
    """Provide an actor provider returning a fixed actor."""
    return StaticActorProvider("alice")
