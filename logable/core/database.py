"""
Database connection and session management.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from logable.core.config import settings

# Create declarative base for models
Base = declarative_base()


def create_db_engine(url: Optional[str] = None, **kwargs) -> Engine:
    """Create an engine, sharing a single connection for in-memory SQLite."""
    database_url = url or settings.database_url
    engine_kwargs = {"echo": settings.database_echo}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool
    engine_kwargs.update(kwargs)
    return create_engine(database_url, **engine_kwargs)


def get_session_factory(bind: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


# Create default engine and session maker
engine = create_db_engine()
SessionLocal = get_session_factory(engine)


# Dependency functions
def get_db():
    """Get database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Database initialization
def init_db(bind: Optional[Engine] = None):
    """Initialize database tables."""
    Base.metadata.create_all(bind=bind or engine)
