"""
Database connection and session management for NoteTube.
"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from notetube.config import config

# Create base class for SQLAlchemy models
Base = declarative_base()


def make_engine(database_url: str = config.DATABASE_URL, **kwargs) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, **kwargs)


engine = make_engine()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Type alias for session
DBSession = Session


def init_db(bind: Engine = engine) -> None:
    """Initialize the database by creating all tables."""
    from notetube.db import models  # noqa: F401

    # Create all tables
    Base.metadata.create_all(bind=bind)


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session.

    This is a dependency that will be used in FastAPI route functions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
