"""
Database connection and session management for WardShift.

Uses SQLAlchemy with SQLite for development and PostgreSQL for production.
"""
import logging
from typing import Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool

from wardshift.core.config import Config

logger = logging.getLogger(__name__)

# Create declarative base for ORM models
Base = declarative_base()

# Database engine
engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def build_engine(db_url: str) -> Engine:
    """Create an engine, with SQLite-specific settings where needed."""
    if db_url.startswith("sqlite"):
        new_engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=Config.DEBUG
        )

        # Enable foreign keys for SQLite
        @event.listens_for(new_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine

    # PostgreSQL or other databases
    return create_engine(db_url, pool_pre_ping=True, echo=Config.DEBUG)


def build_session_factory(db_url: str) -> sessionmaker:
    """Create a standalone engine + session factory with all tables created."""
    # Register ORM tables on Base before create_all
    from wardshift.db import tables  # noqa: F401

    new_engine = build_engine(db_url)
    Base.metadata.create_all(bind=new_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=new_engine)


def init_db(database_url: Optional[str] = None) -> Engine:
    """Initialize the process-wide database connection and create tables."""
    global engine, SessionLocal

    db_url = database_url or Config.DATABASE_URL
    logger.info(f"Initializing database: {db_url}")

    SessionLocal = build_session_factory(db_url)
    engine = SessionLocal.kw["bind"]

    logger.info("Database initialized successfully")
    return engine


def get_session_factory() -> sessionmaker:
    if SessionLocal is None:
        init_db()
    return SessionLocal


def get_db() -> Session:
    """Get a database session (non-generator version)."""
    return get_session_factory()()
