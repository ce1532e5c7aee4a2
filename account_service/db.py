"""
Database connection, session management and transaction scope
"""
from contextlib import contextmanager
from typing import Generator, Iterator
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, echo=echo)


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db(bind=None) -> None:
    """
    Create all tables. Called on application startup.
    """
    # Import models so they are registered with Base
    from . import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database initialized successfully")
    except SQLAlchemyError as e:
        logger.error("Failed to initialize database: %s", e)
        raise


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work against ``db``.

    Commits when the block exits normally. Any exception rolls back every
    change made inside the block and is re-raised.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


def check_db_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection is successful, False otherwise
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database connection check failed: %s", e)
        return False
    finally:
        db.close()
