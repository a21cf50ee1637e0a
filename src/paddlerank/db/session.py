"""
Database session management for PaddleRank.

Provides the SQLAlchemy engine and session factory. The engine is created
lazily on first use so that importing this module never opens a
connection or loads a database driver.

Usage:
    # As a context manager (recommended for scripts)
    from paddlerank.db import get_session

    with get_session() as session:
        players = session.query(Player).all()
        session.add(new_player)
        # Commits automatically on exit, rolls back on exception

    # As a dependency (FastAPI)
    from paddlerank.db.session import get_db
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from paddlerank.config import settings


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    Pool sizing only applies to server databases; SQLite picks its own
    pool class. Pre-ping verifies connections before use.
    """
    url = database_url or settings.database_url
    kwargs = {
        "pool_pre_ping": True,
        "echo": settings.log_level == "DEBUG",  # Log SQL only in debug mode
    }
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
    return create_engine(url, **kwargs)


_engine: Optional[Engine] = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Session factory; bound to the engine when a session is opened
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
)


def new_session() -> Session:
    """Open a session bound to the application engine."""
    return SessionLocal(bind=_get_engine())


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = new_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency injection function for FastAPI.

    Example:
        @app.get("/api/players")
        def list_players(db: Session = Depends(get_db)):
            ...
    """
    db = new_session()
    try:
        yield db
    finally:
        db.close()
