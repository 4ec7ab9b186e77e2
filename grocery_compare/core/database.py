"""
Database configuration and session management.
"""

import asyncio
from typing import Callable, TypeVar, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from grocery_compare.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    connect_args=connect_args,
    pool_pre_ping=True,
)

# Base class for declarative models
Base = declarative_base()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create all tables."""
    # Import models so they are registered on Base.metadata
    import grocery_compare.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db() -> Session:
    """
    Dependency for getting a database session.
    Use in FastAPI route dependencies.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


T = TypeVar("T")


async def run_in_new_session(bind: Union[Engine, Connection], work: Callable[[Session], T]) -> T:
    """
    Run work(session) in a worker thread with a session of its own.

    Sessions are not thread-safe, so concurrent reads never share the
    caller's session. The session is closed when work returns.
    """
    def _run() -> T:
        session = SessionLocal(bind=bind)
        try:
            return work(session)
        finally:
            session.close()

    return await asyncio.to_thread(_run)
