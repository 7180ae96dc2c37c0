"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a SQLite file next to the package by default)
and provides small helpers used by the application, scripts and tests.
"""

from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def _connect_args(url: str) -> dict:
    # SQLite connections are shared between the request thread and background tasks
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=_connect_args(settings.DATABASE_URL))


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    Intended for local development and tests; production deployments
    should rely on a proper migration tool (alembic) instead.
    """
    # importing the models registers every table on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def drop_db_and_tables():
    """Drop every table known to the metadata. Used by the test suite."""
    from . import models  # noqa: F401

    SQLModel.metadata.drop_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
