"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
small helpers used by the application and tests.
"""

from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session
from .config import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        """SQLite ships with foreign key enforcement off; turn it on per connection."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    production deployments should rely on a proper migration tool
    (alembic) instead.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
