from pathlib import Path
from typing import Generator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores REFERENCES clauses unless the pragma is set on every connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    if is_sqlite and ":memory:" not in database_url:
        db_path = database_url.replace("sqlite:///", "", 1)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, echo=echo, connect_args=connect_args)
    enable_sqlite_foreign_keys(engine)
    return engine


def get_session(request: Request) -> Generator[Session, None, None]:
    """Get database session bound to the app's engine"""
    with Session(request.app.state.engine) as session:
        yield session


def init_db(engine: Engine) -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from bookswap.models.auth_session import AuthSession  # noqa: F401
    from bookswap.models.book import Book  # noqa: F401
    from bookswap.models.swap_request import SwapRequest  # noqa: F401
    from bookswap.models.user import Account, User  # noqa: F401

    SQLModel.metadata.create_all(engine)
