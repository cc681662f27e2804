"""Database utilities - engine, session, migrations."""

from src.app.core.db.engine import dispose_engine, get_engine
from src.app.core.db.migrations import run_migrations_sync
from src.app.core.db.session import SessionFactory, get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "SessionFactory",
    "get_session",
    # Migrations
    "run_migrations_sync",
]
