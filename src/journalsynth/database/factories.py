"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from journalsynth.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "JOURNALSYNTH_DB_PATH"
DB_URL_ENV = "JOURNALSYNTH_DATABASE_URL"


def default_sqlite_path() -> str:
    """Return ~/.journalsynth/journalsynth.db, creating the directory."""
    db_dir = Path.home() / ".journalsynth"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "journalsynth.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks JOURNALSYNTH_DB_PATH
            environment variable, then defaults to ~/.journalsynth/journalsynth.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV) or default_sqlite_path()
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create the configured store.

    An explicit SQLite path wins; otherwise JOURNALSYNTH_DATABASE_URL selects
    any SQLAlchemy URL (e.g. a shared PostgreSQL ledger), and SQLite is the
    fallback.
    """
    if database_path is None:
        database_url = os.environ.get(DB_URL_ENV)
        if database_url:
            return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path)
