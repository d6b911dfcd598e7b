"""Database layer for journalsynth application."""

from journalsynth.database.base import Database
from journalsynth.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
