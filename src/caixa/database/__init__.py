"""Database layer for caixa application."""

from caixa.database.base import Database
from caixa.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
