"""Database layer for the phone mode store."""

from src.db.config import DatabaseSettings, get_db_settings
from src.db.database import Base, Database, get_db

__all__ = [
    "Base",
    "Database",
    "DatabaseSettings",
    "get_db",
    "get_db_settings",
]
