"""Database layer."""

from newsbias.database.connection import DatabaseConnection, init_database
from newsbias.database.repository import ArticleRepository, ArticleStore

__all__ = [
    "DatabaseConnection",
    "init_database",
    "ArticleRepository",
    "ArticleStore",
]
