"""SQLite connection management for the article store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from newsbias.utils.exceptions import DatabaseError
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA busy_timeout = 30000",
)


class DatabaseConnection:
    """Lazily opened SQLite connection with the article schema applied.

    The schema uses ``IF NOT EXISTS`` throughout and is applied on every
    open, so pointing ``db_path`` at a fresh file is enough to start.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = Path(db_path)
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def connect(self) -> sqlite3.Connection:
        """Open the connection on first use.

        Returns:
            SQLite connection object

        Raises:
            DatabaseError: If the database cannot be opened or the schema
                cannot be applied
        """
        if self._connection is not None:
            return self._connection

        try:
            connection = sqlite3.connect(str(self.db_path), timeout=30.0)
            for pragma in PRAGMAS:
                connection.execute(pragma)
            connection.row_factory = sqlite3.Row
            connection.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        except sqlite3.Error as e:
            logger.error("database_connect_failed", path=str(self.db_path), error=str(e))
            raise DatabaseError(f"Failed to open database {self.db_path}: {e}") from e

        self._connection = connection
        logger.info("database_connected", path=str(self.db_path))
        return connection

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        return self.connect().execute(query, params)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back if the block raises."""
        connection = self.connect()
        try:
            yield connection
        except BaseException:
            connection.rollback()
            raise
        else:
            connection.commit()

    def close(self) -> None:
        """Checkpoint the WAL and close the connection."""
        if self._connection is None:
            return

        try:
            self._connection.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        except sqlite3.Error as e:
            logger.warning("wal_checkpoint_failed", error=str(e))

        self._connection.close()
        self._connection = None
        logger.info("database_closed", path=str(self.db_path))

    def __enter__(self) -> "DatabaseConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        self.close()


def init_database(db_path: Path) -> DatabaseConnection:
    """Create the database file, its parent directory and the schema.

    Args:
        db_path: Path to SQLite database file

    Returns:
        Connected DatabaseConnection
    """
    db_path = Path(db_path)
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)

    db = DatabaseConnection(db_path)
    db.connect()

    logger.info("database_initialized", path=str(db_path))

    return db
