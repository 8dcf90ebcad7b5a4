"""Process-wide SQLite handle shared by every data-access object.

``AppDatabase`` opens the database file once, applies the startup pragmas,
checks the stored schema version and hands out the ``UserStore``. All
statements go through :meth:`AppDatabase.transaction`, which serialises
access to the single connection and translates ``sqlite3`` errors into the
package's own exception types.

Usage::

    db = AppDatabase(db_path=".userbase/database-name")
    db.user_dao().insert_all([User(first_name="Karla", last_name="Kolumna")])
    db.close()
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .errors import ConstraintViolation, SchemaMismatch, StorageUnavailable
from .store import UserStore

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = ".userbase/database-name"
MEMORY_DB = ":memory:"
SCHEMA_VERSION = 1
JOURNAL_MODES = ("WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    uid INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT,
    last_name TEXT
);
"""


class AppDatabase:
    """Owner of the single SQLite connection.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``. Parent
                 directories are created automatically.
        schema_version: Version stamped into ``PRAGMA user_version``.
        fallback_to_destructive_migration: Drop and recreate all tables when
                 the file carries a different schema version instead of
                 raising ``SchemaMismatch``.
        journal_mode: SQLite journal mode applied at startup (default WAL).
    """

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        *,
        schema_version: int = SCHEMA_VERSION,
        fallback_to_destructive_migration: bool = False,
        journal_mode: str = "WAL",
    ) -> None:
        journal_mode = journal_mode.upper()
        if journal_mode not in JOURNAL_MODES:
            raise ValueError(f"Unsupported journal mode: {journal_mode}")
        if schema_version < 1:
            raise ValueError("schema_version must be a positive integer")

        self.db_path = str(db_path)
        self.schema_version = schema_version
        self.fallback_to_destructive_migration = fallback_to_destructive_migration
        self._lock = threading.RLock()

        try:
            if self.db_path != MEMORY_DB:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(
                f"Cannot open database at {self.db_path}: {exc}"
            ) from exc

        conn.row_factory = sqlite3.Row
        try:
            conn.execute(f"PRAGMA journal_mode={journal_mode}")
            conn.execute("PRAGMA foreign_keys=ON")
            self._prepare_schema(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageUnavailable(
                f"Cannot initialise database at {self.db_path}: {exc}"
            ) from exc
        except SchemaMismatch:
            conn.close()
            raise

        self._conn: Optional[sqlite3.Connection] = conn
        self._users = UserStore(self)
        logger.info(f"Opened database {self.db_path} (schema v{schema_version})")

    def _prepare_schema(self, conn: sqlite3.Connection) -> None:
        (found,) = conn.execute("PRAGMA user_version").fetchone()
        if found not in (0, self.schema_version):
            if not self.fallback_to_destructive_migration:
                raise SchemaMismatch(
                    f"Database at {self.db_path} has schema version {found}, "
                    f"expected {self.schema_version}"
                )
            logger.warning(
                f"Schema version {found} != {self.schema_version}, "
                "dropping all tables"
            )
            self._drop_all_tables(conn)

        conn.executescript(_SCHEMA)
        conn.execute(f"PRAGMA user_version={int(self.schema_version)}")

    @staticmethod
    def _drop_all_tables(conn: sqlite3.Connection) -> None:
        rows = conn.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        ).fetchall()
        for row in rows:
            conn.execute(f'DROP TABLE IF EXISTS "{row["name"]}"')

    @property
    def closed(self) -> bool:
        return self._conn is None

    def user_dao(self) -> UserStore:
        """Return the data-access object for ``User`` records."""
        return self._users

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements under the connection lock in one transaction.

        Commits when the block exits normally and rolls back otherwise.

        Raises:
            ConstraintViolation: A uniqueness constraint failed.
            StorageUnavailable: The database is closed or SQLite reported
                any other error.
        """
        with self._lock:
            conn = self._conn
            if conn is None:
                raise StorageUnavailable(f"Database {self.db_path} is closed")
            try:
                with conn:
                    yield conn
            except sqlite3.IntegrityError as exc:
                raise ConstraintViolation(str(exc)) from exc
            except sqlite3.Error as exc:
                raise StorageUnavailable(
                    f"Database operation failed on {self.db_path}: {exc}"
                ) from exc

    def close(self) -> None:
        """Close the database connection. Safe to call more than once."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        logger.info(f"Closed database {self.db_path}")

    def __enter__(self) -> AppDatabase:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
