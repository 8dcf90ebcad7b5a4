"""
userbase — a small typed user store over an embedded SQLite file.

Architecture:
    AppDatabase (one connection per process) → UserStore (insert / query / delete)
    Worker thread → NoticeBus → Display

Components:
    - AppDatabase: Opens the file once, applies pragmas, checks the schema version
    - UserStore: Typed data-access object for User records
    - NoticeBus: Async queue that hands worker results back to the event loop
    - DatabaseTask: Background job with a completion callback on the loop

Usage:
    from userbase import AppDatabase, User

    with AppDatabase(db_path=".userbase/database-name") as db:
        users = db.user_dao()
        users.insert_all([User(first_name="Karla", last_name="Kolumna")])
        users.find_by_name("Karla", "Kolumna")
"""

__version__ = "0.1.0"

from .bus import Notice, NoticeBus
from .database import AppDatabase
from .errors import (
    ConstraintViolation,
    NotFound,
    SchemaMismatch,
    StorageUnavailable,
    UserStoreError,
)
from .store import User, UserStore
from .tasks import DatabaseTask, database_write_and_read, database_write_and_read_async

__all__ = [
    "AppDatabase",
    "User",
    "UserStore",
    "Notice",
    "NoticeBus",
    "DatabaseTask",
    "database_write_and_read",
    "database_write_and_read_async",
    "UserStoreError",
    "ConstraintViolation",
    "NotFound",
    "StorageUnavailable",
    "SchemaMismatch",
]
