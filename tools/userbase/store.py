"""Typed data-access object for ``User`` records."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from .errors import NotFound

if TYPE_CHECKING:
    from .database import AppDatabase

logger = logging.getLogger(__name__)

# Stays well below SQLite's bound-variable limit on older builds.
_ID_CHUNK_SIZE = 500

# Largest value SQLite can store in an INTEGER column.
MAX_UID = 2**63 - 1


@dataclass
class User:
    """A stored user.

    ``uid == 0`` means "not assigned yet"; the store picks the next free id
    on insert. A missing name is ``None``, which is distinct from ``""``.
    """

    uid: int = 0
    first_name: Optional[str] = None
    last_name: Optional[str] = None


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        uid=row["uid"],
        first_name=row["first_name"],
        last_name=row["last_name"],
    )


def _name_clause(column: str, value: Optional[str], like: bool) -> str:
    if like and value is not None:
        return f"{column} LIKE ?"
    return f"{column} IS ?"


class UserStore:
    """Insert and query access to the ``users`` table.

    The store holds a reference to an :class:`AppDatabase` but does not own
    it; opening and closing the database is the caller's job. Every method
    blocks on SQLite I/O and may be called from any thread.

    Raises ``StorageUnavailable`` from every method when the database cannot
    be used.
    """

    def __init__(self, database: AppDatabase) -> None:
        self._db = database

    def insert_all(self, users: Iterable[User]) -> list[int]:
        """Persist users in a single transaction.

        Users with ``uid == 0`` get the next unused id; non-zero uids are
        stored as given. The input objects are left untouched.

        Returns:
            Final uids, in input order.

        Raises:
            ValueError: A uid is negative.
            ConstraintViolation: An explicit uid already exists. Nothing
                from the batch is stored.
        """
        users = list(users)
        for user in users:
            if not 0 <= user.uid <= MAX_UID:
                raise ValueError(
                    f"uid must be between 0 and {MAX_UID}, got {user.uid}"
                )
        if not users:
            return []

        uids = []
        with self._db.transaction() as conn:
            for user in users:
                cur = conn.execute(
                    "INSERT INTO users (uid, first_name, last_name) VALUES (?, ?, ?)",
                    (user.uid or None, user.first_name, user.last_name),
                )
                uids.append(cur.lastrowid)
        logger.debug(f"Inserted {len(uids)} user(s): {uids}")
        return uids

    def all(self) -> list[User]:
        """Return every user ordered by uid."""
        with self._db.transaction() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY uid").fetchall()
        return [_row_to_user(r) for r in rows]

    def load_all_by_ids(self, ids: Iterable[int]) -> list[User]:
        """Return the users whose uid is in ``ids``, ordered by uid.

        Ids with no stored user are skipped.
        """
        wanted = sorted(uid for uid in set(ids) if 0 <= uid <= MAX_UID)
        if not wanted:
            return []

        found: list[User] = []
        with self._db.transaction() as conn:
            for start in range(0, len(wanted), _ID_CHUNK_SIZE):
                chunk = wanted[start : start + _ID_CHUNK_SIZE]
                placeholders = ", ".join("?" for _ in chunk)
                rows = conn.execute(
                    f"SELECT * FROM users WHERE uid IN ({placeholders}) ORDER BY uid",
                    chunk,
                ).fetchall()
                found.extend(_row_to_user(r) for r in rows)
        return found

    def find_by_name(
        self, first: Optional[str], last: Optional[str], like: bool = False
    ) -> User:
        """Return the lowest-uid user with the given names.

        Matching is exact and null-safe by default (``None`` finds users
        without that name). With ``like=True`` both arguments are SQL LIKE
        patterns, so ``%`` and ``_`` act as wildcards and ASCII letters
        compare case-insensitively.

        Raises:
            NotFound: No user matches.
        """
        where = " AND ".join(
            [
                _name_clause("first_name", first, like),
                _name_clause("last_name", last, like),
            ]
        )
        with self._db.transaction() as conn:
            row = conn.execute(
                f"SELECT * FROM users WHERE {where} ORDER BY uid LIMIT 1",
                (first, last),
            ).fetchone()
        if row is None:
            raise NotFound(f"No user named {first!r} {last!r}")
        return _row_to_user(row)

    def delete(self, user: User) -> bool:
        """Remove the user with ``user.uid``.

        Deleting a user that is already gone is not an error. A uid outside
        SQLite's integer range matches nothing.

        Returns:
            True if a row was removed, False if none matched.
        """
        if not 0 <= user.uid <= MAX_UID:
            return False
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM users WHERE uid = ?", (user.uid,))
        removed = cur.rowcount > 0
        if removed:
            logger.debug(f"Deleted user {user.uid}")
        return removed

    def count(self) -> int:
        """Return the number of stored users."""
        with self._db.transaction() as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
        return total
