"""Exception hierarchy for the user store.

Storage-level ``sqlite3`` errors never leak out of the package; they are
re-raised as one of the types below with the original error chained.
"""


class UserStoreError(Exception):
    """Base class for all user store failures."""


class ConstraintViolation(UserStoreError):
    """An insert collided with an existing uid."""


class NotFound(UserStoreError, LookupError):
    """No stored record matched the query."""


class StorageUnavailable(UserStoreError):
    """The database file or connection could not be opened or used."""


class SchemaMismatch(StorageUnavailable):
    """The database file carries a schema version this build cannot read."""
