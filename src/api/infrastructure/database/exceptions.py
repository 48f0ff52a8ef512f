"""Database-specific exceptions shared across bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database cannot be reached or does not exist."""

    def __init__(self, message: str, database: str | None = None):
        super().__init__(message)
        self.database = database


class SwitchboardStateError(DatabaseError):
    """Raised when the tenant connection binding is used incorrectly.

    Examples are switching databases while a transaction is open on the
    current binding, or asking for a session before any database is bound.
    These are programming errors and are never mapped to client responses.
    """

    pass
