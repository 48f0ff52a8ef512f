"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    SwitchboardStateError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "SwitchboardStateError",
]
