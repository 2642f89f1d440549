"""Database infrastructure - shared engine and session primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
]
