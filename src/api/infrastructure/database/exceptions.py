"""Database-specific exceptions shared by all bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached."""

    def __init__(self, message: str, role: str | None = None):
        super().__init__(message)
        self.role = role
