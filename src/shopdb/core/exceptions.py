"""Custom exceptions for shopdb."""


class ShopDBError(Exception):
    """Base exception for all shopdb errors."""

    pass


class DatabaseError(ShopDBError):
    """Database operation failed."""

    pass


class DatabaseConnectionError(DatabaseError, ConnectionError):
    """Database is unreachable or rejected the credentials."""

    pass


class SchemaPermissionError(DatabaseError, PermissionError):
    """Insufficient privilege to alter the schema."""

    pass


class MigrationError(ShopDBError):
    """Migration could not be applied or reverted."""

    pass


class SchemaConflictError(MigrationError):
    """Schema is not in the state the operation requires.

    Raised when creating a table that already exists, dropping one that
    does not, or applying/reverting a migration the ledger disagrees with.
    """

    def __init__(self, message: str, table: str | None = None):
        """Initialize exception with the conflicting table name.

        Args:
            message: Human-readable description.
            table: Name of the table involved, if any.
        """
        self.table = table
        super().__init__(message)


class SchemaError(ShopDBError):
    """Schema validation failed."""

    def __init__(self, issues: dict[str, list[str]]):
        self.issues = issues
        details = "; ".join(
            f"{table}: {', '.join(problems)}" for table, problems in issues.items()
        )
        super().__init__(f"Schema validation failed: {details}")
