"""Core configuration and exceptions for shopdb."""

from .config import Config
from .exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    MigrationError,
    SchemaConflictError,
    SchemaError,
    SchemaPermissionError,
    ShopDBError,
)

__all__ = [
    "Config",
    "ShopDBError",
    "DatabaseError",
    "DatabaseConnectionError",
    "SchemaPermissionError",
    "MigrationError",
    "SchemaConflictError",
    "SchemaError",
]
