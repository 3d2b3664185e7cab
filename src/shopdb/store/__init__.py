"""Storage layer for shopdb."""

from .database import Database
from .ledger import VersionLedger
from .models import Base, ProductModel
from .schema import EXPECTED_SCHEMA, validate_schema

__all__ = [
    "Database",
    "VersionLedger",
    "Base",
    "ProductModel",
    "EXPECTED_SCHEMA",
    "validate_schema",
]
