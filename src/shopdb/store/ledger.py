"""Bookkeeping of applied migrations.

The ledger is a single table (``schema_migrations`` by default) holding one
row per applied migration version. It is always written on the same
connection as the migration's DDL so both commit or roll back together.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
)

from ..core.exceptions import SchemaConflictError

DEFAULT_LEDGER_TABLE = "schema_migrations"


def ledger_table(name: str = DEFAULT_LEDGER_TABLE) -> Table:
    """Build the ledger table definition on its own MetaData."""
    return Table(
        name,
        MetaData(),
        Column("version", String(32), primary_key=True),
        Column(
            "applied_at",
            DateTime(),
            nullable=False,
            server_default=func.current_timestamp(),
        ),
    )


class VersionLedger:
    """Records which migration versions have been applied.

    Example:
        with database.transaction() as conn:
            ledger = VersionLedger(conn)
            ledger.ensure_table()
            if not ledger.has_applied(20170616211742):
                ...
                ledger.record_applied(20170616211742)
    """

    def __init__(self, connection: Connection, table_name: str = DEFAULT_LEDGER_TABLE):
        """Initialize with an open connection.

        Args:
            connection: Connection the ledger reads and writes through.
            table_name: Name of the bookkeeping table.
        """
        self.conn = connection
        self.table = ledger_table(table_name)

    def ensure_table(self) -> None:
        """Create the bookkeeping table if it does not exist."""
        self.table.create(self.conn, checkfirst=True)

    def has_applied(self, version: int) -> bool:
        row = self.conn.execute(
            select(self.table.c.version).where(self.table.c.version == str(version))
        ).first()
        return row is not None

    def applied_versions(self) -> list[int]:
        """Applied versions in ascending order."""
        rows = self.conn.execute(select(self.table.c.version)).scalars().all()
        return sorted(int(version) for version in rows)

    def record_applied(self, version: int) -> None:
        """Mark a version as applied.

        Raises:
            SchemaConflictError: If the version is already recorded.
        """
        if self.has_applied(version):
            raise SchemaConflictError(f"Migration {version} is already recorded as applied")
        self.conn.execute(insert(self.table).values(version=str(version)))
        logger.debug(f"Ledger: recorded {version} as applied")

    def record_reverted(self, version: int) -> None:
        """Remove a version from the ledger.

        Raises:
            SchemaConflictError: If the version is not recorded.
        """
        result = self.conn.execute(
            delete(self.table).where(self.table.c.version == str(version))
        )
        if result.rowcount == 0:
            raise SchemaConflictError(f"Migration {version} is not recorded as applied")
        logger.debug(f"Ledger: recorded {version} as reverted")
