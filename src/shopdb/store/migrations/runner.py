"""Database migration runner for shopdb.

Applied versions are tracked in a ledger table. Every migration is applied
or reverted in its own transaction together with its ledger row, so the
ledger only changes when the DDL succeeded.
"""

from __future__ import annotations

import importlib
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from loguru import logger

from ...core.exceptions import MigrationError, SchemaConflictError
from ..ledger import DEFAULT_LEDGER_TABLE, VersionLedger

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from ..database import Database

DEFAULT_VERSIONS_PACKAGE = "shopdb.store.migrations.versions"


@dataclass
class Migration:
    """A database migration with an explicit reverse."""

    version: int
    description: str
    up: Callable[[Operations], None]
    down: Callable[[Operations], None]

    def __repr__(self) -> str:
        return f"Migration({self.version}, {self.description!r})"


@dataclass
class MigrationStatus:
    """A migration together with its applied state."""

    migration: Migration
    applied: bool


class MigrationRunner:
    """Applies and reverts versioned migrations.

    Migrations are discovered from the versions subpackage and applied in
    ascending version order.

    Example:
        runner = MigrationRunner(database)
        applied = runner.run()
        print(f"Applied {applied} migrations, now at version {runner.get_version()}")
    """

    def __init__(
        self,
        database: Database,
        ledger_table: str = DEFAULT_LEDGER_TABLE,
        package: str = DEFAULT_VERSIONS_PACKAGE,
    ):
        """Initialize with a connected database.

        Args:
            database: Database to migrate.
            ledger_table: Name of the bookkeeping table.
            package: Dotted name of the package holding migration modules.
        """
        self.db = database
        self.ledger_table = ledger_table
        self.package = package
        self._migrations: list[Migration] | None = None

    def get_migrations(self) -> list[Migration]:
        """Get all available migrations, sorted by version.

        Raises:
            MigrationError: If two modules declare the same version.
        """
        if self._migrations is not None:
            return self._migrations

        package = importlib.import_module(self.package)
        migrations: list[Migration] = []

        for _, modname, ispkg in pkgutil.iter_modules(package.__path__):
            if ispkg:
                continue

            module = importlib.import_module(f"{self.package}.{modname}")

            if not all(hasattr(module, attr) for attr in ("VERSION", "up", "down")):
                logger.warning(f"Skipping invalid migration module: {modname}")
                continue

            migrations.append(
                Migration(
                    version=int(module.VERSION),
                    description=getattr(module, "DESCRIPTION", modname),
                    up=module.up,
                    down=module.down,
                )
            )

        migrations.sort(key=lambda m: m.version)

        versions = [m.version for m in migrations]
        duplicates = sorted({v for v in versions if versions.count(v) > 1})
        if duplicates:
            raise MigrationError(f"Duplicate migration versions: {duplicates}")

        self._migrations = migrations
        return self._migrations

    def get_migration(self, version: int) -> Migration:
        """Look up a migration by version.

        Raises:
            MigrationError: If no migration has that version.
        """
        for migration in self.get_migrations():
            if migration.version == version:
                return migration
        raise MigrationError(f"Unknown migration version: {version}")

    def get_applied_versions(self) -> list[int]:
        with self.db.transaction() as conn:
            ledger = self._ledger(conn)
            return ledger.applied_versions()

    def get_version(self) -> int:
        """Highest applied version, or 0 if nothing is applied."""
        applied = self.get_applied_versions()
        return applied[-1] if applied else 0

    def get_latest_version(self) -> int:
        migrations = self.get_migrations()
        if not migrations:
            return 0
        return migrations[-1].version

    def get_pending_migrations(self) -> list[Migration]:
        """Get migrations that haven't been applied yet, in order."""
        applied = set(self.get_applied_versions())
        return [m for m in self.get_migrations() if m.version not in applied]

    def get_status(self) -> list[MigrationStatus]:
        applied = set(self.get_applied_versions())
        return [MigrationStatus(m, m.version in applied) for m in self.get_migrations()]

    def is_up_to_date(self) -> bool:
        return not self.get_pending_migrations()

    def run(self) -> int:
        """Apply all pending migrations.

        Stops at the first failure and re-raises it. Migrations applied
        before the failure stay applied.

        Returns:
            Number of migrations applied.
        """
        pending = self.get_pending_migrations()

        if not pending:
            logger.debug(f"Database at version {self.get_version()}, no migrations to apply")
            return 0

        applied = 0
        for migration in pending:
            self._apply(migration)
            applied += 1

        logger.info(
            f"Applied {applied} migration(s), database now at version {self.get_version()}"
        )
        return applied

    def apply(self, version: int) -> Migration:
        """Apply a single migration.

        Raises:
            MigrationError: If the version is unknown.
            SchemaConflictError: If it is already applied.
        """
        migration = self.get_migration(version)
        self._apply(migration)
        return migration

    def revert(self, version: int) -> Migration:
        """Revert a single migration.

        Raises:
            MigrationError: If the version is unknown.
            SchemaConflictError: If it is not applied.
        """
        migration = self.get_migration(version)
        self._revert(migration)
        return migration

    def rollback(self, steps: int = 1) -> list[Migration]:
        """Revert the most recently applied migrations, newest first.

        Args:
            steps: How many applied migrations to revert.

        Returns:
            The reverted migrations.
        """
        if steps < 1:
            raise MigrationError(f"Rollback steps must be positive, got {steps}")

        applied = self.get_applied_versions()
        reverted = []
        for version in reversed(applied[-steps:]):
            reverted.append(self.revert(version))
        return reverted

    def revert_to(self, version: int) -> list[Migration]:
        """Revert every applied migration newer than ``version``.

        ``version`` 0 reverts everything. Any other value must name a known
        migration.

        Returns:
            The reverted migrations, newest first.
        """
        if version != 0:
            self.get_migration(version)

        newer = [v for v in self.get_applied_versions() if v > version]
        reverted = []
        for applied_version in reversed(newer):
            reverted.append(self.revert(applied_version))

        if not reverted:
            logger.debug(f"Nothing applied after version {version}")
        return reverted

    def _ledger(self, conn: Connection) -> VersionLedger:
        ledger = VersionLedger(conn, self.ledger_table)
        ledger.ensure_table()
        return ledger

    def _apply(self, migration: Migration) -> None:
        logger.info(f"Applying migration {migration.version}: {migration.description}")
        try:
            with self.db.transaction(ddl=True) as conn:
                ledger = self._ledger(conn)
                if ledger.has_applied(migration.version):
                    raise SchemaConflictError(
                        f"Migration {migration.version} is already applied"
                    )
                migration.up(self._operations(conn))
                ledger.record_applied(migration.version)
        except Exception as e:
            logger.error(f"Migration {migration.version} failed: {e}")
            raise
        logger.debug(f"Migration {migration.version} applied successfully")

    def _revert(self, migration: Migration) -> None:
        logger.info(f"Reverting migration {migration.version}: {migration.description}")
        try:
            with self.db.transaction(ddl=True) as conn:
                ledger = self._ledger(conn)
                if not ledger.has_applied(migration.version):
                    raise SchemaConflictError(
                        f"Migration {migration.version} is not applied"
                    )
                migration.down(self._operations(conn))
                ledger.record_reverted(migration.version)
        except Exception as e:
            logger.error(f"Reverting migration {migration.version} failed: {e}")
            raise
        logger.debug(f"Migration {migration.version} reverted successfully")

    @staticmethod
    def _operations(conn: Connection) -> Operations:
        return Operations(MigrationContext.configure(conn))
