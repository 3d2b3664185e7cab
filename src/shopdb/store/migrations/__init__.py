"""Database migrations for shopdb.

Versioned schema migrations tracked in a ledger table.

Example:
    from shopdb.store.migrations import MigrationRunner

    runner = MigrationRunner(database)
    applied = runner.run()
"""

from .runner import Migration, MigrationRunner, MigrationStatus

__all__ = [
    "Migration",
    "MigrationRunner",
    "MigrationStatus",
]
