"""Migration commands for shopdb CLI."""

import argparse
from contextlib import contextmanager
from typing import Iterator

from ...core.config import Config
from ...store.database import Database
from ...store.migrations import Migration, MigrationRunner


@contextmanager
def open_runner(config: Config) -> Iterator[MigrationRunner]:
    """Connect to the configured database and yield a runner for it."""
    with Database(config.db_url, echo=config.echo_sql) as db:
        yield MigrationRunner(db, ledger_table=config.ledger_table)


def add_rollback_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the rollback command."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-n",
        "--steps",
        type=int,
        default=1,
        help="Number of migrations to revert (default: 1)",
    )
    group.add_argument(
        "--to",
        type=int,
        dest="to_version",
        metavar="VERSION",
        help="Revert every migration newer than VERSION (0 reverts all)",
    )


def handle_migrate(args, config: Config) -> None:
    """Handle migrate command: apply all pending migrations.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    with open_runner(config) as runner:
        applied = runner.run()
        if applied:
            print(f"Applied {applied} migration(s), now at version {runner.get_version()}")
        else:
            print(f"Already up to date at version {runner.get_version()}")


def handle_up(args, config: Config) -> None:
    """Handle up command: apply a single migration."""
    with open_runner(config) as runner:
        migration = runner.apply(args.version)
        _print_migration("Applied", migration)


def handle_down(args, config: Config) -> None:
    """Handle down command: revert a single migration."""
    with open_runner(config) as runner:
        migration = runner.revert(args.version)
        _print_migration("Reverted", migration)


def handle_rollback(args, config: Config) -> None:
    """Handle rollback command.

    Args:
        args: Parsed command arguments (steps or to_version).
        config: Application configuration.
    """
    with open_runner(config) as runner:
        if args.to_version is not None:
            reverted = runner.revert_to(args.to_version)
        else:
            reverted = runner.rollback(args.steps)

        if not reverted:
            print("Nothing to roll back")
        for migration in reverted:
            _print_migration("Reverted", migration)


def _print_migration(verb: str, migration: Migration) -> None:
    print(f"{verb} {migration.version}: {migration.description}")
