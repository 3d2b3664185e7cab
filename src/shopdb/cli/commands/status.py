"""Status and schema check commands for shopdb CLI."""

from ...core.config import Config
from ...store.schema import validate_schema
from .migrate import open_runner


def handle_status(args, config: Config) -> None:
    """Handle status command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    with open_runner(config) as runner:
        statuses = runner.get_status()
        version = runner.get_version()

    print("shopdb Migration Status")
    print("=" * 50)
    print(f"Current version: {version}")
    print()
    if not statuses:
        print("No migrations found.")
        return

    for status in statuses:
        state = "up  " if status.applied else "down"
        print(f"  {state}  {status.migration.version}  {status.migration.description}")


def handle_check(args, config: Config) -> None:
    """Handle check command: validate the live schema.

    Raises:
        SchemaError: If any expected table or column is missing or extra.
    """
    with open_runner(config) as runner:
        validate_schema(runner.db)
    print("Schema OK")
