"""CLI entry point for shopdb."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="shopdb",
        description="Apply and revert shopdb schema migrations",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (default: $DATABASE_URL or local SQLite file)",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    subparsers.add_parser("migrate", help="Apply all pending migrations")

    up_parser = subparsers.add_parser("up", help="Apply a single migration")
    up_parser.add_argument("version", type=int, help="Migration version")

    down_parser = subparsers.add_parser("down", help="Revert a single migration")
    down_parser.add_argument("version", type=int, help="Migration version")

    rollback_parser = subparsers.add_parser(
        "rollback", help="Revert the latest migrations"
    )
    commands.add_rollback_arguments(rollback_parser)

    subparsers.add_parser("status", help="Show applied and pending migrations")
    subparsers.add_parser("check", help="Validate the schema against expectations")

    return parser


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()
    if args.database_url:
        config.db_url = args.database_url
    configure_logging(config.log_level)

    try:
        if args.command == "migrate":
            commands.handle_migrate(args, config)
        elif args.command == "up":
            commands.handle_up(args, config)
        elif args.command == "down":
            commands.handle_down(args, config)
        elif args.command == "rollback":
            commands.handle_rollback(args, config)
        elif args.command == "status":
            commands.handle_status(args, config)
        elif args.command == "check":
            commands.handle_check(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
