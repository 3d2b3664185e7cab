"""Configuration management for shopdb."""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_db_url() -> str:
    """Get default database URL."""
    cache_dir = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    return f"sqlite:///{cache_dir / 'shopdb' / 'shop.db'}"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Main application configuration."""

    db_url: str = field(default_factory=_default_db_url)
    ledger_table: str = "schema_migrations"
    log_level: str = "WARNING"
    echo_sql: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if url := os.environ.get("DATABASE_URL"):
            config.db_url = url

        if table := os.environ.get("SHOPDB_LEDGER_TABLE"):
            config.ledger_table = table

        if level := os.environ.get("SHOPDB_LOG_LEVEL"):
            config.log_level = level.upper()

        if echo := os.environ.get("SHOPDB_ECHO_SQL"):
            config.echo_sql = _as_bool(echo)

        return config
