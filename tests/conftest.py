"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

from shopdb.store.database import Database
from shopdb.store.migrations import MigrationRunner


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def db_url(test_db_path: Path) -> str:
    """Provide a SQLAlchemy URL for the temporary database."""
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db(db_url: str) -> Database:
    """Provide a connected database instance."""
    database = Database(db_url)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def runner(db: Database) -> MigrationRunner:
    """Provide a MigrationRunner over the temporary database."""
    return MigrationRunner(db)


@pytest.fixture
def migrated_db(db: Database, runner: MigrationRunner) -> Database:
    """Provide a database with all migrations applied."""
    runner.run()
    return db
