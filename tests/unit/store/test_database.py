"""Tests for database connection and management."""

import sqlite3
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, ProgrammingError

from shopdb.core.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    SchemaConflictError,
    SchemaPermissionError,
)
from shopdb.store.database import Database, translate_error


class TestDatabaseConnection:
    """Tests for database connection lifecycle."""

    def test_connect_creates_database_file(self, db_url: str, test_db_path: Path):
        """Database file should be created on connect."""
        db = Database(db_url)
        db.connect()
        with db.transaction() as conn:
            conn.execute(text("CREATE TABLE t (id INTEGER)"))

        assert test_db_path.exists()
        db.close()

    def test_connect_creates_parent_directories(self, tmp_path: Path):
        """Connect should create parent directories if needed."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        db = Database(f"sqlite:///{db_path}")
        db.connect()

        assert db_path.parent.is_dir()
        db.close()

    def test_close_without_connect(self, db_url: str):
        """Close should not raise if not connected."""
        db = Database(db_url)
        db.close()

    def test_double_connect(self, db_url: str):
        """Connecting twice should work without error."""
        db = Database(db_url)
        db.connect()
        db.connect()
        assert db.is_connected
        db.close()

    def test_close_clears_connection(self, db_url: str):
        """Close should clear the engine."""
        db = Database(db_url)
        db.connect()
        db.close()

        with pytest.raises(DatabaseError, match="not connected"):
            db.table_names()

    def test_context_manager(self, db_url: str):
        with Database(db_url) as db:
            assert db.is_connected
            assert db.dialect_name == "sqlite"
        assert not db.is_connected

    def test_invalid_url(self):
        with pytest.raises(DatabaseError, match="Invalid database URL"):
            Database("not a url").connect()

    def test_unreachable_database_raises_connection_error(self, tmp_path: Path):
        """A path that cannot be opened should surface as a connection error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        db = Database(f"sqlite:///{blocker / 'shop.db'}")
        with pytest.raises(DatabaseConnectionError) as exc_info:
            db.connect()

        assert isinstance(exc_info.value, ConnectionError)
        assert not db.is_connected


class TestTransactions:
    """Tests for transaction handling."""

    def test_commit_on_success(self, db: Database):
        with db.transaction() as conn:
            conn.execute(text("CREATE TABLE t (id INTEGER)"))
            conn.execute(text("INSERT INTO t VALUES (1)"))

        with db.transaction() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM t")).scalar_one() == 1

    def test_ddl_rolls_back_on_error(self, db: Database):
        """CREATE TABLE should be undone along with the rest of the transaction."""
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                conn.execute(text("CREATE TABLE t (id INTEGER)"))
                raise RuntimeError("abort")

        assert not db.has_table("t")

    def test_ddl_error_is_schema_conflict(self, db: Database):
        with pytest.raises(SchemaConflictError):
            with db.transaction(ddl=True) as conn:
                conn.execute(text("DROP TABLE missing"))

    def test_query_on_missing_table_is_database_error(self, db: Database):
        """Outside schema changes a missing table is a plain database error."""
        with pytest.raises(DatabaseError) as exc_info:
            with db.transaction() as conn:
                conn.execute(text("SELECT * FROM products"))

        assert type(exc_info.value) is DatabaseError

    def test_column_names_missing_table(self, db: Database):
        with pytest.raises(DatabaseError, match="Table not found"):
            db.column_names("missing")


def _operational(message: str) -> OperationalError:
    return OperationalError("SELECT 1", {}, sqlite3.OperationalError(message))


class TestTranslateError:
    """Tests for driver error translation."""

    def test_readonly_database_is_permission_error(self):
        err = translate_error(_operational("attempt to write a readonly database"), "DDL")
        assert isinstance(err, SchemaPermissionError)
        assert isinstance(err, PermissionError)

    def test_postgres_permission_denied(self):
        exc = ProgrammingError(
            "CREATE TABLE", {}, Exception("permission denied for schema public")
        )
        assert isinstance(translate_error(exc, "DDL"), SchemaPermissionError)

    def test_table_exists_is_conflict(self):
        err = translate_error(
            _operational("table products already exists"), "DDL", ddl=True
        )
        assert isinstance(err, SchemaConflictError)

    def test_postgres_missing_table_is_conflict(self):
        exc = ProgrammingError("DROP TABLE", {}, Exception('table "products" does not exist'))
        assert isinstance(translate_error(exc, "DDL", ddl=True), SchemaConflictError)

    def test_missing_table_outside_ddl_is_database_error(self):
        err = translate_error(_operational("no such table: products"), "Query failed")
        assert type(err) is DatabaseError

    def test_connection_refused(self):
        err = translate_error(_operational("could not connect to server: Connection refused"), "x")
        assert isinstance(err, DatabaseConnectionError)

    def test_interface_error_is_connection_error(self):
        exc = InterfaceError("SELECT 1", {}, Exception("connection already closed"))
        assert isinstance(translate_error(exc, "x"), DatabaseConnectionError)

    def test_other_errors_are_database_errors(self):
        err = translate_error(_operational("syntax error"), "Query failed")
        assert type(err) is DatabaseError
        assert str(err).startswith("Query failed: ")
