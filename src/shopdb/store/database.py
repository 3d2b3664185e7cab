"""SQLAlchemy database connection manager for shopdb."""

import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger
from sqlalchemy import Connection, Engine, create_engine, event, inspect
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    SchemaConflictError,
    SchemaPermissionError,
    ShopDBError,
)

# Driver messages are matched case-insensitively against str(exc.orig)
_PERMISSION_PATTERNS = (
    r"permission denied",
    r"insufficient privilege",
    r"readonly database",
    r"read-only",
    r"command denied",
)
_CONFLICT_PATTERNS = (
    r"already exists",
    r"no such table",
    r"unknown table",
    r"(table|relation) .* does not exist",
)
_CONNECTION_PATTERNS = (
    r"could not connect",
    r"connection refused",
    r"unable to open database",
    r"authentication failed",
    r"access denied for user",
    r"server closed the connection",
    r"timed out",
    r"could not translate host name",
)


def _matches(message: str, patterns: tuple[str, ...]) -> bool:
    return any(re.search(pattern, message) for pattern in patterns)


def translate_error(
    exc: SQLAlchemyError, action: str, ddl: bool = False
) -> ShopDBError:
    """Map a SQLAlchemy/driver error onto the shopdb exception hierarchy.

    Args:
        exc: The error raised by SQLAlchemy.
        action: Short description prefixed to the message.
        ddl: The error came from a schema change. Only then are
            "already exists" and "no such table" schema conflicts.

    Returns:
        The matching ShopDBError instance (not raised).
    """
    orig = getattr(exc, "orig", None) or exc
    message = str(orig).lower()
    text = f"{action}: {orig}"

    if _matches(message, _PERMISSION_PATTERNS):
        return SchemaPermissionError(text)
    if ddl and _matches(message, _CONFLICT_PATTERNS):
        return SchemaConflictError(text)
    if isinstance(exc, InterfaceError) or _matches(message, _CONNECTION_PATTERNS):
        return DatabaseConnectionError(text)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DatabaseConnectionError(text)
    return DatabaseError(text)


def _enable_transactional_ddl(engine: Engine) -> None:
    """Make pysqlite run DDL inside the surrounding transaction.

    The sqlite3 module only opens transactions before DML, so a CREATE TABLE
    would otherwise autocommit ahead of the ledger write.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """SQLAlchemy engine manager."""

    def __init__(self, url: str | URL, echo: bool = False):
        """Initialize database with URL.

        Args:
            url: SQLAlchemy database URL (e.g. "sqlite:///path/to/shop.db").
            echo: Log every SQL statement emitted by the engine.
        """
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        """Connected engine.

        Raises:
            DatabaseError: If connect() has not been called.
        """
        if self._engine is None:
            raise DatabaseError("Database not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def connect(self) -> None:
        """Create the engine and verify the database is reachable.

        Raises:
            DatabaseError: If the URL is invalid.
            DatabaseConnectionError: If the database cannot be reached.
        """
        if self._engine is not None:
            return

        try:
            url = make_url(self.url)
            self._ensure_sqlite_directory(url)
            engine = create_engine(url, echo=self.echo)
        except ArgumentError as e:
            raise DatabaseError(f"Invalid database URL: {e}") from e
        except OSError as e:
            raise DatabaseConnectionError(f"Failed to prepare database directory: {e}") from e

        if engine.dialect.name == "sqlite":
            _enable_transactional_ddl(engine)

        try:
            with engine.connect():
                pass
        except SQLAlchemyError as e:
            engine.dispose()
            raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

        logger.debug(f"Connected to {url.render_as_string(hide_password=True)}")
        self._engine = engine

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is not None:
            try:
                self._engine.dispose()
            finally:
                self._engine = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def transaction(self, ddl: bool = False) -> Iterator[Connection]:
        """Context manager for database transactions.

        Args:
            ddl: The transaction changes the schema; missing or existing
                tables are reported as SchemaConflictError.

        Yields:
            A connection inside BEGIN; committed on success, rolled back on error.

        Raises:
            DatabaseError: If not connected or the transaction fails.
        """
        engine = self.engine
        try:
            with engine.begin() as connection:
                yield connection
        except SQLAlchemyError as e:
            raise translate_error(e, "Transaction failed", ddl=ddl) from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager for an ORM session committed on success."""
        with Session(self.engine) as session:
            try:
                yield session
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise translate_error(e, "Session failed") from e
            except Exception:
                session.rollback()
                raise

    def table_names(self) -> list[str]:
        """Names of all tables in the default schema."""
        try:
            return inspect(self.engine).get_table_names()
        except SQLAlchemyError as e:
            raise translate_error(e, "Failed to list tables") from e

    def has_table(self, table: str) -> bool:
        try:
            return inspect(self.engine).has_table(table)
        except SQLAlchemyError as e:
            raise translate_error(e, f"Failed to inspect table {table}") from e

    def column_names(self, table: str) -> list[str]:
        """Column names of a table in declaration order.

        Raises:
            DatabaseError: If the table does not exist.
        """
        if not self.has_table(table):
            raise DatabaseError(f"Table not found: {table}")
        try:
            return [column["name"] for column in inspect(self.engine).get_columns(table)]
        except SQLAlchemyError as e:
            raise translate_error(e, f"Failed to inspect table {table}") from e

    @staticmethod
    def _ensure_sqlite_directory(url: URL) -> None:
        if url.get_backend_name() != "sqlite":
            return
        database = url.database
        if not database or database == ":memory:" or database.startswith("file:"):
            return
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
