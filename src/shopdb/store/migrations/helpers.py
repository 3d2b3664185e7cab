"""Table-level building blocks shared by migration modules.

Migrations receive an Alembic ``Operations`` object bound to the runner's
connection. These helpers add the conventions every table follows: an
implicit surrogate ``id`` key, managed ``created_at``/``updated_at``
columns, and an explicit existence check so that creating or dropping a
table in the wrong state raises SchemaConflictError instead of a
driver-specific error.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from ...core.exceptions import SchemaConflictError


def id_column() -> sa.Column:
    """Surrogate integer primary key, assigned by the database."""
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False)


def timestamp_columns() -> list[sa.Column]:
    """Managed creation and last-update timestamps."""
    return [
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def table_exists(op: Operations, name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def create_table(
    op: Operations, name: str, *columns: sa.Column, timestamps: bool = True
) -> sa.Table:
    """Create a table with an ``id`` key and, by default, timestamps.

    Args:
        op: Operations bound to the migration connection.
        name: Table name.
        *columns: Business columns, in order.
        timestamps: Append ``created_at`` and ``updated_at``.

    Raises:
        SchemaConflictError: If the table already exists.
    """
    if table_exists(op, name):
        raise SchemaConflictError(f"Table {name!r} already exists", table=name)

    all_columns = [id_column(), *columns]
    if timestamps:
        all_columns.extend(timestamp_columns())
    return op.create_table(name, *all_columns)


def drop_table(op: Operations, name: str) -> None:
    """Drop a table and all of its rows.

    Raises:
        SchemaConflictError: If the table does not exist.
    """
    if not table_exists(op, name):
        raise SchemaConflictError(f"Table {name!r} does not exist", table=name)
    op.drop_table(name)
