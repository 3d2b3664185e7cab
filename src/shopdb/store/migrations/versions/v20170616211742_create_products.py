"""Create the products table.

Columns:
- id: surrogate primary key
- cost: floating-point, nullable
- name: variable-length string, nullable
- created_at / updated_at: managed timestamps
"""

import sqlalchemy as sa

from shopdb.store.migrations.helpers import create_table, drop_table

VERSION = 20170616211742
DESCRIPTION = "Create products table"


def up(op):
    create_table(
        op,
        "products",
        sa.Column("cost", sa.Float(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
    )


def down(op):
    drop_table(op, "products")
