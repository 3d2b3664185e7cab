"""Migration version modules.

Each module in this package represents a database migration.
Modules must define:
    VERSION: int - Timestamp-style version number (unique, sortable)
    DESCRIPTION: str - Human-readable description (optional)
    up(op): Apply the migration
    down(op): Revert the migration; never inferred from up()

``op`` is an ``alembic.operations.Operations`` bound to the runner's
connection.

Example migration (v20170701000000_add_sku.py):
    import sqlalchemy as sa

    VERSION = 20170701000000
    DESCRIPTION = "Add sku to products"

    def up(op):
        op.add_column("products", sa.Column("sku", sa.String()))

    def down(op):
        op.drop_column("products", "sku")
"""
