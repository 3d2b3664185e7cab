"""Expected schema definition and validation.

EXPECTED_SCHEMA is the single source of truth for which columns each
migrated table must have. validate_schema() compares it with the live
database so drift shows up before the application touches the table.
"""

from loguru import logger

from ..core.exceptions import SchemaError
from .database import Database

TABLE_MISSING = "TABLE_MISSING"

# Format: {table_name: [column_names]}
EXPECTED_SCHEMA: dict[str, list[str]] = {
    "products": ["id", "cost", "name", "created_at", "updated_at"],
}


def validate_schema(
    database: Database,
    expected: dict[str, list[str]] | None = None,
    raise_on_error: bool = True,
) -> dict[str, list[str]]:
    """Check that every expected table has exactly the expected columns.

    Args:
        database: Connected database to inspect.
        expected: Schema to compare against, defaults to EXPECTED_SCHEMA.
        raise_on_error: Raise SchemaError instead of returning issues.

    Returns:
        Dict of {table: [issues]} (empty if valid). Missing columns are
        listed by name, unexpected ones prefixed with "+".

    Raises:
        SchemaError: If raise_on_error is True and the schema is invalid.
    """
    expected = EXPECTED_SCHEMA if expected is None else expected
    issues: dict[str, list[str]] = {}

    for table, expected_columns in expected.items():
        if not database.has_table(table):
            issues[table] = [TABLE_MISSING]
            logger.warning(f"Table '{table}' is missing")
            continue

        actual = database.column_names(table)
        problems = [col for col in expected_columns if col not in actual]
        problems.extend(f"+{col}" for col in actual if col not in expected_columns)

        if problems:
            issues[table] = problems
            logger.warning(f"Table '{table}' has schema drift: {problems}")

    if issues and raise_on_error:
        raise SchemaError(issues)

    if not issues:
        logger.debug("Schema validation passed")
    return issues
