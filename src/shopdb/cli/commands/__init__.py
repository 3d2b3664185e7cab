"""Command implementations for shopdb CLI."""

from .migrate import (
    add_rollback_arguments,
    handle_down,
    handle_migrate,
    handle_rollback,
    handle_up,
)
from .status import handle_check, handle_status

__all__ = [
    "handle_migrate",
    "handle_up",
    "handle_down",
    "handle_rollback",
    "add_rollback_arguments",
    "handle_status",
    "handle_check",
]
