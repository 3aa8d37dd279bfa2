"""
Blocks API Domain

Provider unavailability (vacations, breaks, meetings).
"""

from .endpoints import (
    create_block,
    update_block,
    remove_block,
    list_blocks,
)

__all__ = [
    "create_block",
    "update_block",
    "remove_block",
    "list_blocks",
]
