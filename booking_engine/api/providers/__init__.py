"""
Providers API Domain

Day availability and bookable slots of a provider.
"""

from .endpoints import (
    get_day_availability,
    get_day_slots,
)

__all__ = [
    "get_day_availability",
    "get_day_slots",
]
