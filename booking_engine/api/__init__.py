"""
Booking Engine API

Structure:
    api/
    ├── __init__.py              # This file
    ├── appointments/            # Create, list, reschedule, status, cancel
    ├── blocks/                  # Provider blocks
    ├── providers/               # Day availability and slots
    ├── shared/                  # Validators + re-exports from security
    └── security.py              # Caller context, role gates, rate limiting

Usage:
    frappe.call("booking_engine.api.appointments.create_appointment", ...)
    frappe.call("booking_engine.api.providers.get_day_slots", ...)

Errors map to HTTP status codes through Frappe:
    ValidationError 417, PermissionError 403, DoesNotExistError 404,
    SchedulingConflictError 409.
"""

from . import appointments
from . import blocks
from . import providers
from . import shared

__all__ = [
    "appointments",
    "blocks",
    "providers",
    "shared",
]
