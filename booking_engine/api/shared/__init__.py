"""
Shared utilities for the Booking Engine API.

Identity, role gates, write throttling and free-text cleanup live in
api/security.py; document name checks in validators.py.
"""

from booking_engine.booking_engine.scheduling.roles import (
    ALL_ROLES,
    ROLE_OWNER,
    ROLE_ADMIN,
    ROLE_ATTENDANT,
    ROLE_PROVIDER,
)

from booking_engine.api.security import (
    # Identity
    get_caller_context,
    require_roles,
    # Throttling
    check_rate_limit,
    # Free text
    clean_text,
)

from .validators import validate_docname

__all__ = [
    "get_caller_context",
    "require_roles",
    "ALL_ROLES",
    "ROLE_OWNER",
    "ROLE_ADMIN",
    "ROLE_ATTENDANT",
    "ROLE_PROVIDER",
    "check_rate_limit",
    "clean_text",
    "validate_docname",
]
