"""
Caller roles of the booking app.

Each role maps to one Frappe Role; the tuple order is the precedence used
when a user holds more than one.
"""

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_ATTENDANT = "attendant"
ROLE_PROVIDER = "provider"

BOOKING_ROLES = (
	(ROLE_OWNER, "Booking Owner"),
	(ROLE_ADMIN, "Booking Admin"),
	(ROLE_ATTENDANT, "Booking Attendant"),
	(ROLE_PROVIDER, "Booking Provider"),
)

ALL_ROLES = frozenset(role for role, _frappe_role in BOOKING_ROLES)
