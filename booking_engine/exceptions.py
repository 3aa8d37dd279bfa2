"""
Booking Engine exceptions.

Validation, permission and not-found failures use Frappe's own classes
(frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError).
Only temporal overlap needs its own type so callers can tell it apart.
"""

import frappe


class SchedulingConflictError(frappe.ValidationError):
	"""El intervalo se solapa con un block o con una cita activa del proveedor."""

	http_status_code = 409
