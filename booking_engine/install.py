"""
Install hooks for Booking Engine.
"""

import frappe

from booking_engine.booking_engine.scheduling.roles import BOOKING_ROLES


def after_install() -> None:
	"""Crea los roles de Booking si no existen. Idempotente."""
	for _role, role_name in BOOKING_ROLES:
		if frappe.db.exists("Role", role_name):
			continue

		frappe.get_doc({
			"doctype": "Role",
			"role_name": role_name,
			"desk_access": 1
		}).insert(ignore_permissions=True)

		frappe.logger("booking_engine").info(f"Role {role_name} created")

	frappe.db.commit()
