"""
Shared record builders for the Booking Engine tests.

Every builder inserts with ignore_permissions and never commits, so a
frappe.db.rollback() in tearDown leaves the site clean.
"""

import frappe

# Lunes
TEST_DATE = "2025-11-17"


def make_provider(tenant, slots=None, user=None, active=1, provider_name="Test Provider"):
	"""
	Booking Provider con template semanal.

	slots: [("mon", "09:00", "12:00"), ...]; default lunes 09:00-12:00
	"""
	if slots is None:
		slots = [("mon", "09:00", "12:00")]

	return frappe.get_doc({
		"doctype": "Booking Provider",
		"tenant": tenant,
		"provider_name": provider_name,
		"user": user,
		"active": active,
		"availability_slots": [
			{"weekday": weekday, "start_time": start, "end_time": end}
			for weekday, start, end in slots
		]
	}).insert(ignore_permissions=True)


def make_service(tenant, duration_min=30, active=1, service_name="Test Service"):
	return frappe.get_doc({
		"doctype": "Booking Service",
		"tenant": tenant,
		"service_name": service_name,
		"duration_min": duration_min,
		"active": active
	}).insert(ignore_permissions=True)


def make_block(tenant, provider, start_at, end_at, reason=None):
	return frappe.get_doc({
		"doctype": "Provider Block",
		"tenant": tenant,
		"provider": provider,
		"start_at": start_at,
		"end_at": end_at,
		"reason": reason
	}).insert(ignore_permissions=True)


def make_appointment(tenant, provider, service, start_at, end_at, status="scheduled", client_name="Test Client"):
	return frappe.get_doc({
		"doctype": "Booking Appointment",
		"tenant": tenant,
		"provider": provider,
		"service": service,
		"start_at": start_at,
		"end_at": end_at,
		"status": status,
		"client_name": client_name,
		"created_by_user": "Administrator"
	}).insert(ignore_permissions=True)
