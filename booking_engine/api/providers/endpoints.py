"""
Provider Calendar API Endpoints

Read-only views of a provider's calendar for one UTC day:
- free intervals (HH:MM)
- bookable slots for a service
"""

import frappe
from typing import Dict, Any

from booking_engine.booking_engine.scheduling.availability import get_day_availability as compute_day_availability
from booking_engine.booking_engine.scheduling.settings import get_slot_step_minutes
from booking_engine.booking_engine.scheduling.slots import get_day_slots as compute_day_slots, get_tenant_service
from booking_engine.booking_engine.scheduling.timeutils import weekday_key
from booking_engine.booking_engine.scheduling.validation import parse_date_or_throw

from booking_engine.api.shared import (
	ALL_ROLES,
	get_caller_context,
	require_roles,
	validate_docname
)


@frappe.whitelist(methods=['GET'])
def get_day_availability(provider: str, date: str) -> Dict[str, Any]:
	"""
	Intervalos libres de un proveedor en un día UTC.

	Returns:
		dict: {
			"provider": "PRV-00001",
			"date": "2025-11-17",
			"weekday": "mon",
			"intervals": [{"start": "09:00", "end": "10:00"}, ...]
		}
	"""
	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	provider = validate_docname(provider, "provider")
	target_date = parse_date_or_throw(date)

	try:
		intervals = compute_day_availability(context["tenant"], provider, target_date)

		return {
			"provider": provider,
			"date": target_date.isoformat(),
			"weekday": weekday_key(target_date),
			"intervals": intervals
		}

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_day_availability: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['GET'])
def get_day_slots(provider: str, service: str, date: str) -> Dict[str, Any]:
	"""
	Slots reservables de un servicio con un proveedor en un día UTC.

	Returns:
		dict: {
			"provider": "PRV-00001",
			"service": "SRV-00001",
			"date": "2025-11-17",
			"weekday": "mon",
			"duration_min": 30,
			"step_min": 15,
			"slots": [{"start_at": "2025-11-17T09:00:00Z", "end_at": "2025-11-17T09:30:00Z"}, ...]
		}
	"""
	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	provider = validate_docname(provider, "provider")
	service = validate_docname(service, "service")
	target_date = parse_date_or_throw(date)

	try:
		step = get_slot_step_minutes()
		slots = compute_day_slots(context["tenant"], provider, service, target_date, step=step)

		return {
			"provider": provider,
			"service": service,
			"date": target_date.isoformat(),
			"weekday": weekday_key(target_date),
			"duration_min": get_tenant_service(context["tenant"], service).duration_min,
			"step_min": step,
			"slots": slots
		}

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_day_slots: {str(e)}", "API Error")
		raise
