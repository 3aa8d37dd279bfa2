"""
Appointment API Endpoints

Whitelisted functions for the booking frontend. Every endpoint:
- resolves the caller context (tenant, user, role)
- applies the role gate
- checks document names and cleans free text
- delegates to booking_engine.booking_engine.scheduling.booking

Rate limited writes: booking_rate_limit_writes per minute per user and address.
"""

import frappe
from frappe import _
from typing import Dict, List, Any, Optional

from booking_engine.booking_engine.scheduling import booking
from booking_engine.booking_engine.scheduling.validation import parse_date_or_throw

from booking_engine.api.shared import (
	ALL_ROLES,
	check_rate_limit,
	clean_text,
	get_caller_context,
	require_roles,
	validate_docname
)


@frappe.whitelist(methods=['POST'])
def create_appointment(
	provider: str,
	service: str,
	start_at: str,
	end_at: str,
	client_name: str,
	client_phone: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Crea una cita para un cliente.

	Args:
		provider: name del Booking Provider
		service: name del Booking Service
		start_at: inicio ISO 8601 (ej: 2025-11-17T09:00:00Z)
		end_at: fin ISO 8601; end_at - start_at debe ser igual a duration_min del servicio
		client_name: nombre del cliente
		client_phone: teléfono del cliente (opcional)

	Returns:
		dict: la Booking Appointment creada (status "scheduled")

	Example:
		```javascript
		frappe.call({
			method: "booking_engine.api.appointments.create_appointment",
			args: {
				provider: "PRV-00001",
				service: "SRV-00001",
				start_at: "2025-11-17T09:00:00Z",
				end_at: "2025-11-17T09:30:00Z",
				client_name: "Ana"
			}
		});
		```
	"""
	check_rate_limit("create_appointment")

	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	data = {
		"provider": validate_docname(provider, "provider"),
		"service": validate_docname(service, "service"),
		"start_at": start_at,
		"end_at": end_at,
		"client_name": clean_text(client_name, max_length=140),
		"client_phone": clean_text(client_phone, max_length=40)
	}

	if not data["client_name"]:
		frappe.throw(_("client_name es requerido"), frappe.ValidationError)

	try:
		appointment = booking.create_appointment(context["tenant"], context["user"], data)
		frappe.db.commit()

		return appointment.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in create_appointment: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['GET'])
def list_appointments(date: str, provider: Optional[str] = None) -> List[Dict[str, Any]]:
	"""
	Lista las citas del tenant para un día UTC (todos los status).

	Args:
		date: YYYY-MM-DD
		provider: filtra por Booking Provider (opcional)

	Returns:
		list[dict]: citas ordenadas por start_at
	"""
	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	target_date = parse_date_or_throw(date)
	if provider:
		provider = validate_docname(provider, "provider")

	try:
		return booking.list_appointments_for_day(context["tenant"], target_date, provider)

	except (frappe.ValidationError, frappe.PermissionError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in list_appointments: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['POST', 'PUT'])
def reschedule_appointment(
	appointment: str,
	start_at: Optional[str] = None,
	end_at: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Reprograma una cita. Si solo se envía start_at, se conserva la duración actual.

	Returns:
		dict: la Booking Appointment con el nuevo horario
	"""
	check_rate_limit("reschedule_appointment")

	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	appointment = validate_docname(appointment, "appointment")
	data = {
		"start_at": start_at or None,
		"end_at": end_at or None
	}

	try:
		doc = booking.reschedule_appointment(context["tenant"], appointment, data)
		frappe.db.commit()

		return doc.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in reschedule_appointment: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['POST', 'PUT'])
def update_appointment_status(appointment: str, status: str) -> Dict[str, Any]:
	"""
	Cambia el status de una cita (scheduled, in_service, done, no_show, cancelled).
	"""
	check_rate_limit("update_appointment_status")

	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	appointment = validate_docname(appointment, "appointment")
	status = (status or "").strip()

	try:
		doc = booking.update_appointment_status(context["tenant"], appointment, status)
		frappe.db.commit()

		return doc.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in update_appointment_status: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['POST'])
def cancel_appointment(appointment: str) -> Dict[str, Any]:
	"""
	Cancela una cita. Llamar dos veces no es error.
	"""
	check_rate_limit("cancel_appointment")

	context = get_caller_context()
	require_roles(context, ALL_ROLES)

	appointment = validate_docname(appointment, "appointment")

	try:
		doc = booking.cancel_appointment(context["tenant"], appointment)
		frappe.db.commit()

		return doc.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in cancel_appointment: {str(e)}", "API Error")
		raise
