"""
Booking Service

Lifecycle of Booking Appointments:
- create (exact service duration, no overlap)
- list the appointments of one UTC day
- reschedule (times only, atomic)
- status updates and idempotent cancellation

Every writer takes the provider row lock before reading the calendar, so
two concurrent bookings of the same provider are serialized by the database.
"""

import frappe
from frappe import _
from frappe.utils import get_datetime
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Union

from .conflicts import APPOINTMENT_STATUSES, STATUS_CANCELLED, STATUS_SCHEDULED
from .overlap import lock_provider
from .timeutils import day_bounds, format_utc
from .validation import parse_date_or_throw, parse_timestamp_or_throw

APPOINTMENT_LIST_FIELDS = [
	"name",
	"tenant",
	"provider",
	"service",
	"start_at",
	"end_at",
	"status",
	"client_name",
	"client_phone",
	"created_by_user"
]


def get_tenant_appointment(tenant: str, appointment: str) -> Any:
	"""
	Carga una Booking Appointment del tenant.

	Raises:
		frappe.DoesNotExistError: si no existe o pertenece a otro tenant
	"""
	name = frappe.db.get_value("Booking Appointment", {"name": appointment, "tenant": tenant}, "name") if appointment else None
	if not name:
		frappe.throw(_("Cita no encontrada"), frappe.DoesNotExistError)

	return frappe.get_doc("Booking Appointment", name)


def create_appointment(tenant: str, user: str, data: Dict[str, Any]) -> Any:
	"""
	Crea una cita en status scheduled.

	Args:
		tenant: tenant del llamador
		user: usuario que crea la cita (queda en created_by_user)
		data: {provider, service, start_at, end_at, client_name, client_phone}

	Returns:
		Booking Appointment insertada

	Algoritmo:
		1. Parsear timestamps y validar end_at > start_at
		2. Lock del provider; provider y service deben ser del tenant (PermissionError)
		3. Insertar: validate() exige la duración exacta del servicio y
		   rechaza solapes con SchedulingConflictError
	"""
	start_at = parse_timestamp_or_throw(data.get("start_at"), "start_at")
	end_at = parse_timestamp_or_throw(data.get("end_at"), "end_at")

	if end_at <= start_at:
		frappe.throw(_("end_at debe ser mayor que start_at"), frappe.ValidationError)

	provider = data.get("provider")
	service = data.get("service")

	if not lock_provider(tenant, provider):
		frappe.throw(_("Provider no pertenece al tenant"), frappe.PermissionError)

	if not service or not frappe.db.exists("Booking Service", {"name": service, "tenant": tenant}):
		frappe.throw(_("Service no pertenece al tenant"), frappe.PermissionError)

	appointment = frappe.get_doc({
		"doctype": "Booking Appointment",
		"tenant": tenant,
		"provider": provider,
		"service": service,
		"start_at": start_at,
		"end_at": end_at,
		"client_name": data.get("client_name"),
		"client_phone": data.get("client_phone"),
		"status": STATUS_SCHEDULED,
		"created_by_user": user
	})
	appointment.insert(ignore_permissions=True)

	frappe.logger("booking_engine").info(
		f"Appointment {appointment.name} created for provider {provider} at {start_at} by {user}"
	)

	return appointment


def list_appointments_for_day(
	tenant: str,
	target_date: Union[date, str],
	provider: Optional[str] = None
) -> List[Dict[str, Any]]:
	"""
	Citas del tenant contenidas en un día UTC, todos los status.

	Incluye las que empiezan desde las 00:00 y terminan a más tardar
	a las 23:59:59 de ese día, ordenadas por start_at.
	"""
	target_date = parse_date_or_throw(target_date)
	day_start, _day_end = day_bounds(target_date)

	filters = [
		["tenant", "=", tenant],
		["start_at", ">=", day_start],
		["end_at", "<=", day_start + timedelta(hours=23, minutes=59, seconds=59)]
	]
	if provider:
		filters.append(["provider", "=", provider])

	return frappe.get_all(
		"Booking Appointment",
		filters=filters,
		fields=APPOINTMENT_LIST_FIELDS,
		order_by="start_at asc"
	)


def reschedule_appointment(tenant: str, appointment: str, data: Dict[str, Any]) -> Any:
	"""
	Mueve una cita a otro horario de forma atómica.

	Args:
		tenant: tenant del llamador
		appointment: name de la Booking Appointment
		data: {start_at?, end_at?}; al menos uno requerido

	Returns:
		Booking Appointment actualizada

	Algoritmo:
		1. Savepoint antes de la primera lectura
		2. Cargar la cita del tenant y tomar el lock del provider
		3. Nuevo inicio = dado o actual; nuevo fin = dado, o inicio + duración actual
		4. Guardar: validate() revisa conflictos excluyendo la propia cita
		5. Ante cualquier error, rollback al savepoint y relanzar
	"""
	new_start_raw = data.get("start_at")
	new_end_raw = data.get("end_at")

	if not new_start_raw and not new_end_raw:
		frappe.throw(_("Debe indicar start_at y/o end_at"), frappe.ValidationError)

	savepoint = "booking_reschedule"
	frappe.db.savepoint(savepoint)

	try:
		doc = get_tenant_appointment(tenant, appointment)
		lock_provider(tenant, doc.provider)

		current_start = get_datetime(doc.start_at)
		current_end = get_datetime(doc.end_at)

		new_start = parse_timestamp_or_throw(new_start_raw, "start_at") if new_start_raw else current_start

		if new_end_raw:
			new_end = parse_timestamp_or_throw(new_end_raw, "end_at")
		else:
			new_end = new_start + (current_end - current_start)

		if new_end <= new_start:
			frappe.throw(_("end_at debe ser mayor que start_at"), frappe.ValidationError)

		doc.start_at = new_start
		doc.end_at = new_end
		doc.save(ignore_permissions=True)

	except Exception:
		frappe.db.rollback(save_point=savepoint)
		raise

	frappe.logger("booking_engine").info(
		f"Appointment {doc.name} rescheduled to {format_utc(new_start)} - {format_utc(new_end)}"
	)

	return doc


def update_appointment_status(tenant: str, appointment: str, status: str) -> Any:
	"""
	Cambia el status de una cita. Cualquier transición entre los cinco status es válida.

	Raises:
		frappe.ValidationError: status fuera del conjunto
		frappe.DoesNotExistError: cita fuera del tenant
	"""
	if status not in APPOINTMENT_STATUSES:
		frappe.throw(
			_(f"Status inválido: {status}. Valores permitidos: {', '.join(APPOINTMENT_STATUSES)}"),
			frappe.ValidationError
		)

	doc = get_tenant_appointment(tenant, appointment)

	if doc.status != status:
		previous = doc.status
		doc.status = status
		doc.save(ignore_permissions=True)

		frappe.logger("booking_engine").info(f"Appointment {doc.name} status {previous} -> {status}")

	return doc


def cancel_appointment(tenant: str, appointment: str) -> Any:
	"""
	Cancela una cita. Idempotente: si ya está cancelada se devuelve sin escribir.
	"""
	doc = get_tenant_appointment(tenant, appointment)

	if doc.status == STATUS_CANCELLED:
		return doc

	doc.status = STATUS_CANCELLED
	doc.save(ignore_permissions=True)

	frappe.logger("booking_engine").info(f"Appointment {doc.name} cancelled")

	return doc