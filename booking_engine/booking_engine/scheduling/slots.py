"""
Slot Generation Service

Generates bookable slots for one provider, service and UTC day:
- free time from the Availability Engine
- service duration_min as slot length
- a fixed advance step between slot starts (15 minutes by default)
"""

import frappe
from frappe import _
from datetime import date
from typing import Dict, List, Optional, Union

from .availability import get_free_intervals, get_tenant_provider
from .engine import generate_slots
from .settings import get_slot_step_minutes
from .timeutils import day_bounds, format_utc, minutes_to_datetime
from .validation import parse_date_or_throw


def get_tenant_service(tenant: str, service: str):
	"""
	Carga un Booking Service del tenant.

	Raises:
		frappe.DoesNotExistError: si no existe o pertenece a otro tenant
	"""
	name = frappe.db.get_value("Booking Service", {"name": service, "tenant": tenant}, "name") if service else None
	if not name:
		frappe.throw(_("Service no encontrado"), frappe.DoesNotExistError)

	return frappe.get_doc("Booking Service", name)


def get_day_slots(
	tenant: str,
	provider: str,
	service: str,
	target_date: Union[date, str],
	step: Optional[int] = None
) -> List[Dict[str, str]]:
	"""
	Genera slots reservables para un día.

	Args:
		tenant: tenant del llamador
		provider: name del Booking Provider
		service: name del Booking Service (define la duración)
		target_date: fecha (date o YYYY-MM-DD)
		step: paso entre inicios; default desde site_config

	Returns:
		list[dict]: [
			{"start_at": "2025-11-17T09:00:00Z", "end_at": "2025-11-17T09:30:00Z"},
			...
		]

	Algoritmo:
		1. Cargar provider y service del tenant (ambos activos)
		2. Obtener intervalos libres del día
		3. Generar slots de duration_min cada `step` minutos
		4. Convertir minutos a instantes UTC
	"""
	target_date = parse_date_or_throw(target_date)

	provider_doc = get_tenant_provider(tenant, provider)
	service_doc = get_tenant_service(tenant, service)

	if not service_doc.active:
		frappe.throw(_("Service inactivo"), frappe.ValidationError)

	free = get_free_intervals(tenant, provider_doc, target_date)
	if not free:
		return []

	day_start, _day_end = day_bounds(target_date)

	return [
		{
			"start_at": format_utc(minutes_to_datetime(day_start, slot["start"])),
			"end_at": format_utc(minutes_to_datetime(day_start, slot["end"]))
		}
		for slot in generate_slots(free, service_doc.duration_min, step or get_slot_step_minutes())
	]
