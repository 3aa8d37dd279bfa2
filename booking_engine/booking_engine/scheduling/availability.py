"""
Availability Service

Calculates the free time of a Booking Provider for one UTC day, considering:
- the weekly template (Provider Availability Slots for the weekday)
- Provider Blocks touching the day
- non-cancelled Booking Appointments touching the day
"""

import frappe
from frappe import _
from datetime import date, datetime
from typing import Any, Dict, List, Union

from .conflicts import NON_CANCELLED_STATUSES
from .engine import compute_free_intervals
from .intervals import Interval
from .overlap import get_appointment_snapshot, get_block_snapshot
from .timeutils import day_bounds, instant_range_to_minutes, minutes_to_hhmm, weekday_key
from .validation import parse_date_or_throw


def get_tenant_provider(tenant: str, provider: str) -> Any:
	"""
	Carga un Booking Provider del tenant.

	Raises:
		frappe.DoesNotExistError: si no existe o pertenece a otro tenant
	"""
	name = frappe.db.get_value("Booking Provider", {"name": provider, "tenant": tenant}, "name") if provider else None
	if not name:
		frappe.throw(_("Provider no encontrado"), frappe.DoesNotExistError)

	return frappe.get_doc("Booking Provider", name)


def get_occupied_ranges(tenant: str, provider: str, day_start: datetime, day_end: datetime) -> List[Interval]:
	"""
	Rangos ocupados del día en minutos: blocks y citas no canceladas.

	Los rangos que cruzan medianoche se recortan al borde del día.
	"""
	occupied = get_block_snapshot(tenant, provider, day_start, day_end)
	occupied += get_appointment_snapshot(tenant, provider, day_start, day_end, NON_CANCELLED_STATUSES)

	ranges = [instant_range_to_minutes(o["start"], o["end"], day_start) for o in occupied]
	return [r for r in ranges if r["end"] > r["start"]]


def get_free_intervals(tenant: str, provider_doc: Any, target_date: date) -> List[Interval]:
	"""
	Intervalos libres (minutos del día) de un proveedor ya cargado.

	Args:
		tenant: tenant del llamador
		provider_doc: Booking Provider
		target_date: día UTC

	Returns:
		list: intervalos ordenados y disjuntos; vacío si el weekday no tiene template
	"""
	if not provider_doc.active:
		frappe.throw(_("Provider inactivo"), frappe.ValidationError)

	template_ranges = provider_doc.get_weekly_template().get(weekday_key(target_date)) or []

	# Sin template para este día: sin disponibilidad, no es error
	if not template_ranges:
		return []

	day_start, day_end = day_bounds(target_date)
	occupied = get_occupied_ranges(tenant, provider_doc.name, day_start, day_end)

	return compute_free_intervals(template_ranges, occupied)


def get_day_availability(tenant: str, provider: str, target_date: Union[date, str]) -> List[Dict[str, str]]:
	"""
	Disponibilidad de un proveedor para un día UTC.

	Args:
		tenant: tenant del llamador
		provider: name del Booking Provider
		target_date: fecha (date o YYYY-MM-DD)

	Returns:
		list[dict]: [{"start": "09:00", "end": "10:00"}, ...]

	Raises:
		frappe.DoesNotExistError: proveedor fuera del tenant
		frappe.ValidationError: fecha inválida o proveedor inactivo
	"""
	target_date = parse_date_or_throw(target_date)
	provider_doc = get_tenant_provider(tenant, provider)

	return [
		{"start": minutes_to_hhmm(interval["start"]), "end": minutes_to_hhmm(interval["end"])}
		for interval in get_free_intervals(tenant, provider_doc, target_date)
	]
