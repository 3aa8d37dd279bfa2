"""
Overlap Detection Service

Loads the blocks and appointments of one provider that touch a candidate
interval and runs the pure conflict detector over them. Also owns the
provider row lock that serializes writers for the same calendar.
"""

import frappe
from datetime import datetime
from typing import Any, Collection, Dict, List, Optional

from .conflicts import NON_CANCELLED_STATUSES, find_conflicts


def lock_provider(tenant: str, provider: str, fields: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
	"""
	Bloquea la fila del Booking Provider (SELECT ... FOR UPDATE).

	Todo camino que escribe blocks o citas de un proveedor toma este lock
	antes de leer, así el chequeo de conflictos y el insert/update quedan
	en la misma sección crítica hasta el commit de la transacción.

	Args:
		tenant: tenant del llamador
		provider: name del Booking Provider
		fields: campos a devolver (default: name, user, active)

	Returns:
		dict con los campos pedidos, o None si el proveedor no existe en el tenant
	"""
	if not provider:
		return None

	return frappe.db.get_value(
		"Booking Provider",
		{"name": provider, "tenant": tenant},
		fields or ["name", "user", "active"],
		as_dict=True,
		for_update=True
	)


def get_block_snapshot(
	tenant: str,
	provider: str,
	start_datetime: datetime,
	end_datetime: datetime
) -> List[Dict[str, Any]]:
	"""
	Blocks del proveedor que se solapan con [start_datetime, end_datetime).

	Returns:
		list[dict]: [{"name", "start", "end"}, ...] ordenados por inicio
	"""
	blocks = frappe.get_all(
		"Provider Block",
		filters={
			"tenant": tenant,
			"provider": provider,
			"start_at": ["<", end_datetime],
			"end_at": [">", start_datetime]
		},
		fields=["name", "start_at", "end_at"],
		order_by="start_at asc"
	)

	return [{"name": b.name, "start": b.start_at, "end": b.end_at} for b in blocks]


def get_appointment_snapshot(
	tenant: str,
	provider: str,
	start_datetime: datetime,
	end_datetime: datetime,
	statuses: Collection[str] = NON_CANCELLED_STATUSES
) -> List[Dict[str, Any]]:
	"""
	Citas del proveedor con status en `statuses` que se solapan con el rango.

	Returns:
		list[dict]: [{"name", "start", "end", "status"}, ...] ordenados por inicio
	"""
	appointments = frappe.get_all(
		"Booking Appointment",
		filters={
			"tenant": tenant,
			"provider": provider,
			"status": ["in", list(statuses)],
			"start_at": ["<", end_datetime],
			"end_at": [">", start_datetime]
		},
		fields=["name", "status", "start_at", "end_at"],
		order_by="start_at asc"
	)

	return [
		{"name": a.name, "start": a.start_at, "end": a.end_at, "status": a.status}
		for a in appointments
	]


def check_conflicts(
	tenant: str,
	provider: str,
	start_datetime: datetime,
	end_datetime: datetime,
	check_blocks: bool = True,
	appointment_statuses: Optional[Collection[str]] = NON_CANCELLED_STATUSES,
	exclude_block: Optional[str] = None,
	exclude_appointment: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Detecta conflictos de un intervalo candidato con la agenda del proveedor.

	Args:
		tenant: tenant del llamador
		provider: name del Booking Provider
		start_datetime: inicio del candidato (UTC naive)
		end_datetime: fin del candidato (exclusivo)
		check_blocks: si se valida contra Provider Blocks
		appointment_statuses: status de citas que ocupan agenda; None = no validar citas
		exclude_block: block a excluir (edición de un block)
		exclude_appointment: cita a excluir (reprogramación)

	Returns:
		dict: {
			"has_conflict": bool,
			"conflicting_blocks": [names],
			"conflicting_appointments": [names]
		}
	"""
	conflicting_blocks = []
	conflicting_appointments = []

	if check_blocks:
		conflicting_blocks = find_conflicts(
			start_datetime,
			end_datetime,
			get_block_snapshot(tenant, provider, start_datetime, end_datetime),
			exclude=exclude_block
		)

	if appointment_statuses is not None:
		conflicting_appointments = find_conflicts(
			start_datetime,
			end_datetime,
			get_appointment_snapshot(tenant, provider, start_datetime, end_datetime, appointment_statuses),
			exclude=exclude_appointment,
			statuses=appointment_statuses
		)

	return {
		"has_conflict": bool(conflicting_blocks or conflicting_appointments),
		"conflicting_blocks": conflicting_blocks,
		"conflicting_appointments": conflicting_appointments
	}
