"""
Block Management Service

Create, move, remove and list Provider Blocks. Writers take the provider
row lock first; overlap rules live in ProviderBlock.validate().
"""

import frappe
from frappe import _
from frappe.utils import get_datetime
from datetime import date
from typing import Any, Dict, List, Union

from .overlap import lock_provider
from .roles import ROLE_PROVIDER
from .timeutils import day_bounds, format_utc
from .validation import parse_date_or_throw, parse_timestamp_or_throw


BLOCK_LIST_FIELDS = ["name", "tenant", "provider", "start_at", "end_at", "reason"]


def get_tenant_block(tenant: str, block: str) -> Any:
	"""
	Carga un Provider Block del tenant.

	Raises:
		frappe.DoesNotExistError: si no existe o pertenece a otro tenant
	"""
	name = frappe.db.get_value("Provider Block", {"name": block, "tenant": tenant}, "name") if block else None
	if not name:
		frappe.throw(_("Block no encontrado"), frappe.DoesNotExistError)

	return frappe.get_doc("Provider Block", name)


def create_block(tenant: str, actor: Dict[str, Any], data: Dict[str, Any]) -> Any:
	"""
	Crea un block en la agenda de un proveedor.

	Args:
		tenant: tenant del llamador
		actor: {"user": str, "role": str}
		data: {provider, start_at, end_at, reason?}

	Returns:
		Provider Block insertado

	Algoritmo:
		1. Lock del provider; debe ser del tenant (PermissionError)
		2. Un actor con rol provider solo bloquea su propia agenda (PermissionError)
		3. Parsear timestamps y validar start_at < end_at
		4. Insertar: validate() rechaza solapes con otros blocks
	"""
	provider_row = lock_provider(tenant, data.get("provider"))
	if not provider_row:
		frappe.throw(_("Provider no pertenece al tenant"), frappe.PermissionError)

	if actor.get("role") == ROLE_PROVIDER and provider_row.user != actor.get("user"):
		frappe.throw(_("Sin permiso para bloquear la agenda de otro provider"), frappe.PermissionError)

	start_at = parse_timestamp_or_throw(data.get("start_at"), "start_at")
	end_at = parse_timestamp_or_throw(data.get("end_at"), "end_at")

	if start_at >= end_at:
		frappe.throw(_("start_at debe ser menor que end_at"), frappe.ValidationError)

	block = frappe.get_doc({
		"doctype": "Provider Block",
		"tenant": tenant,
		"provider": provider_row.name,
		"start_at": start_at,
		"end_at": end_at,
		"reason": data.get("reason")
	})
	block.insert(ignore_permissions=True)

	frappe.logger("booking_engine").info(
		f"Block {block.name} created for provider {provider_row.name} ({format_utc(start_at)} - {format_utc(end_at)}) by {actor.get('user')}"
	)

	return block


def update_block(tenant: str, block: str, data: Dict[str, Any]) -> Any:
	"""
	Mueve o edita un block. Los campos omitidos conservan su valor actual.

	Se valida contra otros blocks y contra citas scheduled/in_service;
	ante cualquier error se vuelve al savepoint tomado antes de leer.
	"""
	savepoint = "booking_block_update"
	frappe.db.savepoint(savepoint)

	try:
		doc = get_tenant_block(tenant, block)
		lock_provider(tenant, doc.provider)

		start_at = parse_timestamp_or_throw(data["start_at"], "start_at") if data.get("start_at") else get_datetime(doc.start_at)
		end_at = parse_timestamp_or_throw(data["end_at"], "end_at") if data.get("end_at") else get_datetime(doc.end_at)

		if start_at >= end_at:
			frappe.throw(_("start_at debe ser menor que end_at"), frappe.ValidationError)

		doc.start_at = start_at
		doc.end_at = end_at
		if data.get("reason") is not None:
			doc.reason = data.get("reason")

		doc.save(ignore_permissions=True)

	except Exception:
		frappe.db.rollback(save_point=savepoint)
		raise

	frappe.logger("booking_engine").info(f"Block {doc.name} updated ({format_utc(start_at)} - {format_utc(end_at)})")

	return doc


def remove_block(tenant: str, block: str) -> Dict[str, bool]:
	"""Borra un block del tenant. Returns: {"deleted": True}"""
	doc = get_tenant_block(tenant, block)
	frappe.delete_doc("Provider Block", doc.name, ignore_permissions=True)

	frappe.logger("booking_engine").info(f"Block {doc.name} removed from provider {doc.provider}")

	return {"deleted": True}


def list_blocks_for_day(tenant: str, provider: str, target_date: Union[date, str]) -> List[Dict[str, Any]]:
	"""Blocks del proveedor que tocan el día UTC, ordenados por start_at."""
	target_date = parse_date_or_throw(target_date)
	day_start, day_end = day_bounds(target_date)

	return frappe.get_all(
		"Provider Block",
		filters={
			"tenant": tenant,
			"provider": provider,
			"start_at": ["<", day_end],
			"end_at": [">", day_start]
		},
		fields=BLOCK_LIST_FIELDS,
		order_by="start_at asc"
	)
