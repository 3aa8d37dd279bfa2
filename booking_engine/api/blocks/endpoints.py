"""
Block API Endpoints

Whitelisted functions to manage Provider Blocks.

Role gates:
- create, list: owner, admin, provider (a provider only blocks its own calendar)
- update, remove: owner, admin
"""

import frappe
from typing import Dict, List, Any, Optional

from booking_engine.booking_engine.scheduling import blocks
from booking_engine.booking_engine.scheduling.validation import parse_date_or_throw

from booking_engine.api.shared import (
	ROLE_ADMIN,
	ROLE_OWNER,
	ROLE_PROVIDER,
	check_rate_limit,
	clean_text,
	get_caller_context,
	require_roles,
	validate_docname
)

BLOCK_WRITE_ROLES = (ROLE_OWNER, ROLE_ADMIN, ROLE_PROVIDER)
BLOCK_ADMIN_ROLES = (ROLE_OWNER, ROLE_ADMIN)


@frappe.whitelist(methods=['POST'])
def create_block(provider: str, start_at: str, end_at: str, reason: Optional[str] = None) -> Dict[str, Any]:
	"""
	Crea un block en la agenda de un proveedor.

	Args:
		provider: name del Booking Provider
		start_at: inicio ISO 8601
		end_at: fin ISO 8601 (exclusivo)
		reason: motivo (opcional)

	Returns:
		dict: el Provider Block creado
	"""
	check_rate_limit("create_block")

	context = get_caller_context()
	require_roles(context, BLOCK_WRITE_ROLES)

	data = {
		"provider": validate_docname(provider, "provider"),
		"start_at": start_at,
		"end_at": end_at,
		"reason": clean_text(reason)
	}

	try:
		block = blocks.create_block(context["tenant"], context, data)
		frappe.db.commit()

		return block.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in create_block: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['POST', 'PUT'])
def update_block(
	block: str,
	start_at: Optional[str] = None,
	end_at: Optional[str] = None,
	reason: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Mueve o edita un block. Los campos omitidos conservan su valor.
	"""
	check_rate_limit("update_block")

	context = get_caller_context()
	require_roles(context, BLOCK_ADMIN_ROLES)

	block = validate_docname(block, "block")
	data = {
		"start_at": start_at or None,
		"end_at": end_at or None,
		"reason": clean_text(reason)
	}

	try:
		doc = blocks.update_block(context["tenant"], block, data)
		frappe.db.commit()

		return doc.as_dict()

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in update_block: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['POST', 'DELETE'])
def remove_block(block: str) -> Dict[str, bool]:
	"""Borra un block. Returns: {"deleted": true}"""
	check_rate_limit("remove_block")

	context = get_caller_context()
	require_roles(context, BLOCK_ADMIN_ROLES)

	block = validate_docname(block, "block")

	try:
		result = blocks.remove_block(context["tenant"], block)
		frappe.db.commit()

		return result

	except (frappe.ValidationError, frappe.PermissionError, frappe.DoesNotExistError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in remove_block: {str(e)}", "API Error")
		raise


@frappe.whitelist(methods=['GET'])
def list_blocks(provider: str, date: str) -> List[Dict[str, Any]]:
	"""Blocks de un proveedor que tocan un día UTC (YYYY-MM-DD)."""
	context = get_caller_context()
	require_roles(context, BLOCK_WRITE_ROLES)

	provider = validate_docname(provider, "provider")
	target_date = parse_date_or_throw(date)

	try:
		return blocks.list_blocks_for_day(context["tenant"], provider, target_date)

	except (frappe.ValidationError, frappe.PermissionError):
		raise
	except Exception as e:
		frappe.log_error(f"Error in list_blocks: {str(e)}", "API Error")
		raise
