"""
Scheduling settings read from site_config.json (frappe.conf).
"""

import frappe
from frappe.utils import cint

from .engine import DEFAULT_SLOT_STEP_MINUTES

DEFAULT_RATE_LIMIT_WRITES = 20


def get_slot_step_minutes() -> int:
	"""Paso entre inicios de slot. Default: 15 minutos."""
	return cint(frappe.conf.get("booking_slot_step_minutes")) or DEFAULT_SLOT_STEP_MINUTES


def block_create_checks_appointments() -> bool:
	"""Si está activo, crear un block también valida contra citas activas."""
	return bool(cint(frappe.conf.get("booking_block_create_checks_appointments")))


def get_write_rate_limit() -> int:
	"""Requests de escritura por minuto y por IP en los endpoints."""
	return cint(frappe.conf.get("booking_rate_limit_writes")) or DEFAULT_RATE_LIMIT_WRITES
