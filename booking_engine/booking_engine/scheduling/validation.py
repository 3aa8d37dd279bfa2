"""
Input coercion shared by the scheduling services.

Turns the ValueError raised by the pure time helpers into
frappe.ValidationError with a message for the caller.
"""

import frappe
from frappe import _
from datetime import date, datetime
from typing import Union

from .timeutils import parse_date, parse_utc_datetime


def parse_date_or_throw(value: Union[date, str], field_name: str = "date") -> date:
	"""Convierte YYYY-MM-DD a date o lanza ValidationError."""
	try:
		return parse_date(value)
	except (TypeError, ValueError):
		frappe.throw(_(f"{field_name} inválido; use YYYY-MM-DD"), frappe.ValidationError)


def parse_timestamp_or_throw(value: Union[datetime, str], field_name: str) -> datetime:
	"""Convierte un timestamp ISO 8601 a UTC naive o lanza ValidationError."""
	try:
		return parse_utc_datetime(value)
	except (TypeError, ValueError):
		frappe.throw(
			_(f"{field_name} debe ser una fecha ISO válida (ej: 2025-11-15T09:00:00Z)"),
			frappe.ValidationError
		)
