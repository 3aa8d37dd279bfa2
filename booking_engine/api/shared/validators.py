"""
Document Name Validators

Endpoints receive document names as raw strings. Every Booking DocType
is named by a fixed series (PRV-.#####, SRV-.#####, APT-.#####,
BLK-.#####), so anything else is rejected before touching the database.
Dates and timestamps are parsed by the scheduling services.
"""

import re
import frappe
from frappe import _

NAMING_SERIES = {
    "provider": "PRV",
    "service": "SRV",
    "appointment": "APT",
    "block": "BLK",
}


def validate_docname(name: str, field_name: str) -> str:
    """
    Validate a document name against the naming series of its DocType.

    Args:
        name: Raw value received by the endpoint
        field_name: "provider", "service", "appointment" or "block"

    Returns:
        str: The stripped name

    Raises:
        frappe.ValidationError: If name is missing or not in the series
    """
    if not name:
        frappe.throw(_(f"{field_name} es requerido"), frappe.ValidationError)

    name = str(name).strip()
    prefix = NAMING_SERIES[field_name]

    if not re.fullmatch(rf"{prefix}-\d{{5,}}", name):
        frappe.throw(
            _(f"{field_name} inválido: se espera {prefix}-00001"),
            frappe.ValidationError
        )

    return name
