"""
Security Utilities for the Booking API

Provides caller identity (tenant + role), role gates, write throttling
and cleanup of the free-text fields clients send (names, phones, reasons).

Identity model:
- user: frappe.session.user (guests are rejected)
- tenant: user default "booking_tenant"
- role: first Booking role the user holds (owner > admin > attendant > provider)
"""

import re
import frappe
from frappe import _
from frappe.utils import strip_html
from typing import Dict, Iterable, Optional

from booking_engine.booking_engine.scheduling.roles import BOOKING_ROLES
from booking_engine.booking_engine.scheduling.settings import get_write_rate_limit

TENANT_DEFAULT_KEY = "booking_tenant"

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# ===================
# Caller Identity
# ===================

def get_caller_context() -> Dict[str, str]:
    """
    Resolve the caller identity for the current request.

    Returns:
        dict: {"tenant": str, "user": str, "role": str}

    Raises:
        frappe.PermissionError: Guest, no tenant assigned or no Booking role
    """
    user = frappe.session.user

    if not user or user == "Guest":
        frappe.throw(_("Debe iniciar sesión"), frappe.PermissionError)

    tenant = frappe.defaults.get_user_default(TENANT_DEFAULT_KEY, user)
    if not tenant:
        frappe.throw(_("El usuario no tiene un tenant asignado"), frappe.PermissionError)

    user_roles = set(frappe.get_roles(user))
    role = next((role for role, frappe_role in BOOKING_ROLES if frappe_role in user_roles), None)

    if not role:
        frappe.throw(_("El usuario no tiene un rol de Booking"), frappe.PermissionError)

    return {"tenant": tenant, "user": user, "role": role}


def require_roles(context: Dict[str, str], allowed: Iterable[str]) -> None:
    """
    Role gate for an endpoint.

    Raises:
        frappe.PermissionError: If the caller role is not in allowed
    """
    if context.get("role") not in set(allowed):
        frappe.throw(_("Sin permiso para esta operación"), frappe.PermissionError)


# ===================
# Write Throttling
# ===================

def check_rate_limit(action: str, limit: int = None, seconds: int = 60) -> None:
    """
    Throttle booking writes per user and client address.

    The counter lives in Redis: INCR is atomic, so concurrent requests
    never read the same count, and the window starts on the first hit.

    Args:
        action: endpoint name, e.g. "create_appointment"
        limit: writes allowed per window (default: booking_rate_limit_writes)
        seconds: window length

    Raises:
        frappe.TooManyRequestsError: once the window holds more than limit writes
    """
    limit = limit or get_write_rate_limit()
    caller = f"{frappe.session.user}:{get_client_ip()}"
    key = frappe.cache.make_key(f"booking_engine:writes:{action}:{caller}")

    hits = frappe.cache.incr(key)
    if hits == 1:
        frappe.cache.expire(key, seconds)

    if hits > limit:
        frappe.log_error(
            title=_("Booking Write Limit Exceeded"),
            message=f"Caller: {caller}, Action: {action}, Limit: {limit}/{seconds}s"
        )
        frappe.throw(
            _("Demasiadas operaciones. Espere un momento e intente de nuevo."),
            frappe.TooManyRequestsError
        )


def get_client_ip() -> str:
    """Client address resolved by Frappe for this request, "unknown" outside HTTP."""
    return getattr(frappe.local, "request_ip", None) or "unknown"


# ===================
# Free-text Fields
# ===================

def clean_text(value: Optional[str], max_length: int = 500) -> Optional[str]:
    """
    Limpia un campo de texto libre (client_name, client_phone, reason).

    Args:
        value: texto recibido; None significa "no enviado"
        max_length: longitud máxima guardada

    Returns:
        None si no se envió; si no, el texto sin HTML ni caracteres de
        control, recortado. "" se conserva para poder vaciar un campo.
    """
    if value is None:
        return None

    value = CONTROL_CHARS.sub("", strip_html(str(value))).strip()

    return value[:max_length]
