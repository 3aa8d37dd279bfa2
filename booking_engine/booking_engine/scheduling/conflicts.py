"""
Conflict Detection

Tests a candidate half-open interval [start, end) against a snapshot of
existing blocks or appointments for one provider. Storage independent:
overlap.py loads the snapshot and calls find_conflicts.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Collection

STATUS_SCHEDULED = "scheduled"
STATUS_IN_SERVICE = "in_service"
STATUS_DONE = "done"
STATUS_NO_SHOW = "no_show"
STATUS_CANCELLED = "cancelled"

APPOINTMENT_STATUSES = (
	STATUS_SCHEDULED,
	STATUS_IN_SERVICE,
	STATUS_DONE,
	STATUS_NO_SHOW,
	STATUS_CANCELLED,
)

# Ocupan agenda para altas y reprogramaciones
NON_CANCELLED_STATUSES = frozenset(s for s in APPOINTMENT_STATUSES if s != STATUS_CANCELLED)

# Ocupan agenda al mover un block
ACTIVE_STATUSES = frozenset((STATUS_SCHEDULED, STATUS_IN_SERVICE))


def intervals_overlap(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
	"""Overlap: other_start < end AND other_end > start. Tocarse no es conflicto."""
	return other_start < end and other_end > start


def find_conflicts(
	start: datetime,
	end: datetime,
	occupied: Iterable[Dict[str, Any]],
	exclude: Optional[str] = None,
	statuses: Optional[Collection[str]] = None
) -> List[str]:
	"""
	Detecta qué entradas existentes se solapan con el candidato.

	Args:
		start: inicio del candidato
		end: fin del candidato (exclusivo)
		occupied: snapshot [{"name", "start", "end", "status"?}, ...]
		exclude: name a ignorar (la propia fila en ediciones)
		statuses: si se indica, solo cuentan las entradas con status en este conjunto

	Returns:
		list[str]: names de las entradas en conflicto, en el orden del snapshot
	"""
	conflicts = []

	for entry in occupied:
		if exclude and entry["name"] == exclude:
			continue

		if statuses is not None and entry.get("status") not in statuses:
			continue

		if intervals_overlap(start, end, entry["start"], entry["end"]):
			conflicts.append(entry["name"])

	return conflicts
