"""
Availability and Slot Computation

Pure part of the Availability Engine and the Slot Generator:
- compute_free_intervals: weekly template ranges minus occupied ranges
- generate_slots: fixed-duration slots stepped over free intervals

The storage-backed wrappers live in availability.py and slots.py.
"""

from typing import Iterable, List, Sequence

from .intervals import Interval, clip_to_day, merge_intervals, subtract_intervals
from .timeutils import hhmm_to_minutes

DEFAULT_SLOT_STEP_MINUTES = 15


def template_to_intervals(ranges: Iterable[Sequence[str]]) -> List[Interval]:
	"""
	Convierte los rangos HH:MM de un día del template a minutos.

	Los rangos se recortan al día y los vacíos se descartan.
	"""
	intervals = []
	for start, end in ranges:
		interval = clip_to_day(hhmm_to_minutes(start), hhmm_to_minutes(end))
		if interval["end"] > interval["start"]:
			intervals.append(interval)

	intervals.sort(key=lambda x: x["start"])
	return intervals


def compute_free_intervals(
	template_ranges: Iterable[Sequence[str]],
	occupied: Iterable[Interval]
) -> List[Interval]:
	"""
	Calcula el tiempo libre de un proveedor para un día.

	Args:
		template_ranges: rangos [("09:00", "12:00"), ...] del weekday
		occupied: rangos ocupados en minutos (blocks + appointments), ya recortados al día

	Returns:
		list: intervalos libres ordenados y disjuntos

	Algoritmo:
		1. Template HH:MM -> minutos
		2. Merge de los rangos ocupados
		3. Restar ocupados del template
	"""
	base_intervals = template_to_intervals(template_ranges)
	if not base_intervals:
		return []

	taken = merge_intervals(r for r in occupied if r["end"] > r["start"])

	free = subtract_intervals(base_intervals, taken)
	free.sort(key=lambda x: x["start"])
	return free


def generate_slots(
	free_intervals: Iterable[Interval],
	duration: int,
	step: int = DEFAULT_SLOT_STEP_MINUTES
) -> List[Interval]:
	"""
	Genera slots de duración fija dentro de cada intervalo libre.

	Desde el inicio de cada intervalo se emite (start, start + duration)
	mientras start + duration <= end, avanzando `step` minutos. Con
	step < duration los slots de un mismo intervalo se solapan entre sí:
	son opciones de inicio, solo una se convierte en cita.

	Raises:
		ValueError: si duration o step no son positivos
	"""
	if duration <= 0:
		raise ValueError("Slot duration must be positive")
	if step <= 0:
		raise ValueError("Slot step must be positive")

	slots = []
	for interval in sorted(free_intervals, key=lambda x: x["start"]):
		current_start = interval["start"]
		while current_start + duration <= interval["end"]:
			slots.append({"start": current_start, "end": current_start + duration})
			current_start += step

	return slots
