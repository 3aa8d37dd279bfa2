# Copyright (c) 2026, Booking Engine Developers and contributors
# For license information, please see license.txt

"""
Booking Provider DocType

Recurso reservable (profesional) de un tenant con su plantilla semanal.
La plantilla se valida al guardar; el motor de agenda solo la lee.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from typing import Dict, List, Tuple, Any

from booking_engine.booking_engine.scheduling.timeutils import (
	WEEKDAY_KEYS,
	hhmm_to_minutes,
	minutes_to_hhmm
)


class BookingProvider(Document):
	"""
	Booking Provider with weekly template validation.

	Validations:
	- tenant and provider_name required
	- Each slot: weekday in mon..sun, HH:MM times, start_time < end_time
	- No overlapping slots on same weekday
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.
		"""
		self._validate_required_fields()
		self._validate_slots_times()
		self._validate_no_overlapping_slots()

	def get_weekly_template(self) -> Dict[str, List[Tuple[str, str]]]:
		"""
		Plantilla semanal como mapping fijo de 7 días.

		Returns:
			dict: {"mon": [("09:00", "12:00"), ...], ..., "sun": []}
		"""
		template = {key: [] for key in WEEKDAY_KEYS}

		for slot in self.availability_slots:
			if slot.weekday in template:
				template[slot.weekday].append((slot.start_time, slot.end_time))

		for ranges in template.values():
			ranges.sort(key=lambda r: hhmm_to_minutes(r[0]))

		return template

	def _validate_required_fields(self) -> None:
		"""Valida campos requeridos."""
		if not self.tenant:
			frappe.throw(_("Tenant es requerido"))

		if not self.provider_name:
			frappe.throw(_("Provider Name es requerido"))

	def _validate_slots_times(self) -> None:
		"""
		Valida que cada slot tenga weekday válido y start_time < end_time.
		Normaliza los tiempos a HH:MM.
		"""
		for idx, slot in enumerate(self.availability_slots, 1):
			if slot.weekday not in WEEKDAY_KEYS:
				frappe.throw(_(f"Fila {idx}: Weekday debe ser uno de {', '.join(WEEKDAY_KEYS)}"))

			start = self._to_minutes(slot.start_time, idx, "Start Time")
			end = self._to_minutes(slot.end_time, idx, "End Time")

			if start >= end:
				frappe.throw(
					_(f"Fila {idx} ({slot.weekday}): Start Time ({minutes_to_hhmm(start)}) debe ser menor que End Time ({minutes_to_hhmm(end)})")
				)

			slot.start_time = minutes_to_hhmm(start)
			slot.end_time = minutes_to_hhmm(end)

	def _validate_no_overlapping_slots(self) -> None:
		"""
		Valida que no haya slots solapados en el mismo día.

		Dos slots se solapan si:
		- Son del mismo weekday
		- slot1.start < slot2.end AND slot1.end > slot2.start
		"""
		slots_by_day: Dict[str, List[Dict[str, Any]]] = {}

		for idx, slot in enumerate(self.availability_slots, 1):
			slots_by_day.setdefault(slot.weekday, []).append({
				"idx": idx,
				"start": hhmm_to_minutes(slot.start_time),
				"end": hhmm_to_minutes(slot.end_time)
			})

		for weekday, slots in slots_by_day.items():
			slots.sort(key=lambda x: x["start"])

			for current, next_slot in zip(slots, slots[1:]):
				if current["end"] > next_slot["start"]:
					frappe.throw(
						_(f"{weekday}: Slots solapados - Fila {current['idx']} ({minutes_to_hhmm(current['start'])}-{minutes_to_hhmm(current['end'])}) "
						  f"se solapa con Fila {next_slot['idx']} ({minutes_to_hhmm(next_slot['start'])}-{minutes_to_hhmm(next_slot['end'])})")
					)

	def _to_minutes(self, value: Any, idx: int, label: str) -> int:
		if not value:
			frappe.throw(_(f"Fila {idx}: {label} es requerido"))

		try:
			return hhmm_to_minutes(value)
		except ValueError:
			frappe.throw(_(f"Fila {idx}: {label} debe tener formato HH:MM (00:00-24:00)"))
