# Copyright (c) 2026, Booking Engine Developers and contributors
# For license information, please see license.txt

"""
Booking Appointment DocType

A client booking of one service with one provider over a UTC time range.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint, get_datetime

from booking_engine.booking_engine.scheduling.conflicts import APPOINTMENT_STATUSES, STATUS_SCHEDULED
from booking_engine.booking_engine.scheduling.overlap import check_conflicts, lock_provider
from booking_engine.exceptions import SchedulingConflictError


class BookingAppointment(Document):
	"""
	Booking Appointment DocType with scheduling validation.

	Flujo:
	1. Se crea en status scheduled (duración exacta del servicio, sin solapes)
	2. Se puede reprogramar (solo start_at/end_at) o cambiar de status
	3. Nunca se borra; cancelar = status cancelled
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.

		Ejecuta:
		1. Campos requeridos y status válido
		2. start_at < end_at
		3. Provider y Service del mismo tenant
		4. Duración exacta del servicio (solo al crear)
		5. Conflictos con blocks y citas no canceladas (al crear o si cambió el horario)
		"""
		self._validate_required_fields()
		self._validate_status()
		self._validate_datetime_consistency()
		self._validate_tenant_references()

		if self.is_new():
			self._validate_duration_matches_service()

		if self.is_new() or self.has_value_changed("start_at") or self.has_value_changed("end_at"):
			self._validate_no_conflicts()

	# ===== VALIDATION METHODS =====

	def _validate_required_fields(self) -> None:
		"""Valida campos requeridos."""
		if not self.tenant:
			frappe.throw(_("Tenant es requerido"))

		if not self.provider or not self.service:
			frappe.throw(_("Provider y Service son requeridos"))

		if not self.start_at or not self.end_at:
			frappe.throw(_("Start At y End At son requeridos"))

	def _validate_status(self) -> None:
		if not self.status:
			self.status = STATUS_SCHEDULED

		if self.status not in APPOINTMENT_STATUSES:
			frappe.throw(_(f"Status inválido: {self.status}. Valores permitidos: {', '.join(APPOINTMENT_STATUSES)}"))

	def _validate_datetime_consistency(self) -> None:
		"""Valida que start_at < end_at."""
		if get_datetime(self.start_at) >= get_datetime(self.end_at):
			frappe.throw(_("Start At debe ser menor que End At"))

	def _validate_tenant_references(self) -> None:
		"""Provider y Service deben pertenecer al tenant de la cita."""
		if not frappe.db.exists("Booking Provider", {"name": self.provider, "tenant": self.tenant}):
			frappe.throw(_("Provider no pertenece al tenant"), frappe.PermissionError)

		if not frappe.db.exists("Booking Service", {"name": self.service, "tenant": self.tenant}):
			frappe.throw(_("Service no pertenece al tenant"), frappe.PermissionError)

	def _validate_duration_matches_service(self) -> None:
		"""
		La duración debe ser exactamente duration_min del servicio.
		"""
		duration_min = cint(frappe.db.get_value("Booking Service", self.service, "duration_min"))
		actual = (get_datetime(self.end_at) - get_datetime(self.start_at)).total_seconds() / 60

		if actual != duration_min:
			frappe.throw(
				_(f"La duración de la cita ({actual:g} min) no coincide con la del servicio ({duration_min} min)")
			)

	def _validate_no_conflicts(self) -> None:
		"""
		Rechaza la cita si se solapa con blocks o citas no canceladas del proveedor.

		Toma el lock del proveedor antes de leer la agenda.
		"""
		lock_provider(self.tenant, self.provider)

		result = check_conflicts(
			self.tenant,
			self.provider,
			get_datetime(self.start_at),
			get_datetime(self.end_at),
			exclude_appointment=None if self.is_new() else self.name
		)

		if not result["has_conflict"]:
			return

		frappe.logger("booking_engine").info(
			f"Appointment rejected for provider {self.provider} "
			f"({self.start_at} - {self.end_at}): blocks={result['conflicting_blocks']} "
			f"appointments={result['conflicting_appointments']}"
		)

		if result["conflicting_blocks"]:
			frappe.throw(
				_("El horario se solapa con un block del proveedor: {0}").format(", ".join(result["conflicting_blocks"])),
				SchedulingConflictError
			)

		frappe.throw(
			_("El horario se solapa con otra cita: {0}").format(", ".join(result["conflicting_appointments"])),
			SchedulingConflictError
		)
