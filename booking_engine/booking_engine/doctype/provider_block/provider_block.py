# Copyright (c) 2026, Booking Engine Developers and contributors
# For license information, please see license.txt

"""
Provider Block DocType

Explicit unavailability of a provider (vacation, break, meeting).
Blocks never overlap each other; moving a block also respects active
appointments.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime

from booking_engine.booking_engine.scheduling.conflicts import ACTIVE_STATUSES
from booking_engine.booking_engine.scheduling.overlap import check_conflicts, lock_provider
from booking_engine.booking_engine.scheduling.settings import block_create_checks_appointments
from booking_engine.exceptions import SchedulingConflictError


class ProviderBlock(Document):
	"""
	Provider Block DocType.

	Validations:
	- tenant, provider, start_at, end_at required
	- start_at < end_at
	- provider belongs to tenant
	- no overlap with other blocks (and active appointments when moving)
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.

		Ejecuta:
		1. Campos requeridos
		2. start_at < end_at
		3. Provider del mismo tenant
		4. Conflictos (solo si es nuevo o cambió el horario)
		"""
		self._validate_required_fields()
		self._validate_datetime_consistency()
		self._validate_provider_tenant()

		if self.is_new() or self.has_value_changed("start_at") or self.has_value_changed("end_at"):
			self._validate_no_conflicts()

	def _validate_required_fields(self) -> None:
		"""Valida campos requeridos."""
		if not self.tenant:
			frappe.throw(_("Tenant es requerido"))

		if not self.provider:
			frappe.throw(_("Provider es requerido"))

		if not self.start_at or not self.end_at:
			frappe.throw(_("Start At y End At son requeridos"))

	def _validate_datetime_consistency(self) -> None:
		"""Valida que start_at < end_at."""
		if get_datetime(self.start_at) >= get_datetime(self.end_at):
			frappe.throw(_("Start At debe ser menor que End At"))

	def _validate_provider_tenant(self) -> None:
		"""El provider debe pertenecer al tenant del block."""
		if not frappe.db.exists("Booking Provider", {"name": self.provider, "tenant": self.tenant}):
			frappe.throw(_("Provider no pertenece al tenant"), frappe.PermissionError)

	def _validate_no_conflicts(self) -> None:
		"""
		Rechaza el block si se solapa con la agenda del proveedor.

		- Alta: solo contra otros blocks (más citas activas si
		  booking_block_create_checks_appointments = 1)
		- Edición: contra otros blocks y citas scheduled/in_service
		"""
		lock_provider(self.tenant, self.provider)

		if self.is_new():
			statuses = ACTIVE_STATUSES if block_create_checks_appointments() else None
		else:
			statuses = ACTIVE_STATUSES

		result = check_conflicts(
			self.tenant,
			self.provider,
			get_datetime(self.start_at),
			get_datetime(self.end_at),
			appointment_statuses=statuses,
			exclude_block=None if self.is_new() else self.name
		)

		if result["conflicting_blocks"]:
			frappe.logger("booking_engine").info(
				f"Block rejected for provider {self.provider}: overlaps {', '.join(result['conflicting_blocks'])}"
			)
			frappe.throw(
				_("El block se solapa con otro block existente: {0}").format(", ".join(result["conflicting_blocks"])),
				SchedulingConflictError
			)

		if result["conflicting_appointments"]:
			frappe.logger("booking_engine").info(
				f"Block rejected for provider {self.provider}: overlaps appointments {', '.join(result['conflicting_appointments'])}"
			)
			frappe.throw(
				_("El block se solapa con citas activas: {0}").format(", ".join(result["conflicting_appointments"])),
				SchedulingConflictError
			)
