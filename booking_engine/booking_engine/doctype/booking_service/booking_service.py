# Copyright (c) 2026, Booking Engine Developers and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint


class BookingService(Document):
	"""Servicio ofrecido por un tenant. duration_min define el largo de cada cita."""

	def validate(self) -> None:
		if not self.tenant:
			frappe.throw(_("Tenant es requerido"))

		if not self.service_name:
			frappe.throw(_("Service Name es requerido"))

		if cint(self.duration_min) <= 0:
			frappe.throw(_("Duration (min) debe ser mayor que 0"))
