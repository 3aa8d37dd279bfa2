# Copyright (c) 2026, Booking Engine Developers and contributors
# For license information, please see license.txt

from frappe.model.document import Document


class ProviderAvailabilitySlot(Document):
	pass
