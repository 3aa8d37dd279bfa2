"""
Tests for scheduling/availability.py

Day availability of a provider against its template, blocks and appointments.
"""

import unittest
import frappe

from booking_engine.booking_engine.scheduling.availability import get_day_availability
from booking_engine.booking_engine.tests.fixtures import (
	TEST_DATE,
	make_appointment,
	make_block,
	make_provider,
	make_service
)

TENANT = "tenant-availability"


class TestAvailability(unittest.TestCase):
	"""Tests for get_day_availability."""

	def setUp(self):
		"""Set up test data before each test."""
		self.provider = make_provider(TENANT)
		self.service = make_service(TENANT, duration_min=30)

	def test_template_only(self):
		"""mon=[09:00-12:00] without blocks or appointments."""
		result = get_day_availability(TENANT, self.provider.name, TEST_DATE)
		self.assertEqual(result, [{"start": "09:00", "end": "12:00"}])

	def test_block_splits_day(self):
		"""Block 10:00-10:30 leaves 09:00-10:00 and 10:30-12:00."""
		make_block(TENANT, self.provider.name, "2025-11-17 10:00:00", "2025-11-17 10:30:00")

		result = get_day_availability(TENANT, self.provider.name, TEST_DATE)
		self.assertEqual(result, [
			{"start": "09:00", "end": "10:00"},
			{"start": "10:30", "end": "12:00"}
		])

	def test_appointment_occupies_time(self):
		make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00")

		result = get_day_availability(TENANT, self.provider.name, TEST_DATE)
		self.assertEqual(result, [{"start": "09:30", "end": "12:00"}])

	def test_cancelled_appointment_frees_time(self):
		appointment = make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00")
		appointment.db_set("status", "cancelled")

		result = get_day_availability(TENANT, self.provider.name, TEST_DATE)
		self.assertEqual(result, [{"start": "09:00", "end": "12:00"}])

	def test_block_from_previous_day_is_clipped(self):
		"""A block crossing midnight only removes the part inside the day."""
		provider = make_provider(TENANT, slots=[("mon", "00:00", "03:00")])
		make_block(TENANT, provider.name, "2025-11-16 23:00:00", "2025-11-17 01:00:00")

		result = get_day_availability(TENANT, provider.name, TEST_DATE)
		self.assertEqual(result, [{"start": "01:00", "end": "03:00"}])

	def test_weekday_without_template(self):
		"""Tuesday has no template: empty list, no error."""
		self.assertEqual(get_day_availability(TENANT, self.provider.name, "2025-11-18"), [])

	def test_other_tenant_provider_not_found(self):
		with self.assertRaises(frappe.DoesNotExistError):
			get_day_availability("another-tenant", self.provider.name, TEST_DATE)

	def test_inactive_provider(self):
		provider = make_provider(TENANT, active=0)

		with self.assertRaises(frappe.ValidationError):
			get_day_availability(TENANT, provider.name, TEST_DATE)

	def test_invalid_date(self):
		with self.assertRaises(frappe.ValidationError):
			get_day_availability(TENANT, self.provider.name, "17-11-2025")

	def tearDown(self):
		"""Clean up test data after each test."""
		frappe.db.rollback()


def run_tests():
	"""Run all availability tests."""
	unittest.main()
