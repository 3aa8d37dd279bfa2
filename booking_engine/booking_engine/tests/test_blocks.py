"""
Tests for scheduling/blocks.py

Create, move, remove and list Provider Blocks.
"""

import unittest
import frappe
from frappe.utils import get_datetime

from booking_engine.booking_engine.scheduling import blocks
from booking_engine.exceptions import SchedulingConflictError
from booking_engine.booking_engine.tests.fixtures import (
	TEST_DATE,
	make_appointment,
	make_provider,
	make_service
)

TENANT = "tenant-blocks"
ADMIN = {"user": "Administrator", "role": "admin"}


class TestBlocks(unittest.TestCase):
	"""Tests for the block management service."""

	def setUp(self):
		"""Set up test data before each test."""
		self.provider = make_provider(TENANT, user="Administrator")
		self.service = make_service(TENANT, duration_min=30)

	def _create(self, start_at, end_at, actor=None, reason="Almuerzo"):
		return blocks.create_block(TENANT, actor or ADMIN, {
			"provider": self.provider.name,
			"start_at": start_at,
			"end_at": end_at,
			"reason": reason
		})

	# ===== CREATE =====

	def test_create_block(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		self.assertEqual(block.tenant, TENANT)
		self.assertEqual(block.reason, "Almuerzo")

	def test_overlapping_block_conflicts(self):
		self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		with self.assertRaises(SchedulingConflictError):
			self._create("2025-11-17T10:15:00Z", "2025-11-17T10:45:00Z")

	def test_adjacent_blocks_allowed(self):
		self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")
		self._create("2025-11-17T10:30:00Z", "2025-11-17T11:00:00Z")

		self.assertEqual(len(blocks.list_blocks_for_day(TENANT, self.provider.name, TEST_DATE)), 2)

	def test_create_ignores_appointments_by_default(self):
		make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00")

		block = self._create("2025-11-17T09:00:00Z", "2025-11-17T10:00:00Z")
		self.assertTrue(block.name)

	def test_create_checks_appointments_when_configured(self):
		make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00")
		frappe.conf.booking_block_create_checks_appointments = 1

		try:
			with self.assertRaises(SchedulingConflictError):
				self._create("2025-11-17T09:00:00Z", "2025-11-17T10:00:00Z")
		finally:
			frappe.conf.booking_block_create_checks_appointments = 0

	def test_create_start_after_end(self):
		with self.assertRaises(frappe.ValidationError):
			self._create("2025-11-17T11:00:00Z", "2025-11-17T10:00:00Z")

	def test_create_other_tenant_provider(self):
		other = make_provider("another-tenant")

		with self.assertRaises(frappe.PermissionError):
			blocks.create_block(TENANT, ADMIN, {
				"provider": other.name,
				"start_at": "2025-11-17T10:00:00Z",
				"end_at": "2025-11-17T10:30:00Z"
			})

	def test_provider_role_only_own_calendar(self):
		"""A provider can block its own calendar but not another one."""
		own = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z", actor={"user": "Administrator", "role": "provider"})
		self.assertTrue(own.name)

		with self.assertRaises(frappe.PermissionError):
			self._create("2025-11-17T11:00:00Z", "2025-11-17T11:30:00Z", actor={"user": "Guest", "role": "provider"})

	# ===== UPDATE =====

	def test_update_block_keeps_omitted_fields(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		doc = blocks.update_block(TENANT, block.name, {"end_at": "2025-11-17T11:00:00Z"})

		self.assertEqual(get_datetime(doc.start_at), get_datetime("2025-11-17 10:00:00"))
		self.assertEqual(get_datetime(doc.end_at), get_datetime("2025-11-17 11:00:00"))
		self.assertEqual(doc.reason, "Almuerzo")

	def test_update_block_clears_reason(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		blocks.update_block(TENANT, block.name, {"reason": ""})

		self.assertFalse(frappe.db.get_value("Provider Block", block.name, "reason"))

	def test_update_block_conflicts_with_active_appointment(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")
		make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 11:00:00", "2025-11-17 11:30:00")

		with self.assertRaises(SchedulingConflictError):
			blocks.update_block(TENANT, block.name, {"end_at": "2025-11-17T11:15:00Z"})

		stored = frappe.db.get_value("Provider Block", block.name, "end_at")
		self.assertEqual(get_datetime(stored), get_datetime("2025-11-17 10:30:00"))

	def test_update_block_ignores_done_appointment(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")
		appointment = make_appointment(TENANT, self.provider.name, self.service.name, "2025-11-17 11:00:00", "2025-11-17 11:30:00")
		appointment.db_set("status", "done")

		doc = blocks.update_block(TENANT, block.name, {"end_at": "2025-11-17T11:15:00Z"})
		self.assertEqual(get_datetime(doc.end_at), get_datetime("2025-11-17 11:15:00"))

	def test_update_block_conflicts_with_other_block(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")
		self._create("2025-11-17T11:00:00Z", "2025-11-17T11:30:00Z")

		with self.assertRaises(SchedulingConflictError):
			blocks.update_block(TENANT, block.name, {"start_at": "2025-11-17T10:45:00Z", "end_at": "2025-11-17T11:15:00Z"})

	def test_update_block_not_found(self):
		with self.assertRaises(frappe.DoesNotExistError):
			blocks.update_block("another-tenant", "BLK-99999", {"reason": "x"})

	# ===== REMOVE / LIST =====

	def test_remove_block(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		self.assertEqual(blocks.remove_block(TENANT, block.name), {"deleted": True})
		self.assertFalse(frappe.db.exists("Provider Block", block.name))

	def test_remove_block_other_tenant(self):
		block = self._create("2025-11-17T10:00:00Z", "2025-11-17T10:30:00Z")

		with self.assertRaises(frappe.DoesNotExistError):
			blocks.remove_block("another-tenant", block.name)

	def test_list_blocks_touching_day(self):
		"""Blocks crossing midnight are listed for both days."""
		night = self._create("2025-11-16T23:00:00Z", "2025-11-17T01:00:00Z")
		self._create("2025-11-18T10:00:00Z", "2025-11-18T10:30:00Z")

		result = blocks.list_blocks_for_day(TENANT, self.provider.name, TEST_DATE)
		self.assertEqual([b.name for b in result], [night.name])

	def tearDown(self):
		"""Clean up test data after each test."""
		frappe.db.rollback()


def run_tests():
	"""Run all block tests."""
	unittest.main()
