"""
Tests for the provider row lock on every calendar writer.

Each path that writes blocks or appointments must take
SELECT ... FOR UPDATE on the Booking Provider row before it reads the
block/appointment snapshot used for the conflict check. The database
calls are wrapped so they still run, and the order is recorded.
"""

import unittest
from unittest.mock import patch

import frappe

from booking_engine.booking_engine.scheduling import blocks, booking, overlap
from booking_engine.booking_engine.tests.fixtures import (
	make_appointment,
	make_block,
	make_provider,
	make_service
)

TENANT = "tenant-locking"
ADMIN = {"user": "Administrator", "role": "admin"}

LOCK = "lock"
SNAPSHOT = "snapshot"


class TestProviderLockOrder(unittest.TestCase):
	"""The provider lock comes before any calendar snapshot."""

	def setUp(self):
		"""Set up test data before each test."""
		self.provider = make_provider(TENANT, user="Administrator")
		self.service = make_service(TENANT, duration_min=30)
		self.events = []

	def _recording(self):
		"""
		Patches que registran locks del provider y lecturas de agenda.

		Returns:
			list: patches sin iniciar
		"""
		real_get_value = frappe.local.db.get_value
		real_block_snapshot = overlap.get_block_snapshot
		real_appointment_snapshot = overlap.get_appointment_snapshot

		def get_value(*args, **kwargs):
			if kwargs.get("for_update") is True and args and args[0] == "Booking Provider":
				self.events.append(LOCK)
			return real_get_value(*args, **kwargs)

		def block_snapshot(*args, **kwargs):
			self.events.append(SNAPSHOT)
			return real_block_snapshot(*args, **kwargs)

		def appointment_snapshot(*args, **kwargs):
			self.events.append(SNAPSHOT)
			return real_appointment_snapshot(*args, **kwargs)

		return [
			patch.object(frappe.local.db, "get_value", side_effect=get_value),
			patch.object(overlap, "get_block_snapshot", side_effect=block_snapshot),
			patch.object(overlap, "get_appointment_snapshot", side_effect=appointment_snapshot)
		]

	def _run_recorded(self, action):
		patches = self._recording()
		for p in patches:
			p.start()

		try:
			return action()
		finally:
			for p in patches:
				p.stop()

	def assertLockedBeforeSnapshot(self):
		self.assertIn(LOCK, self.events)
		self.assertIn(SNAPSHOT, self.events)
		self.assertLess(self.events.index(LOCK), self.events.index(SNAPSHOT), self.events)

	def test_create_appointment_locks_first(self):
		self._run_recorded(lambda: booking.create_appointment(TENANT, "Administrator", {
			"provider": self.provider.name,
			"service": self.service.name,
			"start_at": "2025-11-17T09:00:00Z",
			"end_at": "2025-11-17T09:30:00Z",
			"client_name": "Ana"
		}))

		self.assertLockedBeforeSnapshot()

	def test_reschedule_appointment_locks_first(self):
		appointment = make_appointment(
			TENANT, self.provider.name, self.service.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00"
		)

		self._run_recorded(lambda: booking.reschedule_appointment(
			TENANT, appointment.name, {"start_at": "2025-11-17T10:00:00Z"}
		))

		self.assertLockedBeforeSnapshot()

	def test_create_block_locks_first(self):
		self._run_recorded(lambda: blocks.create_block(TENANT, ADMIN, {
			"provider": self.provider.name,
			"start_at": "2025-11-17T10:00:00Z",
			"end_at": "2025-11-17T10:30:00Z"
		}))

		self.assertLockedBeforeSnapshot()

	def test_update_block_locks_first(self):
		block = make_block(TENANT, self.provider.name, "2025-11-17 10:00:00", "2025-11-17 10:30:00")

		self._run_recorded(lambda: blocks.update_block(TENANT, block.name, {"end_at": "2025-11-17T11:00:00Z"}))

		self.assertLockedBeforeSnapshot()

	def test_direct_insert_locks_first(self):
		"""Inserts that skip the services (Desk, data import) take the same lock."""
		self._run_recorded(lambda: make_appointment(
			TENANT, self.provider.name, self.service.name, "2025-11-17 11:00:00", "2025-11-17 11:30:00"
		))
		self.assertLockedBeforeSnapshot()

		self.events.clear()
		self._run_recorded(lambda: make_block(TENANT, self.provider.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00"))
		self.assertLockedBeforeSnapshot()

	def test_rejected_write_still_locked_first(self):
		make_block(TENANT, self.provider.name, "2025-11-17 09:00:00", "2025-11-17 09:30:00")

		with self.assertRaises(frappe.ValidationError):
			self._run_recorded(lambda: booking.create_appointment(TENANT, "Administrator", {
				"provider": self.provider.name,
				"service": self.service.name,
				"start_at": "2025-11-17T09:00:00Z",
				"end_at": "2025-11-17T09:30:00Z",
				"client_name": "Ana"
			}))

		self.assertLockedBeforeSnapshot()

	def tearDown(self):
		"""Clean up test data after each test."""
		frappe.db.rollback()


def run_tests():
	"""Run all locking tests."""
	unittest.main()
