"""
Scheduling Services Module

This module provides core business logic for appointment booking:
- Interval algebra and time helpers (intervals.py, timeutils.py)
- Free time and slot computation (engine.py, availability.py, slots.py)
- Conflict detection (conflicts.py, overlap.py)
- Appointment lifecycle (booking.py)
- Provider blocks (blocks.py)
- Caller role names (roles.py)
"""
