"""
Appointments API Domain

Create, list, reschedule, change status and cancel appointments.
"""

from .endpoints import (
    create_appointment,
    list_appointments,
    reschedule_appointment,
    update_appointment_status,
    cancel_appointment,
)

__all__ = [
    "create_appointment",
    "list_appointments",
    "reschedule_appointment",
    "update_appointment_status",
    "cancel_appointment",
]
