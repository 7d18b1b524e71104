"""Appointment Type Value Object.

Fixed set of visit types a patient can book.
"""

from app.core.domain.value_objects import StatusEnum


class AppointmentType(StatusEnum):
    """Kind of visit requested by the patient."""

    NEW_PATIENT = "New Patient"
    FOLLOW_UP = "Follow-up"
    CONSULTATION = "Consultation"
    EMERGENCY = "Emergency"
