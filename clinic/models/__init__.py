from .user import User
from .admin import Admin
from .doctor import Doctor, DoctorSpecialty, DoctorStatus, Purpose
from .schedule import Schedule
from .patient import Patient, PrenatalInfo, ImmunizationInfo, VitalSigns, Diagnosis
from .appointment import (
    Appointment, AppointmentStatus, AppointmentPurpose, SlotPeriod, can_transition
)
from .queue import QueueEntry, QueueStatus, QUEUE_TRANSITIONS
from .announcement import Announcement

__all__ = [
    "User", "Admin", "Doctor", "DoctorSpecialty", "DoctorStatus", "Purpose",
    "Schedule", "Patient", "PrenatalInfo", "ImmunizationInfo", "VitalSigns",
    "Diagnosis", "Appointment", "AppointmentStatus", "AppointmentPurpose",
    "SlotPeriod", "can_transition", "QueueEntry", "QueueStatus",
    "QUEUE_TRANSITIONS", "Announcement",
]
