from sqlalchemy import Column, Integer, ForeignKey, Date, DateTime, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DONE = "Done"
    REJECTED = "Rejected"


class SlotPeriod(str, enum.Enum):
    AM = "AM"
    PM = "PM"


class AppointmentPurpose(str, enum.Enum):
    PRENATAL = "Prenatal"
    IMMUNIZATION = "Immunization"


# Approved -> Pending only happens when the queue entry is removed
APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.APPROVED, AppointmentStatus.REJECTED},
    AppointmentStatus.APPROVED: {AppointmentStatus.DONE, AppointmentStatus.PENDING},
    AppointmentStatus.DONE: set(),
    AppointmentStatus.REJECTED: set(),
}


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    """Return True if an appointment may move from ``current`` to ``new``."""
    return new in APPOINTMENT_TRANSITIONS.get(current, set())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=True)
    prenatal_id = Column(Integer, ForeignKey("prenatal_info.id"), nullable=True)
    immunization_id = Column(Integer, ForeignKey("immunization_info.id"), nullable=True)

    # Appointment details
    purpose_of_appointment = Column(SQLEnum(AppointmentPurpose), nullable=False)
    appointment_date = Column(Date, nullable=False, index=True)
    slot = Column(SQLEnum(SlotPeriod), nullable=False)
    status = Column(SQLEnum(AppointmentStatus), default=AppointmentStatus.PENDING, nullable=False)
    remarks = Column(Text, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")
    schedule = relationship("Schedule", back_populates="appointments")
    patient = relationship("Patient")
    prenatal_info = relationship("PrenatalInfo")
    immunization_info = relationship("ImmunizationInfo")
    queue_entry = relationship("QueueEntry", back_populates="appointment", uselist=False)

    def __repr__(self):
        return f"<Appointment(id={self.id}, user_id={self.user_id}, doctor_id={self.doctor_id}, date='{self.appointment_date}', slot='{self.slot}')>"
