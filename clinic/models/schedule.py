from sqlalchemy import Column, Integer, ForeignKey, Date, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from .appointment import SlotPeriod


class Schedule(Base):
    """A doctor's capacity for one day, split into AM and PM slots."""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    schedule_date = Column(Date, nullable=False, index=True)
    am_max_patients = Column(Integer, nullable=False, default=0)
    pm_max_patients = Column(Integer, nullable=False, default=0)

    # Timestamps; deleted_at marks a soft delete
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    doctor = relationship("Doctor", back_populates="schedules")
    appointments = relationship("Appointment", back_populates="schedule")

    def capacity_for(self, slot) -> int:
        """Maximum number of patients the given slot accepts."""
        return self.am_max_patients if slot == SlotPeriod.AM else self.pm_max_patients

    def __repr__(self):
        return f"<Schedule(id={self.id}, doctor_id={self.doctor_id}, date='{self.schedule_date}')>"
