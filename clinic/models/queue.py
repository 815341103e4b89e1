from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base


class QueueStatus(str, enum.Enum):
    PROCESSING = "Processing"
    DONE = "Done"


QUEUE_TRANSITIONS = {
    QueueStatus.PROCESSING: {QueueStatus.DONE},
    QueueStatus.DONE: set(),
}


class QueueEntry(Base):
    """A visit in progress, created when an appointment is approved."""

    __tablename__ = "queue"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=False)
    assigned_to = Column(Integer, ForeignKey("doctors.id"), nullable=True, index=True)
    status = Column(SQLEnum(QueueStatus), default=QueueStatus.PROCESSING, nullable=False)
    processed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="queue_entry")
    doctor = relationship("Doctor")

    def __repr__(self):
        return f"<QueueEntry(id={self.id}, appointment_id={self.appointment_id}, status='{self.status}')>"
