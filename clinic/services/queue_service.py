"""Visit queue: approved appointments waiting for, or done with, a doctor.

Enqueueing approves the appointment; finishing the queue entry marks the
appointment done. Both sides change in one commit.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.queue import QueueEntry, QueueStatus, QUEUE_TRANSITIONS
from ..schemas.queue import QueueCreate, QueueUpdate, QueueItem
from .appointment_service import AppointmentService

logger = logging.getLogger(__name__)


class QueueService:
    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentService(db)

    def get(self, queue_id: int) -> QueueEntry:
        entry = self.db.get(QueueEntry, queue_id)
        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Queue entry not found"
            )
        return entry

    def get_by_appointment(self, appointment_id: int) -> QueueEntry:
        entry = self.db.query(QueueEntry).filter(
            QueueEntry.appointment_id == appointment_id
        ).first()
        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Queue not found for this appointment"
            )
        return entry

    def enqueue(self, data: QueueCreate) -> QueueEntry:
        appointment = self.appointments.get(data.appointment_id)

        if appointment.queue_entry is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Appointment is already in the queue"
            )

        assigned_to = data.assigned_to or appointment.doctor_id
        self._ensure_doctor(assigned_to)

        self.appointments.transition(appointment, AppointmentStatus.APPROVED)
        entry = QueueEntry(
            appointment=appointment,
            assigned_to=assigned_to,
            status=QueueStatus.PROCESSING,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        logger.info(f"Appointment {appointment.id} queued as entry {entry.id} for doctor {assigned_to}")
        return entry

    def update(self, queue_id: int, data: QueueUpdate) -> QueueEntry:
        entry = self.get(queue_id)

        if data.assigned_to is not None and data.assigned_to != entry.assigned_to:
            self._ensure_doctor(data.assigned_to)
            entry.assigned_to = data.assigned_to

        if data.status is not None and data.status != entry.status:
            if data.status not in QUEUE_TRANSITIONS[entry.status]:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Cannot change queue status from {entry.status.value} to {data.status.value}"
                )
            logger.info(f"Queue entry {entry.id}: {entry.status.value} -> {data.status.value}")
            entry.status = data.status
            if data.status == QueueStatus.DONE:
                entry.processed_at = datetime.utcnow()
                self.appointments.transition(entry.appointment, AppointmentStatus.DONE)

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def mark_done(self, queue_id: int) -> QueueEntry:
        entry = self.get(queue_id)
        if entry.status == QueueStatus.DONE:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Queue entry is already Done"
            )
        return self.update(queue_id, QueueUpdate(status=QueueStatus.DONE))

    def remove(self, queue_id: int) -> None:
        """Drop a queue entry; an unfinished visit sends its appointment back to Pending."""
        entry = self.get(queue_id)
        appointment = entry.appointment

        if entry.status != QueueStatus.DONE and appointment.status == AppointmentStatus.APPROVED:
            self.appointments.transition(appointment, AppointmentStatus.PENDING)

        self.db.delete(entry)
        self.db.commit()
        logger.info(f"Queue entry {queue_id} removed")

    def list(self, doctor_id: Optional[int] = None) -> List[QueueItem]:
        """Queue rows, Processing first, newest first within each status."""
        query = self.db.query(QueueEntry).options(
            joinedload(QueueEntry.appointment).joinedload(Appointment.user),
            joinedload(QueueEntry.doctor),
        )
        if doctor_id is not None:
            query = query.filter(QueueEntry.assigned_to == doctor_id)

        processing_first = case((QueueEntry.status == QueueStatus.PROCESSING, 0), else_=1)
        entries = query.order_by(processing_first, QueueEntry.id.desc()).all()
        return [self.item(e) for e in entries]

    @staticmethod
    def item(entry: QueueEntry) -> QueueItem:
        appointment = entry.appointment
        user = appointment.user if appointment else None
        doctor = entry.doctor
        return QueueItem(
            queue_id=entry.id,
            appointment_id=entry.appointment_id,
            queue_status=entry.status,
            processed_at=entry.processed_at,
            appointment_date=appointment.appointment_date if appointment else None,
            purpose_of_appointment=appointment.purpose_of_appointment if appointment else None,
            remarks=appointment.remarks if appointment else None,
            appointment_status=appointment.status if appointment else None,
            user_id=user.id if user else None,
            user_name=user.name if user else None,
            user_email=user.email if user else None,
            user_avatar=user.avatar if user else None,
            doctor_id=doctor.id if doctor else None,
            doctor_name=doctor.name if doctor else None,
            doctor_email=doctor.email if doctor else None,
        )

    def _ensure_doctor(self, doctor_id: int) -> None:
        if not self.db.get(Doctor, doctor_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )
