from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..models.appointment import AppointmentPurpose, AppointmentStatus
from ..models.queue import QueueStatus


class QueueCreate(BaseModel):
    appointment_id: int
    assigned_to: Optional[int] = None


class QueueUpdate(BaseModel):
    status: Optional[QueueStatus] = None
    assigned_to: Optional[int] = None


class QueueEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int
    assigned_to: Optional[int] = None
    status: QueueStatus
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class QueueItem(BaseModel):
    """A queue entry joined with its appointment, patient and doctor."""

    queue_id: int
    appointment_id: int
    queue_status: QueueStatus
    processed_at: Optional[datetime] = None
    appointment_date: Optional[date] = None
    purpose_of_appointment: Optional[AppointmentPurpose] = None
    remarks: Optional[str] = None
    appointment_status: Optional[AppointmentStatus] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_avatar: Optional[str] = None
    doctor_id: Optional[int] = None
    doctor_name: Optional[str] = None
    doctor_email: Optional[str] = None
