from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ScheduleCreate(BaseModel):
    doctor_id: int
    schedule_date: date
    am_max_patients: int = Field(..., ge=0)
    pm_max_patients: int = Field(..., ge=0)


class ScheduleUpdate(BaseModel):
    schedule_date: Optional[date] = None
    am_max_patients: Optional[int] = Field(None, ge=0)
    pm_max_patients: Optional[int] = Field(None, ge=0)


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    schedule_date: date
    am_max_patients: int
    pm_max_patients: int
    updated_at: Optional[datetime] = None


class ScheduleListItem(ScheduleResponse):
    doctor_name: Optional[str] = None
    doctor_email: Optional[str] = None
    specialization_id: Optional[int] = None
    doctor_specialization: Optional[str] = None


class ScheduleLookup(BaseModel):
    """Answer to "does this doctor already work on that date?"."""

    exists: bool
    schedule: Optional[ScheduleListItem] = None


class SlotAvailability(BaseModel):
    max_patients: int
    booked: int
    remaining_slots: int


class ScheduleAvailability(BaseModel):
    schedule_id: int
    schedule_date: date
    am: SlotAvailability
    pm: SlotAvailability


class RemainingSlots(ScheduleAvailability):
    remaining_slots: int


class ScheduleCreated(BaseModel):
    message: str
    schedule: ScheduleResponse
