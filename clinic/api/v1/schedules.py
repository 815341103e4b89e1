from datetime import date
from typing import List, Optional, Union
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_staff_token, ensure_doctor_self_or_admin
from ...services.schedule_service import ScheduleService
from ...schemas.schedule import (
    ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleListItem,
    ScheduleLookup, ScheduleAvailability, ScheduleCreated
)

router = APIRouter(prefix="/schedules", tags=["Schedules"])


@router.post("", response_model=ScheduleCreated, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_data: ScheduleCreate,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_staff_token)
):
    ensure_doctor_self_or_admin(token_payload, schedule_data.doctor_id)
    schedule = ScheduleService(db).create(schedule_data)
    return ScheduleCreated(
        message="Schedule created successfully",
        schedule=ScheduleResponse.model_validate(schedule)
    )


@router.get("", response_model=List[ScheduleListItem])
async def list_schedules(db: Session = Depends(get_db)):
    return ScheduleService(db).list()


@router.get("/available-slots", response_model=List[ScheduleAvailability])
async def get_available_slots(
    doctor_id: int = Query(..., alias="doctorId"),
    db: Session = Depends(get_db)
):
    """Per-day AM/PM capacity left on a doctor's schedules."""
    return ScheduleService(db).available_slots(doctor_id)


@router.get("/doctor/{doctor_id}", response_model=Union[ScheduleLookup, List[ScheduleListItem]])
async def list_doctor_schedules(
    doctor_id: int,
    schedule_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """A doctor's schedules, or whether one exists on ``date`` when given."""
    schedule_service = ScheduleService(db)
    if schedule_date is None:
        return schedule_service.list(doctor_id)

    schedule = schedule_service.find_for_date(doctor_id, schedule_date)
    if schedule is None:
        return ScheduleLookup(exists=False)
    return ScheduleLookup(exists=True, schedule=schedule_service.list_item(schedule))


@router.get("/{schedule_id}", response_model=ScheduleListItem)
async def get_schedule(schedule_id: int, db: Session = Depends(get_db)):
    schedule_service = ScheduleService(db)
    return schedule_service.list_item(schedule_service.get(schedule_id))


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    schedule_data: ScheduleUpdate,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_staff_token)
):
    schedule_service = ScheduleService(db)
    ensure_doctor_self_or_admin(token_payload, schedule_service.get(schedule_id).doctor_id)
    return schedule_service.update(schedule_id, schedule_data)


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_staff_token)
):
    schedule_service = ScheduleService(db)
    ensure_doctor_self_or_admin(token_payload, schedule_service.get(schedule_id).doctor_id)
    schedule_service.delete(schedule_id)
    return {"message": "Schedule deleted successfully"}
