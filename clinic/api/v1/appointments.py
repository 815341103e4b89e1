from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload, UserRole
from ...api.deps import (
    get_current_user_token, get_patient_user, get_staff_token, ensure_self_or_staff
)
from ...models.user import User
from ...services.appointment_service import AppointmentService
from ...services.schedule_service import ScheduleService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentUpdate, AppointmentResponse, AppointmentsBySlot,
    AppointmentDetail, RemarksRequest
)
from ...schemas.patient import PatientDetails
from ...schemas.schedule import RemainingSlots

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """Book a slot for the logged-in patient."""
    return AppointmentService(db).book(current_user, appointment_data)


@router.get("", response_model=AppointmentsBySlot)
async def list_appointments(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    """All live appointments split into AM and PM."""
    return AppointmentService(db).list_by_slot()


@router.get("/details", response_model=List[AppointmentDetail])
async def list_appointment_details(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return AppointmentService(db).list_details()


@router.get("/doctor/{doctor_id}", response_model=AppointmentsBySlot)
async def list_doctor_appointments(
    doctor_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return AppointmentService(db).list_by_slot(doctor_id)


@router.get("/user/{user_id}", response_model=List[AppointmentDetail])
async def list_user_appointments(
    user_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    ensure_self_or_staff(token_payload, user_id)
    return AppointmentService(db).list_by_user(user_id)


@router.get("/remaining/{schedule_id}", response_model=RemainingSlots)
async def get_remaining_slots(schedule_id: int, db: Session = Depends(get_db)):
    return ScheduleService(db).remaining_slots(schedule_id)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    appointment = AppointmentService(db).get(appointment_id)
    ensure_self_or_staff(token_payload, appointment.user_id)
    return appointment


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    appointment_data: AppointmentUpdate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return AppointmentService(db).update(appointment_id, appointment_data)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    appointment_service = AppointmentService(db)
    ensure_self_or_staff(token_payload, appointment_service.get(appointment_id).user_id)
    appointment_service.delete(appointment_id, pending_only=not token_payload.is_staff)
    return {"message": "Appointment deleted successfully"}


@router.put("/{appointment_id}/remarks", response_model=AppointmentResponse)
async def add_remarks(
    appointment_id: int,
    remarks_data: RemarksRequest,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_staff_token)
):
    """Record remarks, and optionally vital signs and a diagnosis, for the visit."""
    doctor_id = token_payload.principal_id if token_payload.role == UserRole.DOCTOR else None
    return AppointmentService(db).add_remarks(appointment_id, remarks_data, doctor_id)


@router.put("/{appointment_id}/reject", response_model=AppointmentResponse)
async def reject_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return AppointmentService(db).reject(appointment_id)


@router.get("/{appointment_id}/patient-details", response_model=PatientDetails)
async def get_patient_details(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return AppointmentService(db).patient_details(appointment_id)
