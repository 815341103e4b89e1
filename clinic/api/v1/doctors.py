from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_user_token, ensure_doctor_self_or_admin
from ...services.doctor_service import DoctorService
from ...schemas.account import DoctorRegister, DoctorResponse, DoctorUpdate, DoctorListItem

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.post("/register", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def register_doctor(
    doctor_data: DoctorRegister,
    db: Session = Depends(get_db)
):
    return DoctorService(db).register(doctor_data)


@router.get("", response_model=List[DoctorListItem])
async def list_doctors(db: Session = Depends(get_db)):
    """All doctors with their specialty and live schedule count."""
    return DoctorService(db).list_with_status()


@router.get("/purpose/{purpose_id}", response_model=List[DoctorResponse])
async def list_doctors_by_purpose(
    purpose_id: int,
    db: Session = Depends(get_db)
):
    return DoctorService(db).list_by_purpose(purpose_id)


@router.get("/{doctor_id}/profile", response_model=DoctorResponse)
async def get_doctor_profile(
    doctor_id: int,
    db: Session = Depends(get_db)
):
    return DoctorService(db).get(doctor_id)


@router.put("/{doctor_id}/profile", response_model=DoctorResponse)
async def update_doctor_profile(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    ensure_doctor_self_or_admin(token_payload, doctor_id)
    return DoctorService(db).update_profile(doctor_id, doctor_data)
