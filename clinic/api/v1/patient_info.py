"""Intake records captured at booking time."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_user_token, get_staff_token, ensure_self_or_staff
from ...models.appointment import Appointment
from ...models.patient import PrenatalInfo, ImmunizationInfo
from ...schemas.patient import (
    PrenatalForm, PrenatalInfoCreate, PrenatalInfoResponse, ImmunizationInfoResponse
)

router = APIRouter(tags=["Patient records"])


def _get_prenatal(db: Session, prenatal_id: int) -> PrenatalInfo:
    prenatal = db.get(PrenatalInfo, prenatal_id)
    if not prenatal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prenatal info not found"
        )
    return prenatal


@router.get("/prenatal-info/{prenatal_id}", response_model=PrenatalInfoResponse)
async def get_prenatal_info(
    prenatal_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return _get_prenatal(db, prenatal_id)


@router.post("/prenatal-info", response_model=PrenatalInfoResponse, status_code=status.HTTP_201_CREATED)
async def create_prenatal_info(
    prenatal_data: PrenatalInfoCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    prenatal = PrenatalInfo(**prenatal_data.model_dump())
    db.add(prenatal)
    db.commit()
    db.refresh(prenatal)
    return prenatal


@router.put("/prenatal-info/{prenatal_id}", response_model=PrenatalInfoResponse)
async def update_prenatal_info(
    prenatal_id: int,
    prenatal_data: PrenatalForm,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    prenatal = _get_prenatal(db, prenatal_id)
    for field, value in prenatal_data.model_dump().items():
        setattr(prenatal, field, value)
    db.commit()
    db.refresh(prenatal)
    return prenatal


@router.delete("/prenatal-info/{prenatal_id}")
async def delete_prenatal_info(
    prenatal_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    prenatal = _get_prenatal(db, prenatal_id)
    if db.query(Appointment).filter(Appointment.prenatal_id == prenatal.id).count():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Prenatal info is attached to an appointment"
        )
    db.delete(prenatal)
    db.commit()
    return {"message": "Prenatal info deleted successfully"}


@router.get("/immunization-info/user/{user_id}", response_model=List[ImmunizationInfoResponse])
async def list_user_immunization_info(
    user_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    ensure_self_or_staff(token_payload, user_id)
    return (
        db.query(ImmunizationInfo)
        .filter(ImmunizationInfo.user_id == user_id)
        .order_by(ImmunizationInfo.id)
        .all()
    )


@router.get("/immunizations", response_model=List[ImmunizationInfoResponse])
async def list_immunizations(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return db.query(ImmunizationInfo).order_by(ImmunizationInfo.id).all()
