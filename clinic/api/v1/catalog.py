"""Doctor specialties and the visit purposes offered under them."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_admin_token
from ...models.doctor import Doctor, DoctorSpecialty, DoctorStatus, Purpose
from ...schemas.catalog import (
    SpecialtyCreate, SpecialtyResponse, PurposeCreate, PurposeUpdate, PurposeResponse
)

router = APIRouter(tags=["Catalog"])


def _get_specialty(db: Session, specialty_id: int) -> DoctorSpecialty:
    specialty = db.get(DoctorSpecialty, specialty_id)
    if not specialty:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Specialty not found"
        )
    return specialty


def _get_purpose(db: Session, purpose_id: int) -> Purpose:
    purpose = db.get(Purpose, purpose_id)
    if not purpose:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Purpose not found"
        )
    return purpose


@router.get("/doctor-specialties", response_model=List[SpecialtyResponse])
async def list_specialties(db: Session = Depends(get_db)):
    return db.query(DoctorSpecialty).order_by(DoctorSpecialty.id).all()


@router.get("/doctor-specialties/{specialty_id}", response_model=SpecialtyResponse)
async def get_specialty(specialty_id: int, db: Session = Depends(get_db)):
    return _get_specialty(db, specialty_id)


@router.post("/doctor-specialties", response_model=SpecialtyResponse, status_code=status.HTTP_201_CREATED)
async def create_specialty(
    data: SpecialtyCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    specialty = DoctorSpecialty(**data.model_dump())
    db.add(specialty)
    db.commit()
    db.refresh(specialty)
    return specialty


@router.put("/doctor-specialties/{specialty_id}", response_model=SpecialtyResponse)
async def update_specialty(
    specialty_id: int,
    data: SpecialtyCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    specialty = _get_specialty(db, specialty_id)
    specialty.specialty_name = data.specialty_name
    specialty.description = data.description
    db.commit()
    db.refresh(specialty)
    return specialty


@router.delete("/doctor-specialties/{specialty_id}")
async def delete_specialty(
    specialty_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    specialty = _get_specialty(db, specialty_id)
    if specialty.doctors:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Specialty is still assigned to doctors"
        )
    db.delete(specialty)
    db.commit()
    return {"message": "Specialty deleted successfully"}


@router.get("/purposes", response_model=List[PurposeResponse])
async def list_offered_purposes(db: Session = Depends(get_db)):
    """Purposes that at least one active doctor can currently take."""
    return (
        db.query(Purpose)
        .join(DoctorSpecialty, Purpose.specialty_id == DoctorSpecialty.id)
        .join(Doctor, Doctor.specialization_id == DoctorSpecialty.id)
        .filter(Doctor.status == DoctorStatus.ACTIVE)
        .distinct()
        .order_by(Purpose.id)
        .all()
    )


@router.get("/purposes/specialty/{specialty_id}", response_model=List[PurposeResponse])
async def list_purposes_for_specialty(specialty_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Purpose)
        .filter(Purpose.specialty_id == specialty_id)
        .order_by(Purpose.id)
        .all()
    )


@router.post("/purposes", response_model=PurposeResponse, status_code=status.HTTP_201_CREATED)
async def create_purpose(
    data: PurposeCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    _get_specialty(db, data.specialty_id)
    purpose = Purpose(**data.model_dump())
    db.add(purpose)
    db.commit()
    db.refresh(purpose)
    return purpose


@router.put("/purposes/{purpose_id}", response_model=PurposeResponse)
async def update_purpose(
    purpose_id: int,
    data: PurposeUpdate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    purpose = _get_purpose(db, purpose_id)
    purpose.purpose_name = data.purpose_name
    db.commit()
    db.refresh(purpose)
    return purpose


@router.delete("/purposes/{purpose_id}")
async def delete_purpose(
    purpose_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    db.delete(_get_purpose(db, purpose_id))
    db.commit()
    return {"message": "Purpose deleted successfully"}
