from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
import logging

from ..core.security import get_password_hash
from ..models.doctor import Doctor, DoctorSpecialty, DoctorStatus, Purpose
from ..models.schedule import Schedule
from ..schemas.account import DoctorRegister, DoctorUpdate, DoctorListItem, DoctorResponse

logger = logging.getLogger(__name__)


class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, data: DoctorRegister) -> Doctor:
        existing = self.db.query(Doctor).filter(Doctor.email == data.email).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Doctor already exists"
            )
        self._ensure_specialty(data.specialization_id)

        doctor = Doctor(
            name=data.name,
            email=data.email,
            password_hash=get_password_hash(data.password),
            birthdate=data.birthdate,
            address=data.address,
            specialization_id=data.specialization_id,
            phone_number=data.phone_number,
            status=DoctorStatus.ACTIVE,
        )
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Registered doctor {doctor.id} <{doctor.email}>")
        return doctor

    def get(self, doctor_id: int) -> Doctor:
        doctor = self.db.get(Doctor, doctor_id)
        if not doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )
        return doctor

    def update_profile(self, doctor_id: int, data: DoctorUpdate) -> Doctor:
        doctor = self.get(doctor_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != doctor.email:
            clash = self.db.query(Doctor).filter(Doctor.email == changes["email"]).first()
            if clash:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already in use"
                )
        if "specialization_id" in changes:
            self._ensure_specialty(changes["specialization_id"])

        password = changes.pop("password", None)
        if password:
            doctor.password_hash = get_password_hash(password)
        for field, value in changes.items():
            setattr(doctor, field, value)

        self.db.commit()
        self.db.refresh(doctor)
        return doctor

    def list_with_status(self) -> List[DoctorListItem]:
        """List doctors, first bringing each status in line with its schedules.

        A doctor with at least one live schedule is active, any other
        doctor is inactive.
        """
        schedule_counts = dict(
            self.db.query(Schedule.doctor_id, func.count(Schedule.id))
            .filter(Schedule.deleted_at.is_(None))
            .group_by(Schedule.doctor_id)
            .all()
        )
        doctors = (
            self.db.query(Doctor)
            .options(joinedload(Doctor.specialty))
            .order_by(Doctor.id)
            .all()
        )

        changed = False
        for doctor in doctors:
            expected = (
                DoctorStatus.ACTIVE if schedule_counts.get(doctor.id, 0) > 0
                else DoctorStatus.INACTIVE
            )
            if doctor.status != expected:
                logger.info(f"Doctor {doctor.id} status {doctor.status.value} -> {expected.value}")
                doctor.status = expected
                changed = True
        if changed:
            self.db.commit()

        return [
            DoctorListItem(
                **DoctorResponse.model_validate(doctor).model_dump(),
                active_schedule_count=schedule_counts.get(doctor.id, 0),
            )
            for doctor in doctors
        ]

    def list_by_purpose(self, purpose_id: int) -> List[Doctor]:
        return (
            self.db.query(Doctor)
            .join(DoctorSpecialty, Doctor.specialization_id == DoctorSpecialty.id)
            .join(Purpose, Purpose.specialty_id == DoctorSpecialty.id)
            .filter(Purpose.id == purpose_id)
            .order_by(Doctor.id)
            .all()
        )

    def _ensure_specialty(self, specialty_id: int) -> None:
        if not self.db.get(DoctorSpecialty, specialty_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Specialty not found"
            )
