"""Booking appointments against schedule capacity, and their lifecycle."""
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
import logging

from ..models.appointment import (
    Appointment, AppointmentPurpose, AppointmentStatus, SlotPeriod, can_transition
)
from ..models.patient import Patient, PrenatalInfo, ImmunizationInfo, VitalSigns, Diagnosis
from ..models.user import User
from ..schemas.appointment import (
    AppointmentCreate, AppointmentUpdate, AppointmentSummary, AppointmentsBySlot,
    AppointmentDetail, RemarksRequest
)
from ..schemas.patient import PatientDetails
from .schedule_service import ScheduleService

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def book(self, user: User, data: AppointmentCreate) -> Appointment:
        """Reserve a slot on the doctor's schedule for ``data.selected_date``.

        The schedule row is locked before capacity is counted, so two
        bookings for the last free place cannot both succeed.
        """
        if data.selected_date < date.today():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot book an appointment in the past"
            )

        schedules = ScheduleService(self.db)
        schedule = schedules.find_for_date(data.doctor_id, data.selected_date, lock=True)
        if not schedule:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No available schedule found for the selected doctor and date"
            )

        if schedules.remaining_for_slot(schedule, data.slot_period) <= 0:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"No remaining {data.slot_period.value} slots for this date"
            )

        try:
            appointment = Appointment(
                user_id=user.id,
                doctor_id=data.doctor_id,
                schedule_id=schedule.id,
                purpose_of_appointment=data.purpose,
                appointment_date=data.selected_date,
                slot=data.slot_period,
                status=AppointmentStatus.PENDING,
            )
            if data.purpose == AppointmentPurpose.PRENATAL:
                intake = PrenatalInfo(user_id=user.id, **data.prenatal.model_dump())
                patient = Patient(prenatal_info=intake)
                appointment.prenatal_info = intake
            else:
                intake = ImmunizationInfo(user_id=user.id, **data.immunization.model_dump())
                patient = Patient(immunization_info=intake)
                appointment.immunization_info = intake
            appointment.patient = patient

            self.db.add(appointment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(
            f"Appointment {appointment.id} booked: user {user.id}, doctor {data.doctor_id}, "
            f"{data.selected_date} {data.slot_period.value} ({data.purpose.value})"
        )
        return appointment

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.deleted_at.is_(None)
        ).first()
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )
        return appointment

    def update(self, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        appointment = self.get(appointment_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_status = changes.pop("status", None)
        if new_status is not None and new_status != appointment.status:
            # Queued visits are approved, finished and released by the queue
            if appointment.queue_entry is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Appointment is in the queue; change its status through the queue"
                )
            self.transition(appointment, new_status)

        # Moving to another schedule or slot needs a free place there
        new_schedule_id = changes.get("schedule_id", appointment.schedule_id)
        new_slot = changes.get("slot", appointment.slot)
        if new_schedule_id != appointment.schedule_id or new_slot != appointment.slot:
            schedules = ScheduleService(self.db)
            target = schedules.get(new_schedule_id)
            if schedules.remaining_for_slot(target, new_slot) <= 0:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"No remaining {new_slot.value} slots for this date"
                )
            changes["doctor_id"] = target.doctor_id
            changes["appointment_date"] = target.schedule_date

        for field, value in changes.items():
            setattr(appointment, field, value)

        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def transition(self, appointment: Appointment, new_status: AppointmentStatus) -> None:
        """Move ``appointment`` to ``new_status`` or fail with 409."""
        if not can_transition(appointment.status, new_status):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change appointment status from {appointment.status.value} to {new_status.value}"
            )
        logger.info(f"Appointment {appointment.id}: {appointment.status.value} -> {new_status.value}")
        appointment.status = new_status

    def delete(self, appointment_id: int, pending_only: bool = False) -> None:
        """Soft delete an appointment that has not reached the queue.

        Completed visits are kept for the statistics. With ``pending_only``
        only appointments still awaiting approval may go.
        """
        appointment = self.get(appointment_id)
        if appointment.queue_entry is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Appointment is in the queue; remove it from the queue first"
            )
        if appointment.status == AppointmentStatus.DONE or (
            pending_only and appointment.status != AppointmentStatus.PENDING
        ):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot delete an appointment that is {appointment.status.value}"
            )
        appointment.deleted_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Appointment {appointment_id} deleted")

    def reject(self, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        self.transition(appointment, AppointmentStatus.REJECTED)
        appointment.deleted_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def _active_query(self):
        return (
            self.db.query(Appointment)
            .options(
                joinedload(Appointment.user),
                joinedload(Appointment.doctor),
                joinedload(Appointment.schedule),
            )
            .filter(Appointment.deleted_at.is_(None))
        )

    @staticmethod
    def summary(appointment: Appointment) -> AppointmentSummary:
        user = appointment.user
        return AppointmentSummary(
            appointment_id=appointment.id,
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            avatar=user.avatar,
            address=user.address,
            phone_number=user.phone_number,
            purpose_of_appointment=appointment.purpose_of_appointment,
            appointment_date=appointment.appointment_date,
            status=appointment.status,
            slot=appointment.slot,
        )

    def list_by_slot(self, doctor_id: Optional[int] = None) -> AppointmentsBySlot:
        query = self._active_query()
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)

        grouped = AppointmentsBySlot()
        for appointment in query.order_by(Appointment.appointment_date, Appointment.id).all():
            bucket = grouped.AM if appointment.slot == SlotPeriod.AM else grouped.PM
            bucket.append(self.summary(appointment))
        return grouped

    @staticmethod
    def detail(appointment: Appointment) -> AppointmentDetail:
        user = appointment.user
        doctor = appointment.doctor
        return AppointmentDetail(
            appointment_id=appointment.id,
            status=appointment.status,
            purpose_of_appointment=appointment.purpose_of_appointment,
            appointment_date=appointment.appointment_date,
            slot=appointment.slot,
            user_id=user.id if user else None,
            user_name=user.name if user else None,
            user_email=user.email if user else None,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            doctor_specialty_id=doctor.specialization_id,
            schedule_id=appointment.schedule_id,
            schedule_date=appointment.schedule.schedule_date,
        )

    def list_details(self) -> List[AppointmentDetail]:
        appointments = self._active_query().order_by(Appointment.appointment_date, Appointment.id).all()
        return [self.detail(a) for a in appointments]

    def list_by_user(self, user_id: int) -> List[AppointmentDetail]:
        """A patient's own history, rejected appointments included."""
        appointments = (
            self.db.query(Appointment)
            .options(joinedload(Appointment.doctor), joinedload(Appointment.schedule))
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.appointment_date, Appointment.id)
            .all()
        )
        return [self.detail(a) for a in appointments]

    def add_remarks(self, appointment_id: int, data: RemarksRequest,
                    doctor_id: Optional[int] = None) -> Appointment:
        appointment = self.get(appointment_id)
        appointment.remarks = data.remarks

        if appointment.patient_id is None and (data.vital_signs or data.diagnosis):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Patient not found for this appointment"
            )

        if data.vital_signs:
            self.db.add(VitalSigns(
                patient_id=appointment.patient_id,
                **data.vital_signs.model_dump()
            ))
        if data.diagnosis:
            self.db.add(Diagnosis(
                patient_id=appointment.patient_id,
                diagnosis=data.diagnosis.diagnosis_text,
                doctor_id=data.diagnosis.doctor_id or doctor_id,
            ))

        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def patient_details(self, appointment_id: int) -> PatientDetails:
        """Remarks plus the most recent vital signs and diagnosis."""
        appointment = self.db.get(Appointment, appointment_id)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )

        details = PatientDetails(remarks=appointment.remarks)
        if appointment.patient_id is None:
            return details

        vitals = (
            self.db.query(VitalSigns)
            .filter(VitalSigns.patient_id == appointment.patient_id)
            .order_by(VitalSigns.id.desc())
            .first()
        )
        if vitals:
            details.height = vitals.height
            details.weight = vitals.weight
            details.bp = vitals.bp
            details.blood_type = vitals.blood_type
            details.prescription = vitals.prescription

        diagnosis = (
            self.db.query(Diagnosis)
            .filter(Diagnosis.patient_id == appointment.patient_id)
            .order_by(Diagnosis.id.desc())
            .first()
        )
        if diagnosis:
            details.diagnosis = diagnosis.diagnosis
            details.diagnosis_date = diagnosis.created_at
        return details
