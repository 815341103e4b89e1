"""Doctor schedules and the AM/PM capacity arithmetic built on them."""
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
import logging

from ..models.appointment import Appointment, AppointmentStatus, SlotPeriod
from ..models.doctor import Doctor
from ..models.schedule import Schedule
from ..schemas.schedule import (
    ScheduleCreate, ScheduleUpdate, ScheduleListItem, ScheduleAvailability,
    SlotAvailability, RemainingSlots
)

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, data: ScheduleCreate) -> Schedule:
        if not self.db.get(Doctor, data.doctor_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )
        if self.find_for_date(data.doctor_id, data.schedule_date):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A schedule already exists for this doctor and date."
            )

        schedule = Schedule(
            doctor_id=data.doctor_id,
            schedule_date=data.schedule_date,
            am_max_patients=data.am_max_patients,
            pm_max_patients=data.pm_max_patients,
        )
        self.db.add(schedule)
        self.db.commit()
        self.db.refresh(schedule)

        logger.info(
            f"Schedule {schedule.id} created for doctor {schedule.doctor_id} on "
            f"{schedule.schedule_date} (AM {schedule.am_max_patients}, PM {schedule.pm_max_patients})"
        )
        return schedule

    def get(self, schedule_id: int) -> Schedule:
        schedule = self.db.query(Schedule).filter(
            Schedule.id == schedule_id,
            Schedule.deleted_at.is_(None)
        ).first()
        if not schedule:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Schedule not found"
            )
        return schedule

    def find_for_date(self, doctor_id: int, schedule_date: date, lock: bool = False) -> Optional[Schedule]:
        """Return the doctor's live schedule for ``schedule_date``, if any.

        With ``lock`` the row stays locked until the caller commits, which
        serialises concurrent bookings against the same day.
        """
        query = self.db.query(Schedule).filter(
            Schedule.doctor_id == doctor_id,
            Schedule.schedule_date == schedule_date,
            Schedule.deleted_at.is_(None)
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    def list(self, doctor_id: Optional[int] = None) -> List[ScheduleListItem]:
        query = (
            self.db.query(Schedule)
            .options(joinedload(Schedule.doctor).joinedload(Doctor.specialty))
            .filter(Schedule.deleted_at.is_(None))
        )
        if doctor_id is not None:
            query = query.filter(Schedule.doctor_id == doctor_id)
        return [self.list_item(s) for s in query.order_by(Schedule.schedule_date).all()]

    @staticmethod
    def list_item(schedule: Schedule) -> ScheduleListItem:
        doctor = schedule.doctor
        return ScheduleListItem(
            id=schedule.id,
            doctor_id=schedule.doctor_id,
            schedule_date=schedule.schedule_date,
            am_max_patients=schedule.am_max_patients,
            pm_max_patients=schedule.pm_max_patients,
            updated_at=schedule.updated_at,
            doctor_name=doctor.name if doctor else None,
            doctor_email=doctor.email if doctor else None,
            specialization_id=doctor.specialization_id if doctor else None,
            doctor_specialization=doctor.specialty_name if doctor else None,
        )

    def update(self, schedule_id: int, data: ScheduleUpdate) -> Schedule:
        schedule = self.get(schedule_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_date = changes.get("schedule_date")
        if new_date and new_date != schedule.schedule_date:
            if self.find_for_date(schedule.doctor_id, new_date):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A schedule already exists for this doctor and date."
                )

        booked = self.booked_counts([schedule.id]).get(schedule.id, {})
        for slot, field in ((SlotPeriod.AM, "am_max_patients"), (SlotPeriod.PM, "pm_max_patients")):
            if field in changes and changes[field] < booked.get(slot, 0):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"{slot.value} capacity cannot drop below {booked[slot]} booked appointments"
                )

        for field, value in changes.items():
            setattr(schedule, field, value)

        # Booked appointments follow their schedule to the new day
        if new_date:
            self.db.query(Appointment).filter(
                Appointment.schedule_id == schedule.id,
                Appointment.deleted_at.is_(None)
            ).update({Appointment.appointment_date: new_date}, synchronize_session=False)
        self.db.commit()
        self.db.refresh(schedule)
        return schedule

    def delete(self, schedule_id: int) -> None:
        schedule = self.get(schedule_id)
        open_appointments = self.db.query(Appointment).filter(
            Appointment.schedule_id == schedule.id,
            Appointment.deleted_at.is_(None),
            Appointment.status.in_([AppointmentStatus.PENDING, AppointmentStatus.APPROVED])
        ).count()
        if open_appointments:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Schedule still has {open_appointments} open appointments"
            )

        schedule.deleted_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Schedule {schedule.id} deleted")

    def booked_counts(self, schedule_ids: List[int]) -> Dict[int, Dict[SlotPeriod, int]]:
        """Count live appointments per schedule and slot.

        Rejected appointments are soft deleted, so they free their slot.
        """
        if not schedule_ids:
            return {}
        rows = (
            self.db.query(Appointment.schedule_id, Appointment.slot, func.count(Appointment.id))
            .filter(
                Appointment.schedule_id.in_(schedule_ids),
                Appointment.deleted_at.is_(None)
            )
            .group_by(Appointment.schedule_id, Appointment.slot)
            .all()
        )
        counts: Dict[int, Dict[SlotPeriod, int]] = {}
        for schedule_id, slot, total in rows:
            counts.setdefault(schedule_id, {})[slot] = total
        return counts

    def remaining_for_slot(self, schedule: Schedule, slot: SlotPeriod) -> int:
        booked = self.booked_counts([schedule.id]).get(schedule.id, {}).get(slot, 0)
        return max(schedule.capacity_for(slot) - booked, 0)

    def availability(self, schedule: Schedule, booked: Dict[SlotPeriod, int]) -> ScheduleAvailability:
        def slot_view(slot: SlotPeriod) -> SlotAvailability:
            capacity = schedule.capacity_for(slot)
            taken = booked.get(slot, 0)
            return SlotAvailability(
                max_patients=capacity,
                booked=taken,
                remaining_slots=max(capacity - taken, 0)
            )

        return ScheduleAvailability(
            schedule_id=schedule.id,
            schedule_date=schedule.schedule_date,
            am=slot_view(SlotPeriod.AM),
            pm=slot_view(SlotPeriod.PM),
        )

    def available_slots(self, doctor_id: int) -> List[ScheduleAvailability]:
        schedules = self.db.query(Schedule).filter(
            Schedule.doctor_id == doctor_id,
            Schedule.deleted_at.is_(None)
        ).order_by(Schedule.schedule_date).all()

        counts = self.booked_counts([s.id for s in schedules])
        return [self.availability(s, counts.get(s.id, {})) for s in schedules]

    def remaining_slots(self, schedule_id: int) -> RemainingSlots:
        schedule = self.get(schedule_id)
        view = self.availability(schedule, self.booked_counts([schedule.id]).get(schedule.id, {}))
        return RemainingSlots(
            **view.model_dump(),
            remaining_slots=view.am.remaining_slots + view.pm.remaining_slots
        )
