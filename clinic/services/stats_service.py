from collections import Counter
from datetime import date, timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor, DoctorStatus
from ..schemas.stats import ClinicStats, DayCount, WeeklySeries, WeeklyStats

DAYS_OF_WEEK = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
]


class StatsService:
    def __init__(self, db: Session):
        self.db = db

    def clinic_stats(self, doctor_id: Optional[int] = None) -> ClinicStats:
        """Dashboard counters, for the whole clinic or a single doctor."""
        appointments = self.db.query(Appointment).filter(Appointment.deleted_at.is_(None))
        doctors = self.db.query(Doctor).filter(Doctor.status == DoctorStatus.ACTIVE)
        if doctor_id is not None:
            appointments = appointments.filter(Appointment.doctor_id == doctor_id)
            doctors = doctors.filter(Doctor.id == doctor_id)

        total_patients = appointments.with_entities(
            func.count(func.distinct(Appointment.user_id))
        ).scalar()

        return ClinicStats(
            total_appointments=appointments.count(),
            active_doctors=doctors.count(),
            total_patients=total_patients or 0,
            pending_appointments=appointments.filter(
                Appointment.status == AppointmentStatus.PENDING
            ).count(),
        )

    def weekly_pending(self, today: Optional[date] = None) -> WeeklyStats:
        """Pending appointments per weekday of the current Monday-based week."""
        today = today or date.today()
        monday = today - timedelta(days=today.weekday())
        sunday = monday + timedelta(days=6)

        dates = self.db.query(Appointment.appointment_date).filter(
            Appointment.deleted_at.is_(None),
            Appointment.status == AppointmentStatus.PENDING,
            Appointment.appointment_date >= monday,
            Appointment.appointment_date <= sunday,
        ).all()
        per_day = Counter(DAYS_OF_WEEK[d.weekday()] for (d,) in dates)

        return WeeklyStats(
            data=WeeklySeries(data=[DayCount(x=day, y=per_day.get(day, 0)) for day in DAYS_OF_WEEK])
        )
