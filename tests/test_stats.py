from datetime import date, timedelta

from clinic.models import Appointment, AppointmentPurpose, AppointmentStatus, SlotPeriod
from clinic.services.stats_service import StatsService, DAYS_OF_WEEK
from .conftest import immunization_booking


class TestClinicStats:

    def test_stats_counts(self, client, doctor, appointment, patient_headers, admin_headers):
        client.post("/api/v1/appointments", json=immunization_booking(doctor["id"]), headers=patient_headers)

        response = client.get("/api/v1/stats", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {
            "totalAppointments": 2,
            "activeDoctors": 1,
            "totalPatients": 1,
            "pendingAppointments": 2
        }

    def test_stats_exclude_rejected(self, client, appointment, admin_headers):
        client.put(f"/api/v1/appointments/{appointment['id']}/reject", headers=admin_headers)

        data = client.get("/api/v1/stats", headers=admin_headers).json()
        assert data["totalAppointments"] == 0
        assert data["pendingAppointments"] == 0

    def test_stats_admin_only(self, client, doctor_headers):
        response = client.get("/api/v1/stats", headers=doctor_headers)
        assert response.status_code == 403

    def test_doctor_stats(self, client, doctor, appointment, doctor_headers):
        response = client.get("/api/v1/stats/doctor", params={"doctorId": doctor["id"]}, headers=doctor_headers)
        assert response.status_code == 200
        assert response.json()["totalAppointments"] == 1

        response = client.get("/api/v1/stats/doctor", params={"doctorId": 999}, headers=doctor_headers)
        assert response.json()["totalAppointments"] == 0
        assert response.json()["activeDoctors"] == 0

    def test_doctor_stats_requires_doctor_id(self, client, doctor_headers):
        response = client.get("/api/v1/stats/doctor", headers=doctor_headers)
        assert response.status_code == 422


class TestWeeklyStats:

    def test_weekly_shape(self, client, doctor_headers):
        response = client.get("/api/v1/stats/weekly", headers=doctor_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["data"]["id"] == "Appointments"
        assert data["data"]["color"] == "hsl(217, 70%, 50%)"
        assert [d["x"] for d in data["data"]["data"]] == DAYS_OF_WEEK
        assert all(d["y"] == 0 for d in data["data"]["data"])

    def test_weekly_counts_pending_by_weekday(self, db_session, doctor, schedule, patient):
        # A fixed Wednesday; Monday..Sunday is 2024-05-13..2024-05-19
        today = date(2024, 5, 15)
        dates = [date(2024, 5, 13), date(2024, 5, 13), date(2024, 5, 19), date(2024, 5, 20)]
        for day in dates:
            db_session.add(Appointment(
                user_id=patient["profile"]["id"],
                doctor_id=doctor["id"],
                schedule_id=schedule["id"],
                purpose_of_appointment=AppointmentPurpose.PRENATAL,
                appointment_date=day,
                slot=SlotPeriod.AM,
                status=AppointmentStatus.PENDING,
            ))
        db_session.add(Appointment(
            user_id=patient["profile"]["id"],
            doctor_id=doctor["id"],
            schedule_id=schedule["id"],
            purpose_of_appointment=AppointmentPurpose.PRENATAL,
            appointment_date=date(2024, 5, 14),
            slot=SlotPeriod.PM,
            status=AppointmentStatus.APPROVED,
        ))
        db_session.commit()

        weekly = StatsService(db_session).weekly_pending(today=today)
        counts = {d.x: d.y for d in weekly.data.data}
        assert counts == {
            "Monday": 2, "Tuesday": 0, "Wednesday": 0, "Thursday": 0,
            "Friday": 0, "Saturday": 0, "Sunday": 1,
        }

    def test_weekly_counts_todays_booking(self, client, doctor, doctor_headers, patient_headers):
        today = date.today()
        client.post("/api/v1/schedules", json={
            "doctor_id": doctor["id"],
            "schedule_date": today.isoformat(),
            "am_max_patients": 2,
            "pm_max_patients": 2
        }, headers=doctor_headers)
        client.post(
            "/api/v1/appointments",
            json=immunization_booking(doctor["id"], selected_date=today),
            headers=patient_headers
        )

        data = client.get("/api/v1/stats/weekly", headers=doctor_headers).json()
        counts = {d["x"]: d["y"] for d in data["data"]["data"]}
        assert counts[DAYS_OF_WEEK[today.weekday()]] == 1
        assert sum(counts.values()) == 1

    def test_weekly_requires_staff(self, client, patient_headers):
        response = client.get("/api/v1/stats/weekly", headers=patient_headers)
        assert response.status_code == 403


def test_days_of_week_start_monday():
    monday = date(2024, 5, 13)
    assert [DAYS_OF_WEEK[(monday + timedelta(days=i)).weekday()] for i in range(7)] == DAYS_OF_WEEK
