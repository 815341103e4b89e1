import os
from datetime import date, timedelta

# Must be set before the app (and its settings) are imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_MAX_REQUESTS"] = "1000"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from clinic.main import app
from clinic.core.database import Base, engine, get_db, get_redis
from clinic import models  # noqa: F401

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeRedis:
    """The few Redis commands the login throttle uses, kept in a dict."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, seconds, value):
        self.store[key] = str(value)
        return True

    def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value


@pytest.fixture
def fake_redis():
    fake = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_redis, None)


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db, fake_redis):
    # Entering the client runs startup, which seeds the default admin
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


# Test data
tomorrow = date.today() + timedelta(days=1)

patient_data = {
    "name": "Maria Santos",
    "email": "maria@example.com",
    "password": "Patient1234",
    "address": "12 Rizal St",
    "phone": "09171234567",
    "birthday": "1995-04-12"
}

doctor_data = {
    "name": "Dr. Ana Cruz",
    "email": "ana.cruz@example.com",
    "password": "Doctor123",
    "birthdate": "1980-02-03",
    "address": "1 Clinic Rd",
    "phone_number": "09179876543"
}

admin_login_data = {
    "email": "admin@example.com",
    "password": "password123"
}


def prenatal_booking(doctor_id, selected_date=tomorrow, slot="AM"):
    return {
        "doctor_id": doctor_id,
        "selected_date": selected_date.isoformat(),
        "slot_period": slot,
        "purpose": "Prenatal",
        "prenatal": {
            "name": "Maria Santos",
            "age": 29,
            "address": "12 Rizal St",
            "occupation": "Teacher",
            "husband_name": "Jose Santos",
            "husband_age": 31
        }
    }


def immunization_booking(doctor_id, selected_date=tomorrow, slot="PM"):
    return {
        "doctor_id": doctor_id,
        "selected_date": selected_date.isoformat(),
        "slot_period": slot,
        "purpose": "Immunization",
        "immunization": {
            "child_name": "Lito Santos",
            "birthdate": "2024-01-20",
            "sex": "M",
            "birth_weight": 3.1
        }
    }


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/v1/auth/admin/login", json=admin_login_data)
    assert response.status_code == 200
    return auth_headers(response.json()["access_token"])


@pytest.fixture
def patient(client):
    """Register the test patient; returns the token response body."""
    response = client.post("/api/v1/auth/register", json=patient_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def patient_headers(patient):
    return auth_headers(patient["access_token"])


@pytest.fixture
def specialty(client, admin_headers):
    response = client.post(
        "/api/v1/doctor-specialties",
        json={"specialty_name": "Obstetrics", "description": "Prenatal care"},
        headers=admin_headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def doctor(client, specialty):
    response = client.post(
        "/api/v1/doctors/register",
        json={**doctor_data, "specialization_id": specialty["id"]}
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def doctor_headers(client, doctor):
    response = client.post(
        "/api/v1/auth/doctor/login",
        json={"email": doctor_data["email"], "password": doctor_data["password"]}
    )
    assert response.status_code == 200
    return auth_headers(response.json()["access_token"])


@pytest.fixture
def schedule(client, doctor, doctor_headers):
    """Tomorrow's schedule: one AM place, two PM places."""
    response = client.post(
        "/api/v1/schedules",
        json={
            "doctor_id": doctor["id"],
            "schedule_date": tomorrow.isoformat(),
            "am_max_patients": 1,
            "pm_max_patients": 2
        },
        headers=doctor_headers
    )
    assert response.status_code == 201
    return response.json()["schedule"]


@pytest.fixture
def appointment(client, doctor, schedule, patient_headers):
    response = client.post(
        "/api/v1/appointments",
        json=prenatal_booking(doctor["id"]),
        headers=patient_headers
    )
    assert response.status_code == 201
    return response.json()
