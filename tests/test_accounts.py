from .conftest import patient_data, doctor_data, tomorrow


class TestUsers:

    def test_list_users_admin_only(self, client, patient, patient_headers, admin_headers):
        response = client.get("/api/v1/users", headers=patient_headers)
        assert response.status_code == 403

        response = client.get("/api/v1/users", headers=admin_headers)
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == [patient_data["email"]]

    def test_list_users_empty(self, client, admin_headers):
        response = client.get("/api/v1/users", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_get_own_profile(self, client, patient, patient_headers):
        user_id = patient["profile"]["id"]
        response = client.get(f"/api/v1/users/{user_id}", headers=patient_headers)
        assert response.status_code == 200
        assert response.json()["name"] == patient_data["name"]

    def test_patient_cannot_read_other_user(self, client, patient, patient_headers):
        other = client.post("/api/v1/auth/register", json={
            **patient_data, "email": "other@example.com"
        }).json()

        response = client.get(f"/api/v1/users/{other['profile']['id']}", headers=patient_headers)
        assert response.status_code == 403

    def test_staff_can_read_any_user(self, client, patient, doctor_headers):
        response = client.get(f"/api/v1/users/{patient['profile']['id']}", headers=doctor_headers)
        assert response.status_code == 200

    def test_get_missing_user(self, client, admin_headers):
        response = client.get("/api/v1/users/999", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_update_profile(self, client, patient, patient_headers):
        user_id = patient["profile"]["id"]
        response = client.put(
            f"/api/v1/users/{user_id}",
            json={"address": "99 Mabini St", "phone": "09990000000", "birthday": "1995-05-01"},
            headers=patient_headers
        )
        assert response.status_code == 200

        data = response.json()
        assert data["address"] == "99 Mabini St"
        assert data["phone_number"] == "09990000000"
        assert data["birthdate"] == "1995-05-01"
        assert data["email"] == patient_data["email"]

    def test_update_email_clash(self, client, patient, patient_headers):
        client.post("/api/v1/auth/register", json={**patient_data, "email": "taken@example.com"})

        response = client.put(
            f"/api/v1/users/{patient['profile']['id']}",
            json={"email": "taken@example.com"},
            headers=patient_headers
        )
        assert response.status_code == 400

    def test_doctor_cannot_edit_patient(self, client, patient, doctor_headers):
        response = client.put(
            f"/api/v1/users/{patient['profile']['id']}",
            json={"name": "Changed"},
            headers=doctor_headers
        )
        assert response.status_code == 403


class TestDoctors:

    def test_register_doctor(self, client, specialty):
        response = client.post(
            "/api/v1/doctors/register",
            json={**doctor_data, "specialization_id": specialty["id"]}
        )
        assert response.status_code == 201

        data = response.json()
        assert data["status"] == "active"
        assert data["specialty_name"] == specialty["specialty_name"]
        assert "password_hash" not in data

    def test_register_duplicate_doctor(self, client, doctor, specialty):
        response = client.post(
            "/api/v1/doctors/register",
            json={**doctor_data, "specialization_id": specialty["id"]}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Doctor already exists"

    def test_register_unknown_specialty(self, client, test_db):
        response = client.post(
            "/api/v1/doctors/register",
            json={**doctor_data, "specialization_id": 42}
        )
        assert response.status_code == 404

    def test_register_short_password(self, client, specialty):
        response = client.post(
            "/api/v1/doctors/register",
            json={**doctor_data, "password": "123", "specialization_id": specialty["id"]}
        )
        assert response.status_code == 422

    def test_list_syncs_status_with_schedules(self, client, doctor, doctor_headers):
        """A doctor without live schedules is listed as inactive."""
        response = client.get("/api/v1/doctors")
        assert response.status_code == 200
        listed = response.json()[0]
        assert listed["status"] == "inactive"
        assert listed["active_schedule_count"] == 0

        client.post("/api/v1/schedules", json={
            "doctor_id": doctor["id"],
            "schedule_date": tomorrow.isoformat(),
            "am_max_patients": 3,
            "pm_max_patients": 3
        }, headers=doctor_headers)

        listed = client.get("/api/v1/doctors").json()[0]
        assert listed["status"] == "active"
        assert listed["active_schedule_count"] == 1

    def test_list_by_purpose(self, client, doctor, specialty, admin_headers):
        purpose = client.post(
            "/api/v1/purposes",
            json={"specialty_id": specialty["id"], "purpose_name": "Prenatal"},
            headers=admin_headers
        ).json()

        response = client.get(f"/api/v1/doctors/purpose/{purpose['id']}")
        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [doctor["id"]]

    def test_update_own_profile(self, client, doctor, doctor_headers):
        response = client.put(
            f"/api/v1/doctors/{doctor['id']}/profile",
            json={"address": "2 Clinic Rd", "password": "NewDoctor123"},
            headers=doctor_headers
        )
        assert response.status_code == 200
        assert response.json()["address"] == "2 Clinic Rd"

        response = client.post("/api/v1/auth/doctor/login", json={
            "email": doctor_data["email"],
            "password": "NewDoctor123"
        })
        assert response.status_code == 200

    def test_cannot_update_other_doctor(self, client, doctor, specialty, doctor_headers):
        other = client.post("/api/v1/doctors/register", json={
            **doctor_data, "email": "other.doc@example.com", "specialization_id": specialty["id"]
        }).json()

        response = client.put(
            f"/api/v1/doctors/{other['id']}/profile",
            json={"name": "Changed"},
            headers=doctor_headers
        )
        assert response.status_code == 403

    def test_get_missing_doctor(self, client, test_db):
        response = client.get("/api/v1/doctors/999/profile")
        assert response.status_code == 404


class TestAdmins:

    def test_get_and_update_admin_profile(self, client, admin_headers):
        me = client.get("/api/v1/auth/me", headers=admin_headers).json()

        response = client.put(
            f"/api/v1/admins/{me['id']}/profile",
            json={"name": "Head Admin"},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Head Admin"

        response = client.get(f"/api/v1/admins/{me['id']}/profile", headers=admin_headers)
        assert response.json()["name"] == "Head Admin"

    def test_admin_profile_requires_admin(self, client, patient_headers):
        response = client.get("/api/v1/admins/1/profile", headers=patient_headers)
        assert response.status_code == 403


class TestCatalog:

    def test_specialty_crud(self, client, admin_headers):
        created = client.post(
            "/api/v1/doctor-specialties",
            json={"specialty_name": "Pediatrics"},
            headers=admin_headers
        )
        assert created.status_code == 201
        specialty_id = created.json()["id"]

        response = client.put(
            f"/api/v1/doctor-specialties/{specialty_id}",
            json={"specialty_name": "Pediatrics", "description": "Children"},
            headers=admin_headers
        )
        assert response.json()["description"] == "Children"

        assert client.get(f"/api/v1/doctor-specialties/{specialty_id}").status_code == 200

        response = client.delete(f"/api/v1/doctor-specialties/{specialty_id}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/v1/doctor-specialties/{specialty_id}").status_code == 404

    def test_specialty_name_required(self, client, admin_headers):
        response = client.post("/api/v1/doctor-specialties", json={}, headers=admin_headers)
        assert response.status_code == 422

    def test_specialty_writes_admin_only(self, client, doctor_headers):
        response = client.post(
            "/api/v1/doctor-specialties",
            json={"specialty_name": "Surgery"},
            headers=doctor_headers
        )
        assert response.status_code == 403

    def test_cannot_delete_specialty_in_use(self, client, doctor, specialty, admin_headers):
        response = client.delete(f"/api/v1/doctor-specialties/{specialty['id']}", headers=admin_headers)
        assert response.status_code == 409

    def test_purposes_offered_by_active_doctors(self, client, specialty, admin_headers):
        client.post(
            "/api/v1/purposes",
            json={"specialty_id": specialty["id"], "purpose_name": "Prenatal"},
            headers=admin_headers
        )

        # No doctor practises the specialty yet
        assert client.get("/api/v1/purposes").json() == []

        client.post("/api/v1/doctors/register", json={**doctor_data, "specialization_id": specialty["id"]})
        names = [p["purpose_name"] for p in client.get("/api/v1/purposes").json()]
        assert names == ["Prenatal"]

    def test_purposes_by_specialty_and_update(self, client, specialty, admin_headers):
        purpose = client.post(
            "/api/v1/purposes",
            json={"specialty_id": specialty["id"], "purpose_name": "Checkup"},
            headers=admin_headers
        ).json()

        response = client.put(
            f"/api/v1/purposes/{purpose['id']}",
            json={"purpose_name": "Prenatal checkup"},
            headers=admin_headers
        )
        assert response.status_code == 200

        listed = client.get(f"/api/v1/purposes/specialty/{specialty['id']}").json()
        assert [p["purpose_name"] for p in listed] == ["Prenatal checkup"]

        response = client.delete(f"/api/v1/purposes/{purpose['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/v1/purposes/specialty/{specialty['id']}").json() == []

    def test_purpose_for_unknown_specialty(self, client, admin_headers):
        response = client.post(
            "/api/v1/purposes",
            json={"specialty_id": 999, "purpose_name": "Prenatal"},
            headers=admin_headers
        )
        assert response.status_code == 404
