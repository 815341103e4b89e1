from .conftest import immunization_booking


class TestQueue:

    def test_enqueue_approves_appointment(self, client, doctor, appointment, doctor_headers):
        response = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        )
        assert response.status_code == 201

        entry = response.json()
        assert entry["status"] == "Processing"
        assert entry["assigned_to"] == doctor["id"]

        appointment_now = client.get(f"/api/v1/appointments/{appointment['id']}", headers=doctor_headers)
        assert appointment_now.json()["status"] == "Approved"

    def test_enqueue_twice(self, client, appointment, doctor_headers):
        client.post("/api/v1/queue", json={"appointment_id": appointment["id"]}, headers=doctor_headers)

        response = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        )
        assert response.status_code == 409

    def test_enqueue_missing_appointment(self, client, doctor_headers):
        response = client.post("/api/v1/queue", json={"appointment_id": 999}, headers=doctor_headers)
        assert response.status_code == 404

    def test_enqueue_unknown_doctor(self, client, appointment, doctor_headers):
        response = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"], "assigned_to": 999},
            headers=doctor_headers
        )
        assert response.status_code == 404

    def test_queue_requires_staff(self, client, appointment, patient_headers):
        response = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=patient_headers
        )
        assert response.status_code == 403
        assert client.get("/api/v1/queue", headers=patient_headers).status_code == 403

    def test_mark_done(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()

        response = client.put(f"/api/v1/queue/{entry['id']}/mark-done", headers=doctor_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "Done"
        assert response.json()["processed_at"] is not None

        appointment_now = client.get(f"/api/v1/appointments/{appointment['id']}", headers=doctor_headers)
        assert appointment_now.json()["status"] == "Done"

    def test_mark_done_twice(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()
        client.put(f"/api/v1/queue/{entry['id']}/mark-done", headers=doctor_headers)

        response = client.put(f"/api/v1/queue/{entry['id']}/mark-done", headers=doctor_headers)
        assert response.status_code == 409

    def test_done_cannot_go_back(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()
        client.put(f"/api/v1/queue/{entry['id']}", json={"status": "Done"}, headers=doctor_headers)

        response = client.put(
            f"/api/v1/queue/{entry['id']}",
            json={"status": "Processing"},
            headers=doctor_headers
        )
        assert response.status_code == 409

    def test_invalid_status_value(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()

        response = client.put(
            f"/api/v1/queue/{entry['id']}",
            json={"status": "Waiting"},
            headers=doctor_headers
        )
        assert response.status_code == 422

    def test_remove_returns_appointment_to_pending(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()

        response = client.delete(f"/api/v1/queue/{entry['id']}", headers=doctor_headers)
        assert response.status_code == 200

        appointment_now = client.get(f"/api/v1/appointments/{appointment['id']}", headers=doctor_headers)
        assert appointment_now.json()["status"] == "Pending"

        # Back to Pending, so it can be queued again
        response = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        )
        assert response.status_code == 201

    def test_remove_done_entry_keeps_done(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()
        client.put(f"/api/v1/queue/{entry['id']}/mark-done", headers=doctor_headers)

        client.delete(f"/api/v1/queue/{entry['id']}", headers=doctor_headers)

        appointment_now = client.get(f"/api/v1/appointments/{appointment['id']}", headers=doctor_headers)
        assert appointment_now.json()["status"] == "Done"

    def test_remove_missing_entry(self, client, doctor_headers):
        response = client.delete("/api/v1/queue/999", headers=doctor_headers)
        assert response.status_code == 404

    def test_queued_appointment_status_locked(self, client, appointment, admin_headers, doctor_headers):
        client.post("/api/v1/queue", json={"appointment_id": appointment["id"]}, headers=doctor_headers)

        response = client.put(
            f"/api/v1/appointments/{appointment['id']}",
            json={"status": "Pending"},
            headers=admin_headers
        )
        assert response.status_code == 409

        queued = client.get(f"/api/v1/queue/appointment/{appointment['id']}", headers=doctor_headers).json()
        assert queued["queue_status"] == "Processing"
        assert queued["appointment_status"] == "Approved"

    def test_queue_still_finishes_visit(self, client, appointment, admin_headers, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()

        response = client.put(
            f"/api/v1/appointments/{appointment['id']}",
            json={"status": "Done"},
            headers=admin_headers
        )
        assert response.status_code == 409

        response = client.put(f"/api/v1/queue/{entry['id']}/mark-done", headers=doctor_headers)
        assert response.status_code == 200

        appointment_now = client.get(f"/api/v1/appointments/{appointment['id']}", headers=doctor_headers)
        assert appointment_now.json()["status"] == "Done"

    def test_queued_appointment_not_deleted(self, client, appointment, admin_headers, patient_headers, doctor_headers):
        client.post("/api/v1/queue", json={"appointment_id": appointment["id"]}, headers=doctor_headers)

        for headers in (patient_headers, admin_headers):
            response = client.delete(f"/api/v1/appointments/{appointment['id']}", headers=headers)
            assert response.status_code == 409

        assert len(client.get("/api/v1/queue", headers=doctor_headers).json()) == 1


class TestQueueListing:

    def test_processing_listed_first(self, client, doctor, appointment, patient_headers, doctor_headers):
        second = client.post(
            "/api/v1/appointments",
            json=immunization_booking(doctor["id"]),
            headers=patient_headers
        ).json()

        first_entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()
        second_entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": second["id"]},
            headers=doctor_headers
        ).json()
        client.put(f"/api/v1/queue/{second_entry['id']}/mark-done", headers=doctor_headers)

        response = client.get("/api/v1/queue", headers=doctor_headers)
        assert response.status_code == 200

        listed = response.json()
        assert [q["queue_id"] for q in listed] == [first_entry["id"], second_entry["id"]]
        assert listed[0]["queue_status"] == "Processing"
        assert listed[0]["doctor_name"] == doctor["name"]
        assert listed[0]["user_name"] == "Maria Santos"

    def test_newest_first_within_status(self, client, doctor, appointment, patient_headers, doctor_headers):
        second = client.post(
            "/api/v1/appointments",
            json=immunization_booking(doctor["id"]),
            headers=patient_headers
        ).json()
        first_entry = client.post("/api/v1/queue", json={"appointment_id": appointment["id"]}, headers=doctor_headers).json()
        second_entry = client.post("/api/v1/queue", json={"appointment_id": second["id"]}, headers=doctor_headers).json()

        listed = client.get("/api/v1/queue", headers=doctor_headers).json()
        assert [q["queue_id"] for q in listed] == [second_entry["id"], first_entry["id"]]

    def test_by_doctor(self, client, doctor, appointment, doctor_headers):
        client.post("/api/v1/queue", json={"appointment_id": appointment["id"]}, headers=doctor_headers)

        assert len(client.get(f"/api/v1/queue/doctor/{doctor['id']}", headers=doctor_headers).json()) == 1
        assert client.get("/api/v1/queue/doctor/999", headers=doctor_headers).json() == []

    def test_by_appointment(self, client, appointment, doctor_headers):
        entry = client.post(
            "/api/v1/queue",
            json={"appointment_id": appointment["id"]},
            headers=doctor_headers
        ).json()

        response = client.get(f"/api/v1/queue/appointment/{appointment['id']}", headers=doctor_headers)
        assert response.status_code == 200
        assert response.json()["queue_id"] == entry["id"]

    def test_by_appointment_not_queued(self, client, appointment, doctor_headers):
        response = client.get(f"/api/v1/queue/appointment/{appointment['id']}", headers=doctor_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Queue not found for this appointment"
