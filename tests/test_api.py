import pytest
from fastapi.testclient import TestClient

from hospital_dashboard.infrastructure.store import InMemoryStoreClient
from hospital_dashboard.main import create_app

from conftest import DR_A, P1


@pytest.fixture
def client():
    with TestClient(create_app(InMemoryStoreClient())) as c:
        yield c


def _create_doctor(client):
    resp = client.post("/doctors", json=DR_A)
    assert resp.status_code == 201
    return resp.json()


def test_health_reports_store(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["store"] == "InMemoryStoreClient"


def test_create_and_list_doctors(client):
    created = _create_doctor(client)
    assert created["full_name"] == "Dr. A"
    assert created["id"]

    listed = client.get("/doctors").json()
    assert [d["id"] for d in listed] == [created["id"]]


def test_patch_changes_only_given_fields(client):
    created = _create_doctor(client)
    resp = client.patch(f"/doctors/{created['id']}", json={"experience_years": 9})
    assert resp.status_code == 200
    body = resp.json()
    assert body["experience_years"] == 9
    assert body["email"] == "a@x.com"
    assert body["created_at"] == created["created_at"]


def test_missing_fields_return_error_envelope(client):
    resp = client.post("/doctors", json={"full_name": "Dr. A"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert "body.specialization" in body["details"]
    assert client.get("/doctors").json() == []


def test_patch_unknown_record_is_404(client):
    resp = client.patch("/doctors/missing", json={"phone": "1"})
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_two_phase_delete(client):
    created = _create_doctor(client)
    req = client.post(f"/doctors/{created['id']}/deletion-requests")
    assert req.status_code == 201
    token = req.json()["token"]
    assert req.json()["prompt"] == "Are you sure you want to delete this doctor?"
    assert len(client.get("/doctors").json()) == 1

    resp = client.delete(f"/doctors/{created['id']}", params={"confirmation": token})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Doctor deleted successfully"
    assert client.get("/doctors").json() == []

    again = client.delete(f"/doctors/{created['id']}", params={"confirmation": token})
    assert again.status_code == 409


def test_declined_delete_keeps_record(client):
    created = _create_doctor(client)
    token = client.post(f"/doctors/{created['id']}/deletion-requests").json()["token"]
    resp = client.delete(f"/doctors/deletion-requests/{token}")
    assert resp.status_code == 200
    assert len(client.get("/doctors").json()) == 1
    assert client.delete(f"/doctors/{created['id']}", params={"confirmation": token}).status_code == 409


def test_appointments_include_relations_and_presentation(client):
    doctor = _create_doctor(client)
    patient = client.post("/patients", json=P1).json()
    resp = client.post("/appointments", json={
        "patient_id": patient["id"],
        "doctor_id": doctor["id"],
        "appointment_date": "2024-06-01",
        "appointment_time": "09:30",
        "reason": "Checkup",
    })
    assert resp.status_code == 201
    appt = resp.json()
    assert appt["status"] == "scheduled"

    client.patch(f"/appointments/{appt['id']}", json={"status": "completed"})
    [row] = client.get("/appointments").json()
    assert row["patient"]["full_name"] == "P1"
    assert row["doctor"]["full_name"] == "Dr. A"
    assert row["presentation"]["category"] == "success"


def test_invalid_status_is_rejected(client):
    resp = client.post("/appointments", json={
        "patient_id": "p", "doctor_id": "d", "appointment_date": "2024-06-01",
        "appointment_time": "09:30", "reason": "Checkup", "status": "no-show",
    })
    assert resp.status_code == 422


def test_collection_routes_answer_without_trailing_slash(client):
    created = client.post("/doctors", json=DR_A, follow_redirects=False)
    assert created.status_code == 201
    listed = client.get("/doctors", follow_redirects=False)
    assert listed.status_code == 200
    assert [d["id"] for d in listed.json()] == [created.json()["id"]]
