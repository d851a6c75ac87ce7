from datetime import timedelta

from .conftest import TODAY, TOMORROW

IN_TWO_DAYS = TODAY + timedelta(days=2)


def booking(**overrides):
    data = {
        "name": "Jo",
        "contact": "5551234567",
        "date": IN_TWO_DAYS.isoformat(),
        "time": "09:00",
        "reason": "Consultation",
    }
    data.update(overrides)
    return data


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_appointment(client, channel):
    response = client.post("/appointments", json=booking())

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Pending"
    assert data["displayStatus"] == "Pending"
    assert data["scheduledFor"] == "Wed, Oct 21, 2026 at 9:00 AM"
    assert data["dayLabel"] == "In 2 days"
    assert set(channel.scheduled) == {
        f"ONE_DAY_BEFORE-{data['id']}",
        f"TWO_HOURS_BEFORE-{data['id']}",
    }


def test_double_booking_is_a_conflict(client):
    client.post("/appointments", json=booking())

    response = client.post("/appointments", json=booking(name="Sam"))

    assert response.status_code == 409
    assert response.json()["time"] == "09:00"


def test_invalid_form_lists_fields(client):
    response = client.post("/appointments", json=booking(name="", contact="123"))

    assert response.status_code == 422
    assert set(response.json()["fields"]) == {"name", "contact"}


def test_malformed_date_is_rejected(client):
    response = client.post("/appointments", json=booking(date="next tuesday"))

    assert response.status_code == 422


def test_status_change_and_invalid_transition(client, channel):
    appointment_id = client.post("/appointments", json=booking()).json()["id"]

    response = client.post(
        f"/appointments/{appointment_id}/status",
        json={"status": "Cancelled", "initiatedBy": "admin"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"
    assert set(channel.scheduled) == {f"CANCEL-{appointment_id}"}

    response = client.post(f"/appointments/{appointment_id}/status", json={"status": "Done"})
    assert response.status_code == 409
    assert response.json()["current"] == "Cancelled"


def test_list_shows_expired_and_filters(client, clock):
    client.post("/appointments", json=booking(date=TODAY.isoformat(), time="11:00"))
    client.post("/appointments", json=booking(date=TOMORROW.isoformat(), time="12:00"))
    clock.advance(hours=3)

    listed = client.get("/appointments").json()

    assert [a["displayStatus"] for a in listed] == ["Expired", "Pending"]
    assert [a["status"] for a in listed] == ["Pending", "Pending"]
    assert len(client.get("/appointments", params={"status": "Approved"}).json()) == 0
    assert client.get("/appointments", params={"status": "Later"}).status_code == 422


def test_update_appointment(client):
    appointment_id = client.post("/appointments", json=booking()).json()["id"]

    response = client.put(f"/appointments/{appointment_id}", json=booking(time="16:00"))

    assert response.status_code == 200
    assert response.json()["time"] == "16:00"


def test_availability(client):
    client.post("/appointments", json=booking(time="10:00"))

    response = client.get("/appointments/availability", params={"date": IN_TWO_DAYS.isoformat()})

    assert response.status_code == 200
    assert "10:00" not in response.json()["slots"]
    assert "09:00" in response.json()["slots"]


def test_unknown_appointment(client):
    assert client.get("/appointments/999").status_code == 404
    assert client.delete("/appointments/999").status_code == 404


def test_delete_appointment(client, channel):
    appointment_id = client.post("/appointments", json=booking()).json()["id"]

    assert client.delete(f"/appointments/{appointment_id}").status_code == 200
    assert client.get(f"/appointments/{appointment_id}").status_code == 404
    assert channel.scheduled == {}


def test_feedback_flow(client):
    appointment_id = client.post("/appointments", json=booking()).json()["id"]

    created = client.post("/feedback", json={"rating": 5, "appointmentId": appointment_id})
    client.post("/feedback", json={"rating": 3, "comment": "Long wait"})

    assert created.status_code == 201
    stats = client.get("/feedback/stats").json()
    assert stats["totalRatings"] == 2
    assert stats["averageRating"] == 4.0
    assert stats["ratingsCount"]["5"] == 1
    assert client.get(f"/feedback/appointment/{appointment_id}").json()["rating"] == 5
    assert len(client.get("/feedback").json()) == 2


def test_feedback_errors(client):
    assert client.post("/feedback", json={"rating": 9}).status_code == 422
    assert client.post("/feedback", json={"rating": 4, "appointmentId": 77}).status_code == 404
    assert client.get("/feedback/appointment/77").status_code == 404


def test_cancelled_appointment_cannot_be_edited(client):
    appointment_id = client.post("/appointments", json=booking()).json()["id"]
    client.post(f"/appointments/{appointment_id}/status", json={"status": "Cancelled"})

    response = client.put(f"/appointments/{appointment_id}", json=booking(time="16:00"))

    assert response.status_code == 422
    assert "status" in response.json()["fields"]
