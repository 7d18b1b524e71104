"""
Integration tests for the appointment booking API.

Drives whole booking sessions through the FastAPI app with the simulated
collaborators configured to be deterministic (every slot open, no races,
every submission accepted).
"""

from datetime import date, timedelta

import pytest

BASE = "/api/v1/booking"


def next_weekday(weekday: int) -> date:
    """Next date strictly after today falling on ``weekday`` (Monday is 0)."""
    today = date.today()
    days_ahead = (weekday - today.weekday() - 1) % 7 + 1
    return today + timedelta(days=days_ahead)


@pytest.fixture
def monday() -> date:
    return next_weekday(0)


@pytest.fixture
def session_id(api_client, patient_headers) -> str:
    response = api_client.post(f"{BASE}/sessions", headers=patient_headers)
    assert response.status_code == 201
    return response.json()["session_id"]


def _post(client, session_id: str, action: str, headers: dict[str, str]) -> dict:
    response = client.post(f"{BASE}/sessions/{session_id}/{action}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def _put(client, session_id: str, resource: str, payload: dict, headers: dict[str, str]) -> dict:
    response = client.put(f"{BASE}/sessions/{session_id}/{resource}", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def _book(client, session_id: str, headers: dict[str, str], day: date, hour: int = 10) -> dict:
    """Walk a session from verification to submission."""
    _post(client, session_id, "advance", headers)
    _put(client, session_id, "provider", {"provider_id": "1"}, headers)
    _post(client, session_id, "advance", headers)
    _put(client, session_id, "slot-date", {"date": day.isoformat()}, headers)
    _put(client, session_id, "slot", {"slot_id": f"1-{day.isoformat()}-{hour:02d}"}, headers)
    _put(
        client,
        session_id,
        "slot-details",
        {"appointment_type": "Consultation", "reason": "Chest pain when climbing stairs"},
        headers,
    )
    return _post(client, session_id, "advance", headers)


class TestHealthAndDirectory:
    """Tests for public endpoints."""

    def test_health(self, api_client) -> None:
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["environment"] == "test"
        assert data["open_sessions"] == 0

    def test_providers(self, api_client) -> None:
        response = api_client.get(f"{BASE}/providers")

        assert response.status_code == 200
        providers = response.json()
        assert len(providers) == 7
        assert providers[0]["availability"] == "Mon, Wed, Fri"

    def test_departments_with_counts(self, api_client) -> None:
        response = api_client.get(f"{BASE}/departments")

        assert response.status_code == 200
        counts = {d["name"]: d["provider_count"] for d in response.json()}
        assert counts == {"Cardiology": 2, "Neurology": 1, "Pediatrics": 2, "Orthopedics": 1, "Dermatology": 1}

    def test_correlation_header(self, api_client) -> None:
        response = api_client.get(f"{BASE}/providers", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"
        assert "X-Response-Time-Ms" in response.headers


class TestSessionAccess:
    """Authentication and ownership of sessions."""

    def test_missing_token(self, api_client) -> None:
        response = api_client.post(f"{BASE}/sessions")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_unknown_session(self, api_client, patient_headers) -> None:
        response = api_client.get(f"{BASE}/sessions/does-not-exist", headers=patient_headers)
        assert response.status_code == 404

    def test_other_token_cannot_read_session(self, api_client, session_id) -> None:
        response = api_client.get(
            f"{BASE}/sessions/{session_id}",
            headers={"Authorization": "Bearer demo-doctor-token"},
        )
        assert response.status_code == 404

    def test_unknown_token_fails_verification(self, api_client) -> None:
        response = api_client.post(f"{BASE}/sessions", headers={"Authorization": "Bearer nobody"})

        assert response.status_code == 201
        view = response.json()["view"]
        assert view["status"] == "failed"
        assert view["failure_message"] == "You must be logged in to book an appointment."
        assert view["can_advance"] is False

    def test_create_session(self, api_client, patient_headers) -> None:
        response = api_client.post(f"{BASE}/sessions", headers=patient_headers)
        data = response.json()

        assert data["state"] == "step1_verify"
        assert data["step_number"] == 1
        assert data["view"]["form"]["full_name"] == "Linh Tran"
        assert data["draft"]["status"] == "open"
        assert api_client.get("/health").json()["open_sessions"] == 1


class TestBookingFlow:
    """End-to-end booking sessions."""

    def test_book_modify_and_cancel(self, api_client, patient_headers, session_id, monday) -> None:
        booked = _book(api_client, session_id, patient_headers, monday)

        assert booked["accepted"] is True
        assert booked["result"]["success"] is True
        session = booked["session"]
        assert session["state"] == "confirmed"
        assert session["view"]["time"] == "10:00 AM"
        assert session["view"]["confirmation_id"] == booked["result"]["confirmation_id"]

        modifying = _post(api_client, session_id, "modify", patient_headers)
        assert modifying["session"]["state"] == "modifying"

        _put(
            api_client, session_id, "modification", {"reason": "Follow-up on ECG results", "sms": True}, patient_headers
        )
        saved = _post(api_client, session_id, "modification/save", patient_headers)
        assert saved["session"]["state"] == "confirmed"
        assert saved["session"]["draft"]["reason"] == "Follow-up on ECG results"
        assert saved["session"]["draft"]["notification_prefs"] == {"email": True, "sms": True}

        _post(api_client, session_id, "modify", patient_headers)
        requested = _post(api_client, session_id, "modification/cancel-request", patient_headers)
        assert requested["session"]["view"]["cancel_requested"] is True

        cancelled = _post(api_client, session_id, "modification/cancel-confirm", patient_headers)
        assert cancelled["accepted"] is True
        assert cancelled["session"]["state"] == "exited"
        assert cancelled["session"]["exit_reason"] == "cancelled"
        assert cancelled["session"]["draft"]["status"] == "cancelled"

    def test_done_leaves_workflow(self, api_client, patient_headers, session_id, monday) -> None:
        _book(api_client, session_id, patient_headers, monday)

        done = _post(api_client, session_id, "done", patient_headers)
        assert done["session"]["exit_reason"] == "done"

    def test_provider_filters_and_departments(self, api_client, patient_headers, session_id) -> None:
        _post(api_client, session_id, "advance", patient_headers)

        filtered = _put(api_client, session_id, "provider-filters", {"search": "minh"}, patient_headers)
        assert filtered["result"]["count"] == 3

        _put(api_client, session_id, "provider-filters", {"search": ""}, patient_headers)
        by_department = _put(api_client, session_id, "department", {"department_id": "3"}, patient_headers)
        view = by_department["session"]["view"]
        assert view["specialty"] == "Pediatrics"
        assert view["mode"] == "direct"
        assert [p["id"] for p in view["providers"]] == ["4", "5"]

    def test_provider_day_off_suggests_alternatives(self, api_client, patient_headers, session_id) -> None:
        tuesday = next_weekday(1)
        _post(api_client, session_id, "advance", patient_headers)
        _put(api_client, session_id, "provider", {"provider_id": "1"}, patient_headers)
        _post(api_client, session_id, "advance", patient_headers)

        response = _put(api_client, session_id, "slot-date", {"date": tuesday.isoformat()}, patient_headers)
        view = response["session"]["view"]

        assert view["provider_unavailable"] is True
        assert view["slots"]["slots"] == []
        assert len(view["alternative_dates"]) == 3

    def test_back_keeps_selection(self, api_client, patient_headers, session_id) -> None:
        _post(api_client, session_id, "advance", patient_headers)
        _put(api_client, session_id, "provider", {"provider_id": "2"}, patient_headers)
        _post(api_client, session_id, "advance", patient_headers)

        back = _post(api_client, session_id, "back", patient_headers)
        assert back["session"]["state"] == "step2_select_provider"
        assert back["session"]["view"]["pending_provider_id"] == "2"

    def test_invalid_patient_info_blocks_advance(self, api_client, patient_headers, session_id) -> None:
        response = api_client.patch(
            f"{BASE}/sessions/{session_id}/patient-info",
            json={"email": "broken"},
            headers=patient_headers,
        )
        assert "email" in response.json()["result"]["errors"]

        advanced = _post(api_client, session_id, "advance", patient_headers)
        assert advanced["accepted"] is False
        assert advanced["session"]["state"] == "step1_verify"

    def test_delete_abandons_and_releases_slot(
        self, api_client, patient_headers, session_id, monday, booking_container
    ) -> None:
        _post(api_client, session_id, "advance", patient_headers)
        _put(api_client, session_id, "provider", {"provider_id": "1"}, patient_headers)
        _post(api_client, session_id, "advance", patient_headers)
        _put(api_client, session_id, "slot-date", {"date": monday.isoformat()}, patient_headers)
        _put(api_client, session_id, "slot", {"slot_id": f"1-{monday.isoformat()}-10"}, patient_headers)

        reservation = booking_container.get_slot_reservation()
        assert reservation.holder_of("1", monday, 10) is not None

        response = api_client.delete(f"{BASE}/sessions/{session_id}", headers=patient_headers)

        assert response.status_code == 204
        assert reservation.holder_of("1", monday, 10) is None
        assert api_client.get(f"{BASE}/sessions/{session_id}", headers=patient_headers).status_code == 404


class TestErrorResponses:
    """Domain and request errors map to HTTP status codes."""

    def test_wrong_step_is_conflict(self, api_client, patient_headers, session_id) -> None:
        response = api_client.put(
            f"{BASE}/sessions/{session_id}/provider",
            json={"provider_id": "1"},
            headers=patient_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_OPERATION"

    def test_unknown_provider_is_not_found(self, api_client, patient_headers, session_id) -> None:
        _post(api_client, session_id, "advance", patient_headers)
        response = api_client.put(
            f"{BASE}/sessions/{session_id}/provider",
            json={"provider_id": "99"},
            headers=patient_headers,
        )
        assert response.status_code == 404

    def test_past_date_is_rejected(self, api_client, patient_headers, session_id) -> None:
        _post(api_client, session_id, "advance", patient_headers)
        _put(api_client, session_id, "provider", {"provider_id": "1"}, patient_headers)
        _post(api_client, session_id, "advance", patient_headers)

        yesterday = date.today() - timedelta(days=1)
        response = api_client.put(
            f"{BASE}/sessions/{session_id}/slot-date",
            json={"date": yesterday.isoformat()},
            headers=patient_headers,
        )
        assert response.status_code == 422
        assert response.json()["details"]["field"] == "date"

    def test_invalid_body(self, api_client, patient_headers, session_id) -> None:
        response = api_client.put(f"{BASE}/sessions/{session_id}/slot", json={}, headers=patient_headers)

        assert response.status_code == 422
        assert response.json()["message"] == "Validation error"

    def test_rejected_action_is_not_an_error(self, api_client, patient_headers, session_id) -> None:
        response = _post(api_client, session_id, "retry", patient_headers)
        assert response["accepted"] is False
        assert response["session"]["state"] == "step1_verify"
