"""HTTP-level tests for the API routes."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from medportal.dependencies import (
    get_appointment_service,
    get_claims_service,
    get_communication_service,
    get_gateway,
    get_triage_service,
)
from medportal.main import app
from medportal.rate_limiter import reset_rate_limits


@pytest.fixture
def api(
    gateway,
    communication_service,
    appointment_service,
    triage_service,
    claims_service,
) -> Iterator[TestClient]:
    reset_rate_limits()
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_communication_service] = lambda: communication_service
    app.dependency_overrides[get_appointment_service] = lambda: appointment_service
    app.dependency_overrides[get_triage_service] = lambda: triage_service
    app.dependency_overrides[get_claims_service] = lambda: claims_service
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_rate_limits()


def test_health_reports_gateway_state(api: TestClient) -> None:
    response = api.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["version"] == "1.0.0"
    assert body["gateway"]["healthy"] is False
    assert "timestamp" in body


def test_send_otp_envelope(api: TestClient) -> None:
    response = api.post("/api/otp/send", json={"phoneNumber": "9876543210", "userName": "Asha"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["fallbackUsed"] is True
    assert body["otpId"].startswith("otp_")


def test_send_otp_normalizes_phone(api: TestClient, sms) -> None:
    api.post("/api/otp/send", json={"phoneNumber": "98765 43210"})

    assert sms.sent[0][0] == "+919876543210"


def test_invalid_phone_is_bad_request(api: TestClient) -> None:
    response = api.post("/api/otp/send", json={"phoneNumber": "12"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "phoneNumber" in body["message"]


def test_missing_field_is_bad_request(api: TestClient) -> None:
    response = api.post("/api/otp/verify", json={"otpId": "otp_1"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_failed_verification_is_ok_status_with_success_false(api: TestClient) -> None:
    response = api.post("/api/otp/verify", json={"otpId": "otp_missing", "otpCode": "123456"})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Invalid OTP ID",
        "status": "invalid_id",
        "fallbackUsed": True,
    }


def test_search_slots(api: TestClient) -> None:
    response = api.post(
        "/api/appointments/search",
        json={"dateRange": {"start": "2024-01-15", "end": "2024-01-20"}},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["fallbackUsed"] is True
    assert len(body["slots"]) > 0


def test_search_rejects_inverted_range(api: TestClient) -> None:
    response = api.post(
        "/api/appointments/search",
        json={"dateRange": {"start": "2024-01-20", "end": "2024-01-15"}},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_book_then_cancel(api: TestClient) -> None:
    booked = api.post(
        "/api/appointments/book", json={"slotId": "slot_1", "patientId": "patient_12345"}
    ).json()

    cancelled = api.post(
        "/api/appointments/cancel", json={"appointmentId": booked["appointmentId"]}
    )
    unknown = api.post("/api/appointments/cancel", json={"appointmentId": "appt_missing"})

    assert cancelled.json()["success"] is True
    assert unknown.status_code == 200
    assert unknown.json()["success"] is False


def test_appointment_history(api: TestClient) -> None:
    response = api.get("/api/appointments/history/patient_12345")

    assert response.json()["appointments"][0]["status"] == "completed"


def test_triage_analyze(api: TestClient) -> None:
    response = api.post(
        "/api/triage/analyze",
        json={"symptoms": ["high fever"], "patientInfo": {"age": 30, "gender": "male"}},
    )

    assert response.json()["assessment"]["riskLevel"] == "high"


def test_triage_requires_symptoms(api: TestClient) -> None:
    response = api.post(
        "/api/triage/analyze",
        json={"symptoms": [], "patientInfo": {"age": 30, "gender": "male"}},
    )

    assert response.status_code == 400


def test_symptom_suggestions(api: TestClient) -> None:
    response = api.get("/api/symptoms/suggestions", params={"q": "cough"})

    assert response.json()["suggestions"] == ["cough"]


def test_claim_status_with_dates(api: TestClient, gateway) -> None:
    response = api.get(
        "/api/claims/status",
        params={"patientId": "patient_12345", "startDate": "2024-01-01", "endDate": "2024-01-31"},
    )

    assert response.status_code == 200
    _, operation, params = gateway.calls[-1]
    assert operation == "getClaimStatus"
    assert params["dateRange"] == {"start": "2024-01-01", "end": "2024-01-31"}


def test_claim_status_invalid_date(api: TestClient) -> None:
    response = api.get(
        "/api/claims/status", params={"startDate": "2024-13-01", "endDate": "2024-01-31"}
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid date: 2024-13-01"}


def test_claim_appeal(api: TestClient) -> None:
    response = api.post(
        "/api/claims/appeal", json={"claimId": "claim_42", "reason": "Medically necessary"}
    )

    assert response.json()["trackingNumber"].startswith("TRK")


def test_patient_insurance(api: TestClient) -> None:
    response = api.get("/api/patient/insurance/patient_12345")

    assert response.json()["patientId"] == "patient_12345"


def test_unknown_endpoint(api: TestClient) -> None:
    response = api.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Endpoint not found"}


def test_api_responses_carry_security_headers(api: TestClient) -> None:
    response = api.get("/api/triage/disclaimers")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert "no-store" in response.headers["cache-control"]
