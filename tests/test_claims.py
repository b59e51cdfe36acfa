"""Tests for claims and patient record operations."""

import pytest


@pytest.mark.asyncio
async def test_claim_status_fallback_for_patient(claims_service):
    result = await claims_service.get_claim_status(patient_id="patient_12345")
    envelope = result.to_envelope()

    assert envelope["success"] is True
    assert envelope["fallbackUsed"] is True
    assert len(envelope["claims"]) == 2
    assert all(claim["patientId"] == "patient_12345" for claim in envelope["claims"])


@pytest.mark.asyncio
async def test_claim_status_fallback_for_single_claim(claims_service):
    result = await claims_service.get_claim_status(claim_id="claim_42")

    assert [claim["claimId"] for claim in result.data["claims"]] == ["claim_42"]


@pytest.mark.asyncio
async def test_claim_status_forwards_date_range(claims_service, gateway):
    gateway.respond("ehr-rcm", "getClaimStatus", {"success": True, "claims": []})
    date_range = {"start": "2024-01-01", "end": "2024-01-31"}

    result = await claims_service.get_claim_status(patient_id="patient_12345", date_range=date_range)

    assert result.fallback_used is False
    assert result.data["claims"] == []
    _, _, params = gateway.calls[0]
    assert params == {"patientId": "patient_12345", "dateRange": date_range}


@pytest.mark.asyncio
async def test_denial_reasons_fallback(claims_service):
    result = await claims_service.get_denial_reasons("claim_42")

    assert result.data["claimId"] == "claim_42"
    assert {reason["code"] for reason in result.data["reasons"]} == {"CO-16", "CO-97"}
    assert result.data["appealOptions"]


@pytest.mark.asyncio
async def test_appeal_recorded_in_fallback(claims_service):
    result = await claims_service.submit_appeal(
        "claim_42", "Service was medically necessary", ["letter.pdf"]
    )

    assert result.success is True
    assert result.fallback_used is True
    assert result.data["appealId"].startswith("appeal_")
    assert result.data["trackingNumber"].startswith("TRK")
    assert len(result.data["trackingNumber"]) == 15
    record = claims_service.fallback.store.get(result.data["appealId"])
    assert record.claim_id == "claim_42"
    assert record.documents == ["letter.pdf"]


@pytest.mark.asyncio
async def test_patient_summary_fallback(claims_service):
    result = await claims_service.get_patient_summary("patient_12345")

    assert result.fallback_used is True
    assert result.data["patient"]["patientId"] == "patient_12345"


@pytest.mark.asyncio
async def test_patient_summary_from_gateway(claims_service, gateway):
    gateway.respond("ehr-rcm", "getPatientSummary", {"success": True, "patient": {"id": "p"}})

    result = await claims_service.get_patient_summary("patient_12345")

    assert result.to_envelope() == {
        "success": True,
        "message": "Patient summary retrieved successfully",
        "patient": {"id": "p"},
        "fallbackUsed": False,
    }


@pytest.mark.asyncio
async def test_insurance_info_fallback(claims_service, clock):
    result = await claims_service.get_insurance_info("patient_12345")

    insurance = result.data["insurance"]
    assert insurance["primary"]["status"] == "active"
    assert insurance["eligibilityLastVerified"] == clock().isoformat()


@pytest.mark.asyncio
async def test_each_appeal_gets_a_fresh_stored_id(claims_service):
    results = [await claims_service.submit_appeal("claim_42", "Resubmitting") for _ in range(5)]
    appeal_ids = [result.data["appealId"] for result in results]
    tracking_numbers = [result.data["trackingNumber"] for result in results]

    assert len(set(appeal_ids)) == 5
    assert len(set(tracking_numbers)) == 5
    assert all(claims_service.fallback.store.get(appeal_id) is not None for appeal_id in appeal_ids)
