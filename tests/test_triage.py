"""Tests for symptom triage."""

import pytest

from medportal.domain.triage.fallback import assess_risk, follow_up_questions

PATIENT = {"age": 42, "gender": "female"}


@pytest.mark.parametrize(
    "symptoms, severity, expected",
    [
        (["Chest pain when climbing stairs"], None, "high"),
        (["mild rash"], "severe", "high"),
        (["persistent cough"], None, "moderate"),
        (["runny nose"], "Medium", "moderate"),
        (["runny nose"], None, "low"),
        (["runny nose"], "mild", "low"),
    ],
)
def test_assess_risk(symptoms, severity, expected):
    assert assess_risk(symptoms, severity) == expected


def test_urgent_questions_only_for_high_risk():
    assert "Do you have any chest pain or pressure?" in follow_up_questions("high")
    assert "Do you have any chest pain or pressure?" not in follow_up_questions("low")


@pytest.mark.asyncio
async def test_fallback_assessment_carries_disclaimer(triage_service):
    result = await triage_service.analyze_symptoms(["difficulty breathing"], PATIENT)
    envelope = result.to_envelope()

    assert envelope["success"] is True
    assert envelope["fallbackUsed"] is True
    assert envelope["triageId"].startswith("triage_")
    assessment = envelope["assessment"]
    assert assessment["riskLevel"] == "high"
    assert assessment["urgency"] == "urgent"
    assert assessment["recommendations"][0] == "Seek immediate medical attention"
    assert "professional medical advice" in assessment["disclaimer"]


@pytest.mark.asyncio
async def test_follow_up_on_fallback_session(triage_service):
    analyzed = await triage_service.analyze_symptoms(["dizziness"], PATIENT)
    triage_id = analyzed.data["triageId"]

    result = await triage_service.submit_follow_up(triage_id, {"duration": "two days"})

    assert result.success is True
    assert result.data["updatedAssessment"]["riskLevel"] == "moderate"
    session = triage_service.fallback.store.get(triage_id)
    assert session.follow_up_answers == {"duration": "two days"}
    assert session.status == "follow_up_received"


@pytest.mark.asyncio
async def test_follow_up_unknown_session(triage_service):
    result = await triage_service.submit_follow_up("triage_missing", {"q": "a"})

    assert result.success is False
    assert result.message == "Triage session not found"


@pytest.mark.asyncio
async def test_disclaimers_fallback(triage_service):
    result = await triage_service.get_disclaimers()

    assert result.fallback_used is True
    assert len(result.data["disclaimers"]) == 5


@pytest.mark.asyncio
async def test_disclaimers_from_gateway(triage_service, gateway):
    gateway.respond("symptoms", "getDisclaimers", {"success": True, "disclaimers": ["remote"]})

    result = await triage_service.get_disclaimers()

    assert result.fallback_used is False
    assert result.data["disclaimers"] == ["remote"]


@pytest.mark.asyncio
async def test_symptom_suggestions(triage_service):
    result = await triage_service.get_symptom_suggestions("pain")

    suggestions = result.data["suggestions"]
    assert "chest pain" in suggestions
    assert all("pain" in s for s in suggestions)


@pytest.mark.asyncio
async def test_symptom_suggestions_limit(triage_service):
    result = await triage_service.get_symptom_suggestions("a", limit=3)

    assert len(result.data["suggestions"]) == 3


@pytest.mark.asyncio
async def test_each_assessment_gets_a_fresh_stored_id(triage_service):
    ids = []
    for _ in range(5):
        result = await triage_service.analyze_symptoms(["headache"], PATIENT)
        ids.append(result.data["triageId"])

    assert len(set(ids)) == 5
    assert all(triage_service.fallback.store.get(triage_id) is not None for triage_id in ids)


@pytest.mark.asyncio
async def test_returned_assessment_is_detached_from_stored_session(triage_service):
    result = await triage_service.analyze_symptoms(["high fever"], PATIENT)
    triage_id = result.data["triageId"]

    result.data["assessment"]["riskLevel"] = "low"
    result.data["assessment"]["recommendations"].clear()

    session = triage_service.fallback.store.get(triage_id)
    assert session.assessment["riskLevel"] == "high"
    assert session.assessment["recommendations"]
