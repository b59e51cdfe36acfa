"""
Triage fallback
Keyword-based risk assessment used when the gateway's symptoms service is
unavailable. Every assessment carries a disclaimer.
"""

import copy
import logging
import uuid
from typing import Any, Optional

from ... import config
from ...shared.envelope import ServiceResult
from ...stores import Clock, RecordStore, utc_now
from .models import TriageSession

logger = logging.getLogger(__name__)

HIGH_RISK_SYMPTOMS = ["chest pain", "difficulty breathing", "severe headache", "high fever"]
MODERATE_RISK_SYMPTOMS = ["persistent cough", "abdominal pain", "dizziness"]

HIGH_SEVERITY_LEVELS = {"severe", "high", "emergency"}
MODERATE_SEVERITY_LEVELS = {"moderate", "medium"}

RECOMMENDATIONS = {
    "high": [
        "Seek immediate medical attention",
        "Consider emergency care if symptoms worsen",
        "Do not delay treatment",
    ],
    "moderate": [
        "Schedule appointment within 24 hours",
        "Monitor symptoms closely",
        "Seek care if symptoms worsen",
    ],
    "low": [
        "Consider scheduling routine appointment",
        "Continue monitoring symptoms",
        "Practice self-care measures",
    ],
}
URGENCY = {"high": "urgent", "moderate": "same-day", "low": "routine"}

BASE_QUESTIONS = [
    "How long have you been experiencing these symptoms?",
    "Have the symptoms gotten worse, better, or stayed the same?",
    "Are you currently taking any medications?",
]
URGENT_QUESTIONS = [
    "Are you experiencing any difficulty breathing?",
    "Do you have any chest pain or pressure?",
    "Have you lost consciousness or feel like you might?",
]
ROUTINE_QUESTIONS = [
    "Have you tried any treatments or remedies?",
    "Do the symptoms interfere with your daily activities?",
    "Do you have any known allergies or medical conditions?",
]

ASSESSMENT_DISCLAIMER = (
    "This assessment is for informational purposes only and does not replace "
    "professional medical advice."
)

DISCLAIMERS = [
    "This triage assessment is for informational purposes only and does not constitute medical advice.",
    "Always consult with a qualified healthcare professional for proper diagnosis and treatment.",
    "In case of medical emergency, call emergency services immediately.",
    "The assessment is based on limited information and may not capture all relevant factors.",
    f"{config.BRAND_NAME} is not responsible for any decisions made based on this assessment.",
]

COMMON_SYMPTOMS = [
    "headache", "fever", "cough", "sore throat", "fatigue",
    "nausea", "dizziness", "chest pain", "abdominal pain",
    "back pain", "joint pain", "muscle aches", "shortness of breath",
    "congestion", "runny nose", "skin rash", "difficulty sleeping",
    "loss of appetite", "vomiting", "diarrhea", "constipation",
    "anxiety", "depression", "memory problems", "vision problems",
    "hearing problems", "numbness", "tingling", "swelling",
]


def _mentions_any(symptoms: list[str], keywords: list[str]) -> bool:
    return any(keyword in symptom.lower() for symptom in symptoms for keyword in keywords)


def assess_risk(symptoms: list[str], severity_level: Optional[str] = None) -> str:
    """Return ``high``, ``moderate`` or ``low``."""
    severity = (severity_level or "").lower()
    if _mentions_any(symptoms, HIGH_RISK_SYMPTOMS) or severity in HIGH_SEVERITY_LEVELS:
        return "high"
    if _mentions_any(symptoms, MODERATE_RISK_SYMPTOMS) or severity in MODERATE_SEVERITY_LEVELS:
        return "moderate"
    return "low"


def follow_up_questions(risk_level: str) -> list[str]:
    if risk_level == "high":
        return BASE_QUESTIONS + URGENT_QUESTIONS
    return BASE_QUESTIONS + ROUTINE_QUESTIONS


class TriageFallback:
    def __init__(self, store: RecordStore[TriageSession], clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def analyze_symptoms(
        self,
        symptoms: list[str],
        patient_info: dict[str, Any],
        severity_level: Optional[str] = None,
    ) -> ServiceResult:
        risk_level = assess_risk(symptoms, severity_level)
        assessment = {
            "riskLevel": risk_level,
            "urgency": URGENCY[risk_level],
            "recommendations": list(RECOMMENDATIONS[risk_level]),
            "followUpQuestions": follow_up_questions(risk_level),
            "disclaimer": ASSESSMENT_DISCLAIMER,
        }

        session = TriageSession(
            id=f"triage_{uuid.uuid4().hex}",
            symptoms=list(symptoms),
            patient_info=dict(patient_info),
            assessment=assessment,
            created_at=self.clock(),
        )
        self.store.put(session.id, session)
        logger.info(f"🩺 Fallback triage {session.id} assessed as {risk_level} risk")

        return ServiceResult.fallback(
            "Basic triage assessment completed",
            triageId=session.id,
            assessment=copy.deepcopy(assessment),
        )

    def submit_follow_up(self, triage_id: str, answers: dict[str, str]) -> ServiceResult:
        with self.store.lock(triage_id):
            session = self.store.get(triage_id)
            if session is None:
                return ServiceResult.err("Triage session not found")
            session.follow_up_answers.update(answers)
            session.status = "follow_up_received"
            session.updated_at = self.clock()
            self.store.put(triage_id, session)

        return ServiceResult.fallback(
            "Follow-up answers recorded", updatedAssessment=copy.deepcopy(session.assessment)
        )

    def get_disclaimers(self) -> ServiceResult:
        return ServiceResult.fallback("Standard disclaimers provided", disclaimers=list(DISCLAIMERS))

    def get_symptom_suggestions(self, query: str, limit: int = 10) -> ServiceResult:
        needle = query.lower().strip()
        suggestions = [symptom for symptom in COMMON_SYMPTOMS if needle in symptom][:limit]
        return ServiceResult.fallback("Symptom suggestions provided", suggestions=suggestions)
