"""Triage domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class PatientInfo(BaseModel):
    age: int = Field(gt=0, le=130)
    gender: Literal["male", "female", "other"]
    medical_history: list[str] = Field(default_factory=list)
    current_medications: list[str] = Field(default_factory=list)


class TriageRequest(BaseModel):
    """Request to analyze symptoms"""

    symptoms: list[str] = Field(min_length=1)
    patientInfo: PatientInfo
    severityLevel: Optional[str] = None


class FollowUpRequest(BaseModel):
    """Answers to the follow-up questions of a triage session"""

    triageId: str = Field(min_length=1)
    answers: dict[str, str]
