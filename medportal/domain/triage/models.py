"""Triage sessions assessed locally while the symptoms service is unavailable"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class TriageSession:
    id: str
    symptoms: list[str]
    patient_info: dict[str, Any]
    assessment: dict[str, Any]
    created_at: datetime
    status: str = "assessed"
    follow_up_answers: dict[str, str] = field(default_factory=dict)
    updated_at: Optional[datetime] = None
