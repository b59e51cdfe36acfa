"""Claim appeals recorded while the EHR/RCM service is unavailable"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AppealRecord:
    id: str
    claim_id: str
    reason: str
    tracking_number: str
    created_at: datetime
    status: str = "submitted"
    documents: list[str] = field(default_factory=list)
    additional_info: Optional[str] = None
