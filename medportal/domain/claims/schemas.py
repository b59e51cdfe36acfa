"""Claims domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field


class ClaimAppealRequest(BaseModel):
    """Request to appeal a denied claim"""

    claimId: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    documents: list[str] = Field(default_factory=list)
    additionalInfo: Optional[str] = None
