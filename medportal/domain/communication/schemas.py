"""Communication domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_phone


class SendOTPRequest(BaseModel):
    """Request to send a one-time password"""

    phoneNumber: str = Field(min_length=1)
    userName: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone_number(cls, v):
        return validate_phone(v)


class VerifyOTPRequest(BaseModel):
    """Request to verify a one-time password"""

    otpId: str = Field(min_length=1)
    otpCode: str = Field(min_length=1)


class SendReminderRequest(BaseModel):
    """Request to send or schedule a reminder"""

    recipient: str = Field(min_length=1)
    type: Literal["sms", "email", "push"]
    message: str = Field(min_length=1)
    scheduledFor: Optional[str] = None
