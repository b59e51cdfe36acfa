"""Verification records held while the gateway cannot issue codes"""

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


def hash_code(otp_id: str, code: str) -> str:
    """Hash a one-time code, salted with its record id."""
    return hashlib.sha256(f"{otp_id}:{code}".encode()).hexdigest()


@dataclass
class VerificationRecord:
    id: str
    code_hash: str
    subject: str  # phone number the code was sent to
    created_at: datetime
    expires_at: datetime
    user_name: Optional[str] = None
    attempts: int = 0
    max_attempts: int = 3

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    @property
    def attempts_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def matches(self, code: str) -> bool:
        return hmac.compare_digest(hash_code(self.id, code), self.code_hash)


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    INVALID_ID = "invalid_id"
    EXPIRED = "expired"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    INVALID_CODE = "invalid_code"


VERIFICATION_MESSAGES = {
    VerificationStatus.VERIFIED: "OTP verified successfully",
    VerificationStatus.INVALID_ID: "Invalid OTP ID",
    VerificationStatus.EXPIRED: "OTP has expired",
    VerificationStatus.ATTEMPTS_EXHAUSTED: "Too many verification attempts",
    VerificationStatus.INVALID_CODE: "Invalid OTP code",
}
