"""
Communication fallback
Issues and checks one-time codes locally and delivers reminders directly
through Twilio while the gateway's auth-comm service is unavailable
"""

import logging
import secrets
import string
import uuid
from datetime import timedelta
from typing import Optional

from ... import config
from ...masking import mask_email, mask_phone
from ...services.sms_service import SMSDeliveryError, SMSService
from ...shared.envelope import ServiceResult
from ...stores import Clock, RecordStore, utc_now
from .models import (
    VERIFICATION_MESSAGES,
    VerificationRecord,
    VerificationStatus,
    hash_code,
)

logger = logging.getLogger(__name__)


def generate_otp(length: int = 6) -> str:
    """Generate a cryptographically secure random numeric OTP code"""
    return "".join(secrets.choice(string.digits) for _ in range(length))


class CommunicationFallback:
    def __init__(
        self,
        store: RecordStore[VerificationRecord],
        sms: SMSService,
        clock: Clock = utc_now,
        expiry: Optional[timedelta] = None,
        max_attempts: Optional[int] = None,
        code_length: Optional[int] = None,
    ):
        self.store = store
        self.sms = sms
        self.clock = clock
        self.expiry = expiry or timedelta(minutes=config.OTP_EXPIRY_MINUTES)
        self.max_attempts = max_attempts or config.OTP_MAX_ATTEMPTS
        self.code_length = code_length or config.OTP_LENGTH

    # ------------------------------------------------------------------
    # Verification codes
    # ------------------------------------------------------------------

    def issue_code(self, phone_number: str, user_name: Optional[str] = None) -> tuple[VerificationRecord, str]:
        """Create and store a verification record. Returns it with the plaintext code."""
        otp_id = f"otp_{uuid.uuid4().hex}"
        code = generate_otp(self.code_length)
        now = self.clock()
        record = VerificationRecord(
            id=otp_id,
            code_hash=hash_code(otp_id, code),
            subject=phone_number,
            user_name=user_name,
            created_at=now,
            expires_at=now + self.expiry,
            max_attempts=self.max_attempts,
        )
        self.store.put(otp_id, record)
        return record, code

    def check_code(self, otp_id: str, code: str) -> VerificationStatus:
        """
        Advance the verification state machine for one attempt.

        Expiry is checked before the attempt limit, and the attempt limit
        before the code itself. Terminal outcomes delete the record; a wrong
        code keeps it with one more attempt counted.
        """
        with self.store.lock(otp_id):
            record = self.store.get(otp_id)
            if record is None:
                return VerificationStatus.INVALID_ID

            if record.is_expired(self.clock()):
                self.store.delete(otp_id)
                return VerificationStatus.EXPIRED

            if record.attempts_exhausted:
                self.store.delete(otp_id)
                return VerificationStatus.ATTEMPTS_EXHAUSTED

            record.attempts += 1
            if record.matches(code):
                self.store.delete(otp_id)
                logger.info(f"✅ Successful verification for {mask_phone(record.subject)}")
                return VerificationStatus.VERIFIED

            self.store.put(otp_id, record)
            logger.info(
                f"❌ Wrong code for {otp_id} "
                f"(attempt {record.attempts}/{record.max_attempts})"
            )
            return VerificationStatus.INVALID_CODE

    async def send_otp(self, phone_number: str, user_name: Optional[str] = None) -> ServiceResult:
        record, code = self.issue_code(phone_number, user_name)
        message = (
            f"Your {config.BRAND_NAME} verification code is: {code}. "
            f"Valid for {int(self.expiry.total_seconds() // 60)} minutes."
        )

        try:
            message_sid = await self.sms.send_sms(phone_number, message)
        except SMSDeliveryError as e:
            self.store.delete(record.id)
            logger.error(f"❌ Fallback OTP delivery to {mask_phone(phone_number)} failed: {e}")
            return ServiceResult.err("Failed to send OTP")

        if message_sid is None and config.ENVIRONMENT != "production":
            logger.info(f"🔢 Demo mode - OTP for {mask_phone(phone_number)}: {code}")

        return ServiceResult.fallback(
            "OTP sent successfully",
            otpId=record.id,
            expiresAt=record.expires_at.isoformat(),
        )

    def verify_otp(self, otp_id: str, code: str) -> ServiceResult:
        status = self.check_code(otp_id, code)
        message = VERIFICATION_MESSAGES[status]
        if status is VerificationStatus.VERIFIED:
            return ServiceResult.fallback(message, status=status.value)
        return ServiceResult.err(message, status=status.value)

    # ------------------------------------------------------------------
    # Reminders
    # ------------------------------------------------------------------

    async def send_reminder(
        self,
        recipient: str,
        channel: str,
        message: str,
        scheduled_for: Optional[str] = None,
    ) -> ServiceResult:
        if channel == "sms":
            try:
                await self.sms.send_sms(recipient, message)
            except SMSDeliveryError as e:
                logger.error(f"❌ Fallback reminder to {mask_phone(recipient)} failed: {e}")
                return ServiceResult.err("Failed to send reminder")
        else:
            masked = mask_email(recipient) if "@" in recipient else mask_phone(recipient)
            logger.info(
                f"📨 Demo mode - {channel} reminder for {masked} "
                f"not delivered (scheduled_for={scheduled_for})"
            )

        return ServiceResult.fallback(
            "Reminder sent successfully",
            reminderId=f"reminder_{uuid.uuid4().hex}",
        )
