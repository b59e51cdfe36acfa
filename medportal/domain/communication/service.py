"""Communication service - one-time passwords and reminders"""

import logging
from typing import Optional

from ...services.gateway_client import GatewayClient
from ...shared.envelope import ServiceResult
from ..base import GatewayBackedService
from .fallback import CommunicationFallback

logger = logging.getLogger(__name__)


class CommunicationService(GatewayBackedService):
    """Service layer for the gateway's auth-comm operations"""

    gateway_service = "auth-comm"

    def __init__(self, gateway: GatewayClient, fallback: CommunicationFallback):
        super().__init__(gateway)
        self.fallback = fallback

    async def send_otp(self, phone_number: str, user_name: Optional[str] = None) -> ServiceResult:
        """Issue a verification code to a phone number"""
        payload = await self._try_gateway(
            "sendOTP",
            {"phoneNumber": phone_number, "userName": user_name},
            required=("otpId",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "OTP sent successfully",
                otpId=payload["otpId"],
                expiresAt=payload.get("expiresAt"),
            )
        return await self.fallback.send_otp(phone_number, user_name)

    async def verify_otp(self, otp_id: str, otp_code: str) -> ServiceResult:
        """Check a code previously issued by send_otp"""
        payload = await self._try_gateway("verifyOTP", {"otpId": otp_id, "otpCode": otp_code})
        if payload is not None:
            return ServiceResult.ok("OTP verified successfully", status="verified")
        return self.fallback.verify_otp(otp_id, otp_code)

    async def send_reminder(
        self,
        recipient: str,
        channel: str,
        message: str,
        scheduled_for: Optional[str] = None,
    ) -> ServiceResult:
        """Schedule or send an SMS, email or push reminder"""
        payload = await self._try_gateway(
            "sendReminder",
            {
                "recipient": recipient,
                "type": channel,
                "message": message,
                "scheduledFor": scheduled_for,
            },
            required=("reminderId",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Reminder scheduled successfully", reminderId=payload["reminderId"]
            )
        return await self.fallback.send_reminder(recipient, channel, message, scheduled_for)
