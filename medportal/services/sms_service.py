"""
Twilio SMS Service
Delivers one-time codes and reminders when the gateway cannot
"""

import logging
from typing import Optional

import httpx

from .. import config
from ..masking import mask_phone

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


class SMSDeliveryError(Exception):
    """Twilio refused or could not be reached."""


class SMSService:
    """Thin Twilio REST client. Without credentials it runs in demo mode and only logs."""

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
    ):
        self.account_sid = account_sid or config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or config.TWILIO_AUTH_TOKEN
        self.from_number = from_number or config.TWILIO_PHONE_NUMBER

    @property
    def is_configured(self) -> bool:
        # Twilio account SIDs always start with "AC"
        return bool(
            self.account_sid
            and self.account_sid.startswith("AC")
            and self.auth_token
            and len(self.auth_token) > 10
            and self.from_number
        )

    async def send_sms(self, to_phone: str, message_body: str) -> Optional[str]:
        """
        Send an SMS via Twilio

        Args:
            to_phone: Recipient phone number in E.164 format
            message_body: SMS message content

        Returns:
            Twilio message SID, or None in demo mode

        Raises:
            SMSDeliveryError: If Twilio rejects the message or is unreachable
        """
        if not self.is_configured:
            logger.info(f"📱 Demo mode - SMS to {mask_phone(to_phone)} not sent")
            return None

        logger.info(f"🚀 Sending SMS to Twilio API for {mask_phone(to_phone)}")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    TWILIO_API_URL.format(account_sid=self.account_sid),
                    auth=(self.account_sid, self.auth_token),
                    data={"To": to_phone, "From": self.from_number, "Body": message_body},
                    timeout=10.0,
                )
        except httpx.HTTPError as e:
            logger.error(f"Twilio API error: {str(e)}")
            raise SMSDeliveryError(str(e)) from e

        logger.info(f"📡 Twilio API response status: {response.status_code}")

        if response.status_code in [200, 201]:
            message_sid = response.json().get("sid")
            logger.info(f"✅ SMS sent successfully to {mask_phone(to_phone)} (SID: {message_sid})")
            return message_sid

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message", "Unknown error")
        error_code = error_data.get("code")
        logger.error(f"❌ Twilio API error [{error_code}]: {error_message}")
        raise SMSDeliveryError(f"[{error_code}] {error_message}" if error_code else error_message)
