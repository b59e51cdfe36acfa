"""Communication router - FastAPI endpoints for OTP and reminders"""

import logging

from fastapi import APIRouter, Depends

from ...dependencies import get_communication_service
from .schemas import SendOTPRequest, SendReminderRequest, VerifyOTPRequest
from .service import CommunicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Communication"])


@router.post("/otp/send")
async def send_otp(
    data: SendOTPRequest,
    service: CommunicationService = Depends(get_communication_service),
):
    """Send a one-time password to a phone number"""
    result = await service.send_otp(data.phoneNumber, data.userName)
    return result.to_envelope()


@router.post("/otp/verify")
async def verify_otp(
    data: VerifyOTPRequest,
    service: CommunicationService = Depends(get_communication_service),
):
    """Verify a one-time password"""
    result = await service.verify_otp(data.otpId, data.otpCode)
    return result.to_envelope()


@router.post("/reminders/send")
async def send_reminder(
    data: SendReminderRequest,
    service: CommunicationService = Depends(get_communication_service),
):
    """Send or schedule a reminder"""
    result = await service.send_reminder(data.recipient, data.type, data.message, data.scheduledFor)
    return result.to_envelope()
