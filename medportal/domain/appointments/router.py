"""Appointment router - FastAPI endpoints for appointment operations"""

import logging

from fastapi import APIRouter, Depends

from ...dependencies import get_appointment_service
from .schemas import (
    BookAppointmentRequest,
    CancelAppointmentRequest,
    MeetingLinkRequest,
    SearchSlotsRequest,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.post("/search")
async def search_slots(
    data: SearchSlotsRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Search available appointment slots"""
    result = await service.search_slots(
        date_range=data.dateRange.model_dump(),
        provider_id=data.providerId,
        specialty=data.specialty,
        location=data.location.model_dump() if data.location else None,
    )
    return result.to_envelope()


@router.post("/book")
async def book_slot(
    data: BookAppointmentRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment slot"""
    result = await service.book_slot(data.slotId, data.patientId, data.notes, data.paymentMethod)
    return result.to_envelope()


@router.post("/cancel")
async def cancel_appointment(
    data: CancelAppointmentRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Cancel an appointment"""
    result = await service.cancel_appointment(data.appointmentId, data.reason)
    return result.to_envelope()


@router.post("/meeting-link")
async def create_meeting_link(
    data: MeetingLinkRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create a video consultation link"""
    result = await service.create_meeting_link(data.appointmentId, data.durationMinutes)
    return result.to_envelope()


@router.get("/history/{patient_id}")
async def get_history(
    patient_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get a patient's appointment history"""
    result = await service.get_history(patient_id)
    return result.to_envelope()
