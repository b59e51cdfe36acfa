"""Appointment service - slot search, booking and visit history"""

import logging
from typing import Any, Optional

from ...services.gateway_client import GatewayClient
from ...shared.envelope import ServiceResult
from ..base import GatewayBackedService
from .fallback import AppointmentFallback

logger = logging.getLogger(__name__)


class AppointmentService(GatewayBackedService):
    """Service layer for the gateway's appointments operations"""

    gateway_service = "appointments"

    def __init__(self, gateway: GatewayClient, fallback: AppointmentFallback):
        super().__init__(gateway)
        self.fallback = fallback

    async def search_slots(
        self,
        date_range: dict[str, Any],
        provider_id: Optional[str] = None,
        specialty: Optional[str] = None,
        location: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        payload = await self._try_gateway(
            "searchSlots",
            {
                "providerId": provider_id,
                "specialty": specialty,
                "dateRange": date_range,
                "location": location,
            },
        )
        if payload is not None:
            return ServiceResult.ok("Available slots found", slots=payload.get("slots") or [])
        return self.fallback.search_slots(date_range, provider_id, specialty, location)

    async def book_slot(
        self,
        slot_id: str,
        patient_id: str,
        notes: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> ServiceResult:
        payload = await self._try_gateway(
            "bookSlot",
            {
                "slotId": slot_id,
                "patientId": patient_id,
                "notes": notes,
                "paymentMethod": payment_method,
            },
            required=("appointmentId",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Appointment booked successfully",
                appointmentId=payload["appointmentId"],
                confirmationCode=payload.get("confirmationCode"),
                meetingLink=payload.get("meetingLink"),
                status=payload.get("status", "confirmed"),
            )
        return self.fallback.book_slot(slot_id, patient_id, notes, payment_method)

    async def cancel_appointment(self, appointment_id: str, reason: Optional[str] = None) -> ServiceResult:
        payload = await self._try_gateway(
            "cancelAppointment", {"appointmentId": appointment_id, "reason": reason}
        )
        if payload is not None:
            return ServiceResult.ok("Appointment cancelled successfully")
        return self.fallback.cancel_appointment(appointment_id)

    async def create_meeting_link(self, appointment_id: str, duration_minutes: Optional[int] = None) -> ServiceResult:
        duration_minutes = duration_minutes or 30
        payload = await self._try_gateway(
            "createMeetingLink",
            {"appointmentId": appointment_id, "durationMinutes": duration_minutes},
            required=("meetingLink",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Meeting link created successfully", meetingLink=payload["meetingLink"]
            )
        return self.fallback.create_meeting_link(appointment_id, duration_minutes)

    async def get_history(self, patient_id: str) -> ServiceResult:
        payload = await self._try_gateway("getHistory", {"patientId": patient_id})
        if payload is not None:
            return ServiceResult.ok(
                "Appointment history retrieved successfully",
                appointments=payload.get("appointments") or [],
            )
        return self.fallback.get_history(patient_id)
