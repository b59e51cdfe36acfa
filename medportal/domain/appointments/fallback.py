"""
Appointments fallback
Synthesizes slots and keeps bookings locally while the gateway's appointments
service is unavailable
"""

import logging
import secrets
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from ... import config
from ...masking import mask_id
from ...shared.envelope import ServiceResult
from ...stores import Clock, RecordStore, utc_now
from .models import BookingRecord

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS = [
    {
        "providerId": "dr_smith_001",
        "providerName": "Dr. Sarah Smith",
        "durationMinutes": 30,
        "price": 150,
        "startTime": time(10, 0),
        "location": {"name": "Downtown Clinic", "address": "12 Market Street"},
    },
    {
        "providerId": "dr_jones_002",
        "providerName": "Dr. Michael Jones",
        "durationMinutes": 45,
        "price": 200,
        "startTime": time(14, 30),
        "location": {"name": "Uptown Medical Center", "address": "480 Park Avenue"},
    },
]
DEFAULT_SPECIALTY = "General Medicine"


def _parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def generate_confirmation_code() -> str:
    return str(100000 + secrets.randbelow(900000))


class AppointmentFallback:
    def __init__(self, store: RecordStore[BookingRecord], clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def _slot_days(self, date_range: dict[str, Any]) -> list[date]:
        """The two days after the range start that stay inside the range, else the start day."""
        start = _parse_day(date_range.get("start")) or self.clock().date()
        end = _parse_day(date_range.get("end"))
        days = [start + timedelta(days=offset) for offset in (1, 2)]
        if end is not None:
            days = [d for d in days if d <= end]
        return days or [start]

    def search_slots(
        self,
        date_range: dict[str, Any],
        provider_id: Optional[str] = None,
        specialty: Optional[str] = None,
        location: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        slots = []
        for index, day in enumerate(self._slot_days(date_range)):
            provider = DEFAULT_PROVIDERS[index % len(DEFAULT_PROVIDERS)]
            starts_at = datetime.combine(day, provider["startTime"], tzinfo=timezone.utc)
            slots.append(
                {
                    "slotId": f"slot_{uuid.uuid4().hex}",
                    "providerId": provider_id or provider["providerId"],
                    "providerName": provider["providerName"],
                    "specialty": specialty or DEFAULT_SPECIALTY,
                    "datetime": starts_at.isoformat(),
                    "durationMinutes": provider["durationMinutes"],
                    "price": provider["price"],
                    "location": dict(location or provider["location"]),
                    "availability": "available",
                }
            )
        return ServiceResult.fallback("Mock appointment slots generated", slots=slots)

    def book_slot(
        self,
        slot_id: str,
        patient_id: str,
        notes: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> ServiceResult:
        appointment_id = f"appt_{uuid.uuid4().hex}"
        record = BookingRecord(
            id=appointment_id,
            slot_id=slot_id,
            patient_id=patient_id,
            confirmation_code=generate_confirmation_code(),
            created_at=self.clock(),
            notes=notes,
            payment_method=payment_method,
            meeting_link=f"{config.MEETING_BASE_URL}/{appointment_id}",
        )
        self.store.put(appointment_id, record)
        logger.info(f"📅 Fallback booking {appointment_id} for patient {mask_id(patient_id)}")

        return ServiceResult.fallback(
            "Appointment booked successfully",
            appointmentId=record.id,
            confirmationCode=record.confirmation_code,
            meetingLink=record.meeting_link,
            status=record.status,
        )

    def cancel_appointment(self, appointment_id: str) -> ServiceResult:
        with self.store.lock(appointment_id):
            if not self.store.delete(appointment_id):
                return ServiceResult.err("Appointment not found")
        logger.info(f"🗑️ Fallback booking {appointment_id} cancelled")
        return ServiceResult.fallback("Appointment cancelled successfully")

    def create_meeting_link(self, appointment_id: str, duration_minutes: int = 30) -> ServiceResult:
        meeting_link = f"{config.MEETING_BASE_URL}/{appointment_id}?duration={duration_minutes}"
        with self.store.lock(appointment_id):
            record = self.store.get(appointment_id)
            if record is not None:
                record.meeting_link = meeting_link
                record.updated_at = self.clock()
                self.store.put(appointment_id, record)
        return ServiceResult.fallback("Meeting link created successfully", meetingLink=meeting_link)

    def get_history(self, patient_id: str) -> ServiceResult:
        now = self.clock()
        appointments = [
            {
                "appointmentId": f"hist_{uuid.uuid4().hex}",
                "providerId": "dr_smith_001",
                "providerName": "Dr. Sarah Smith",
                "specialty": DEFAULT_SPECIALTY,
                "datetime": (now - timedelta(days=7)).isoformat(),
                "status": "completed",
                "notes": "Regular checkup completed",
            }
        ]
        appointments.extend(
            record.to_history_entry()
            for record in self.store.values()
            if record.patient_id == patient_id
        )
        return ServiceResult.fallback(
            "Appointment history retrieved", appointments=appointments
        )
