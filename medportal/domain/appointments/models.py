"""Bookings made while the gateway's appointments service is unavailable"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class BookingRecord:
    id: str
    slot_id: str
    patient_id: str
    confirmation_code: str
    created_at: datetime
    status: str = "confirmed"
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    meeting_link: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_history_entry(self) -> dict:
        return {
            "appointmentId": self.id,
            "slotId": self.slot_id,
            "status": self.status,
            "confirmationCode": self.confirmation_code,
            "meetingLink": self.meeting_link,
            "notes": self.notes,
            "bookedAt": self.created_at.isoformat(),
        }
