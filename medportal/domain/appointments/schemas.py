"""Appointment domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_iso_date


class DateRange(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(v)

    @model_validator(mode="after")
    def check_order(self):
        if self.end[:10] < self.start[:10]:
            raise ValueError("Date range end must not be before start")
        return self


class SearchLocation(BaseModel):
    latitude: float
    longitude: float
    radius_km: float = 10


class SearchSlotsRequest(BaseModel):
    """Request to search available appointment slots"""

    dateRange: DateRange
    providerId: Optional[str] = None
    specialty: Optional[str] = None
    location: Optional[SearchLocation] = None


class BookAppointmentRequest(BaseModel):
    """Request to book an appointment slot"""

    slotId: str = Field(min_length=1)
    patientId: str = Field(min_length=1)
    notes: Optional[str] = None
    paymentMethod: Optional[Literal["online", "cash", "insurance"]] = None


class CancelAppointmentRequest(BaseModel):
    """Request to cancel an appointment"""

    appointmentId: str = Field(min_length=1)
    reason: Optional[str] = None


class MeetingLinkRequest(BaseModel):
    """Request to create a video meeting link"""

    appointmentId: str = Field(min_length=1)
    durationMinutes: Optional[int] = Field(default=None, gt=0, le=480)
