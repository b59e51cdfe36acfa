"""
Service wiring for the route layer.

One gateway client, one SMS sender and one record store per domain are shared
by every request in the process. Tests override these with
``app.dependency_overrides``.
"""

from functools import lru_cache

from . import config
from .domain.appointments.fallback import AppointmentFallback
from .domain.appointments.service import AppointmentService
from .domain.claims.fallback import ClaimsFallback
from .domain.claims.service import ClaimsService
from .domain.communication.fallback import CommunicationFallback
from .domain.communication.service import CommunicationService
from .domain.triage.fallback import TriageFallback
from .domain.triage.service import TriageService
from .services.gateway_client import GatewayClient, get_gateway_client
from .services.sms_service import SMSService
from .stores import InMemoryRecordStore


def _fallback_store(name: str) -> InMemoryRecordStore:
    return InMemoryRecordStore(
        name,
        ttl_seconds=config.FALLBACK_RECORD_TTL_SECONDS,
        max_records=config.FALLBACK_MAX_RECORDS,
    )


def get_gateway() -> GatewayClient:
    return get_gateway_client()


@lru_cache(maxsize=1)
def get_communication_service() -> CommunicationService:
    store = InMemoryRecordStore(
        "verification",
        ttl_seconds=config.OTP_RECORD_RETENTION_SECONDS,
        max_records=config.FALLBACK_MAX_RECORDS,
    )
    return CommunicationService(get_gateway(), CommunicationFallback(store, SMSService()))


@lru_cache(maxsize=1)
def get_appointment_service() -> AppointmentService:
    return AppointmentService(get_gateway(), AppointmentFallback(_fallback_store("booking")))


@lru_cache(maxsize=1)
def get_triage_service() -> TriageService:
    return TriageService(get_gateway(), TriageFallback(_fallback_store("triage")))


@lru_cache(maxsize=1)
def get_claims_service() -> ClaimsService:
    return ClaimsService(get_gateway(), ClaimsFallback(_fallback_store("appeal")))
