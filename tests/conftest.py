"""Shared fixtures for the medportal test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from medportal.domain.appointments.fallback import AppointmentFallback
from medportal.domain.appointments.service import AppointmentService
from medportal.domain.claims.fallback import ClaimsFallback
from medportal.domain.claims.service import ClaimsService
from medportal.domain.communication.fallback import CommunicationFallback
from medportal.domain.communication.service import CommunicationService
from medportal.domain.triage.fallback import TriageFallback
from medportal.domain.triage.service import TriageService
from medportal.services.gateway_client import GatewayResponse, GatewayUnavailable
from medportal.services.sms_service import SMSDeliveryError
from medportal.stores import InMemoryRecordStore

GATEWAY_URL = "https://gateway.test"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StubGateway:
    """
    Stand-in for GatewayClient.

    Operations without a configured response raise GatewayUnavailable, which
    is what a down gateway looks like to the domain services.
    """

    base_url = GATEWAY_URL

    def __init__(self, healthy: bool = False) -> None:
        self.responses: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.healthy = healthy

    def respond(self, service: str, operation: str, body: dict[str, Any]) -> None:
        self.responses[(service, operation)] = body

    async def call(self, service: str, operation: str, params=None) -> GatewayResponse:
        self.calls.append((service, operation, dict(params or {})))
        body = self.responses.get((service, operation))
        if body is None:
            raise GatewayUnavailable(service, operation, "connection refused", 3)
        return GatewayResponse(success=bool(body.get("success")), payload=body)

    async def health_check(self) -> bool:
        return self.healthy


class FakeSMS:
    """Records outgoing messages instead of calling Twilio."""

    def __init__(self, fail: bool = False, sid: Optional[str] = "SM123") -> None:
        self.fail = fail
        self.sid = sid
        self.sent: list[tuple[str, str]] = []

    async def send_sms(self, to_phone: str, message_body: str) -> Optional[str]:
        if self.fail:
            raise SMSDeliveryError("[21211] Invalid 'To' Phone Number")
        self.sent.append((to_phone, message_body))
        return self.sid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def sms() -> FakeSMS:
    return FakeSMS()


@pytest.fixture
def communication_fallback(clock: FakeClock, sms: FakeSMS) -> CommunicationFallback:
    store = InMemoryRecordStore("verification", ttl_seconds=3600, clock=clock)
    return CommunicationFallback(store, sms, clock=clock, expiry=timedelta(minutes=10), max_attempts=3)


@pytest.fixture
def communication_service(
    gateway: StubGateway, communication_fallback: CommunicationFallback
) -> CommunicationService:
    return CommunicationService(gateway, communication_fallback)


@pytest.fixture
def appointment_service(gateway: StubGateway, clock: FakeClock) -> AppointmentService:
    store = InMemoryRecordStore("booking", clock=clock)
    return AppointmentService(gateway, AppointmentFallback(store, clock=clock))


@pytest.fixture
def triage_service(gateway: StubGateway, clock: FakeClock) -> TriageService:
    store = InMemoryRecordStore("triage", clock=clock)
    return TriageService(gateway, TriageFallback(store, clock=clock))


@pytest.fixture
def claims_service(gateway: StubGateway, clock: FakeClock) -> ClaimsService:
    store = InMemoryRecordStore("appeal", clock=clock)
    return ClaimsService(gateway, ClaimsFallback(store, clock=clock))
