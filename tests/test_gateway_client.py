"""Unit tests for the clinical gateway client."""

from __future__ import annotations

import json

import httpx
import pytest
from respx import MockRouter

from medportal.services.gateway_client import (
    GatewayClient,
    GatewayRequest,
    GatewayUnavailable,
    RetryPolicy,
)

GATEWAY_URL = "https://gateway.test"

SEND_OTP_URL = f"{GATEWAY_URL}/auth-comm/sendOTP"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def client(sleeper: RecordingSleep) -> GatewayClient:
    return GatewayClient(
        base_url=GATEWAY_URL,
        api_key="test-key",
        client_id="test-client",
        timeout=1.0,
        retry_policy=RetryPolicy(max_attempts=3, base_delay_ms=1000, max_delay_ms=5000),
        sleep=sleeper,
    )


class TestRetryPolicy:
    def test_delays_double_per_attempt(self):
        policy = RetryPolicy(max_attempts=5, base_delay_ms=1000, max_delay_ms=5000)
        assert [policy.delay_ms(n) for n in (1, 2, 3)] == [1000, 2000, 4000]

    def test_delay_capped_at_max(self):
        policy = RetryPolicy(max_attempts=6, base_delay_ms=1000, max_delay_ms=5000)
        assert policy.delay_ms(4) == 5000
        assert policy.delay_ms(10) == 5000


def test_request_params_are_frozen_copy():
    params = {"phoneNumber": "+15551234567"}
    request = GatewayRequest.build("auth-comm", "sendOTP", params)
    params["phoneNumber"] = "changed"

    assert request.params["phoneNumber"] == "+15551234567"
    with pytest.raises(TypeError):
        request.params["phoneNumber"] = "x"  # type: ignore[index]


@pytest.mark.asyncio
async def test_call_success_sends_identity_and_params(
    client: GatewayClient, respx_mock: MockRouter, sleeper: RecordingSleep
) -> None:
    route = respx_mock.post(SEND_OTP_URL).mock(
        return_value=httpx.Response(200, json={"success": True, "otpId": "otp_remote"})
    )

    response = await client.call("auth-comm", "sendOTP", {"phoneNumber": "+15551234567"})

    assert response.success is True
    assert response.get("otpId") == "otp_remote"
    assert route.call_count == 1
    assert sleeper.delays == []

    sent = route.calls[0].request
    assert sent.headers["x-api-key"] == "test-key"
    assert sent.headers["content-type"] == "application/json"
    body = json.loads(sent.content)
    assert body["phoneNumber"] == "+15551234567"
    assert body["clientId"] == "test-client"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_success_false_is_returned_not_raised(
    client: GatewayClient, respx_mock: MockRouter
) -> None:
    respx_mock.post(SEND_OTP_URL).mock(
        return_value=httpx.Response(200, json={"success": False, "message": "nope"})
    )

    response = await client.call("auth-comm", "sendOTP", {})

    assert response.success is False
    assert response.get("message") == "nope"


@pytest.mark.asyncio
async def test_connection_errors_retried_with_backoff(
    client: GatewayClient, respx_mock: MockRouter, sleeper: RecordingSleep
) -> None:
    route = respx_mock.post(SEND_OTP_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(GatewayUnavailable) as exc_info:
        await client.call("auth-comm", "sendOTP", {"phoneNumber": "+15551234567"})

    assert route.call_count == 3
    assert sleeper.delays == [1.0, 2.0]
    assert exc_info.value.attempts == 3
    assert exc_info.value.service == "auth-comm"
    assert exc_info.value.operation == "sendOTP"
    assert "connection refused" in exc_info.value.last_error


@pytest.mark.asyncio
async def test_timeout_then_success(
    client: GatewayClient, respx_mock: MockRouter, sleeper: RecordingSleep
) -> None:
    route = respx_mock.post(SEND_OTP_URL).mock(
        side_effect=[
            httpx.ReadTimeout("timed out"),
            httpx.Response(200, json={"success": True, "otpId": "otp_remote"}),
        ]
    )

    response = await client.call("auth-comm", "sendOTP", {})

    assert response.get("otpId") == "otp_remote"
    assert route.call_count == 2
    assert sleeper.delays == [1.0]


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 404, 500, 503])
async def test_http_error_status_is_terminal(
    client: GatewayClient, respx_mock: MockRouter, sleeper: RecordingSleep, status_code: int
) -> None:
    route = respx_mock.post(SEND_OTP_URL).mock(
        return_value=httpx.Response(status_code, json={"message": "rejected"})
    )

    with pytest.raises(GatewayUnavailable) as exc_info:
        await client.call("auth-comm", "sendOTP", {})

    assert route.call_count == 1
    assert sleeper.delays == []
    assert exc_info.value.last_error == f"HTTP {status_code}: rejected"


@pytest.mark.asyncio
async def test_missing_success_flag_is_terminal(
    client: GatewayClient, respx_mock: MockRouter
) -> None:
    route = respx_mock.post(SEND_OTP_URL).mock(
        return_value=httpx.Response(200, json={"otpId": "otp_remote"})
    )

    with pytest.raises(GatewayUnavailable) as exc_info:
        await client.call("auth-comm", "sendOTP", {})

    assert route.call_count == 1
    assert exc_info.value.last_error == "Invalid response: missing success flag"


@pytest.mark.asyncio
async def test_failure_message_never_carries_raw_phone(
    client: GatewayClient, respx_mock: MockRouter
) -> None:
    respx_mock.post(SEND_OTP_URL).mock(
        side_effect=httpx.ConnectError("refused while sending +15551234567")
    )

    with pytest.raises(GatewayUnavailable) as exc_info:
        await client.call("auth-comm", "sendOTP", {"phoneNumber": "+15551234567"})

    assert "+15551234567" not in exc_info.value.last_error


@pytest.mark.asyncio
async def test_health_check(client: GatewayClient, respx_mock: MockRouter) -> None:
    respx_mock.get(f"{GATEWAY_URL}/health").mock(return_value=httpx.Response(200, json={}))
    assert await client.health_check() is True


@pytest.mark.asyncio
async def test_health_check_unreachable(
    client: GatewayClient, respx_mock: MockRouter, sleeper: RecordingSleep
) -> None:
    route = respx_mock.get(f"{GATEWAY_URL}/health").mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    assert await client.health_check() is False
    assert route.call_count == 1
    assert sleeper.delays == []
