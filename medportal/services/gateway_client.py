"""
Clinical Gateway Client
Issues named (service, operation) calls to the remote clinical gateway with a
bounded retry policy, and reports every failure as GatewayUnavailable
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from .. import config
from ..masking import mask_sensitive_data, scrub_text

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class GatewayUnavailable(Exception):
    """Raised when a gateway call fails after retries or is rejected outright."""

    def __init__(self, service: str, operation: str, last_error: str, attempts: int):
        self.service = service
        self.operation = operation
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Gateway service unavailable: {last_error}")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff without jitter, capped at ``max_delay_ms``."""

    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 5000

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait after failed ``attempt`` (1-based) before the next one."""
        return min(self.base_delay_ms * 2 ** (attempt - 1), self.max_delay_ms)

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        return cls(
            max_attempts=config.GATEWAY_MAX_RETRIES,
            base_delay_ms=config.GATEWAY_BASE_DELAY_MS,
            max_delay_ms=config.GATEWAY_MAX_DELAY_MS,
        )


@dataclass(frozen=True)
class GatewayRequest:
    service: str
    operation: str
    params: Mapping[str, Any]
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(cls, service: str, operation: str, params: Optional[Mapping[str, Any]]) -> "GatewayRequest":
        # Freeze a private copy so later caller mutations cannot leak in
        return cls(service, operation, MappingProxyType(dict(params or {})))

    @property
    def path(self) -> str:
        return f"/{self.service}/{self.operation}"

    def body(self, client_id: str) -> dict[str, Any]:
        return {
            **self.params,
            "clientId": client_id,
            "timestamp": self.issued_at.isoformat(),
        }


@dataclass(frozen=True)
class GatewayResponse:
    success: bool
    payload: dict[str, Any]
    status_code: int = 200

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


# Network-level failures worth another attempt; everything else is terminal
TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.ConnectError)


class GatewayClient:
    """Client for the remote clinical gateway"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        client_id: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.base_url = (base_url or config.GATEWAY_BASE_URL).rstrip("/")
        self.api_key = api_key or config.GATEWAY_API_KEY
        self.client_id = client_id or config.GATEWAY_CLIENT_ID
        self.timeout = timeout if timeout is not None else config.GATEWAY_TIMEOUT_SECONDS
        self.retry_policy = retry_policy or RetryPolicy.from_config()
        self._sleep = sleep or asyncio.sleep

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                "X-API-Key": self.api_key,
            },
        )

    async def call(
        self, service: str, operation: str, params: Optional[Mapping[str, Any]] = None
    ) -> GatewayResponse:
        """
        Call ``{base_url}/{service}/{operation}``.

        Timeouts and connection failures are retried with backoff up to the
        policy limit. Any HTTP rejection or malformed body ends the call
        immediately.

        Raises:
            GatewayUnavailable: when no acceptable response was obtained
        """
        request = GatewayRequest.build(service, operation, params)
        masked_params = mask_sensitive_data(dict(request.params))
        max_attempts = self.retry_policy.max_attempts
        last_error = "Gateway request failed"
        attempt = 0

        async with self._http_client() as client:
            for attempt in range(1, max_attempts + 1):
                logger.info(
                    f"🔄 Gateway {request.path} attempt {attempt}/{max_attempts} params={masked_params}"
                )
                try:
                    response = await client.post(request.path, json=request.body(self.client_id))
                except TRANSIENT_ERRORS as e:
                    last_error = str(e) or e.__class__.__name__
                    logger.warning(
                        f"⚠️ Gateway {request.path} attempt {attempt} failed: "
                        f"{scrub_text(last_error, request.params)}"
                    )
                    if attempt < max_attempts:
                        delay_ms = self.retry_policy.delay_ms(attempt)
                        logger.info(f"⏳ Retrying {request.path} in {delay_ms}ms")
                        await self._sleep(delay_ms / 1000)
                        continue
                    break
                except httpx.HTTPError as e:
                    last_error = str(e) or e.__class__.__name__
                    logger.warning(
                        f"⚠️ Gateway {request.path} attempt {attempt} failed: "
                        f"{scrub_text(last_error, request.params)}"
                    )
                    break

                accepted = self._parse_response(response)
                if accepted is not None:
                    logger.info(f"✅ Gateway {request.path} succeeded (success={accepted.success})")
                    return accepted

                # Rejections are terminal
                last_error = self._describe_rejection(response)
                logger.warning(
                    f"❌ Gateway {request.path} rejected: {scrub_text(last_error, request.params)}"
                )
                break

        last_error = scrub_text(last_error, request.params)
        logger.error(
            f"❌ Gateway {request.path} failed after {attempt} attempt(s): {last_error} "
            f"params={masked_params}"
        )
        raise GatewayUnavailable(service, operation, last_error, attempt)

    @staticmethod
    def _parse_response(response: httpx.Response) -> Optional[GatewayResponse]:
        """Accept only HTTP 200 with a JSON object carrying a ``success`` flag."""
        if response.status_code != 200:
            return None
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict) or "success" not in body:
            return None
        return GatewayResponse(success=bool(body["success"]), payload=body, status_code=200)

    @staticmethod
    def _describe_rejection(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return f"HTTP {response.status_code}: {body['message']}"
        if response.status_code == 200:
            return "Invalid response: missing success flag"
        return f"HTTP {response.status_code}"

    async def health_check(self) -> bool:
        """Single unretried GET /health. Never raises."""
        try:
            async with self._http_client() as client:
                response = await client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ Gateway health check failed: {str(e)}")
            return False


_gateway_client: Optional[GatewayClient] = None


def get_gateway_client() -> GatewayClient:
    """Get or create the process-wide gateway client"""
    global _gateway_client

    if _gateway_client is None:
        _gateway_client = GatewayClient()
        logger.info(f"🔗 Gateway client configured for {_gateway_client.base_url}")

    return _gateway_client
