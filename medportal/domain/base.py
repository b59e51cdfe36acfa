"""Base class for services that try the clinical gateway before falling back"""

import logging
from typing import Any, Mapping, Optional, Sequence

from ..services.gateway_client import GatewayClient, GatewayUnavailable

logger = logging.getLogger(__name__)


class GatewayBackedService:
    """
    Shared gateway-then-fallback plumbing for the domain services.

    Subclasses set ``gateway_service`` to the gateway's service name and call
    ``_try_gateway`` from each operation. A None return means the caller must
    use its fallback generator; gateway errors never escape this class.
    """

    gateway_service: str = ""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway

    async def _try_gateway(
        self,
        operation: str,
        params: Mapping[str, Any],
        required: Sequence[str] = (),
    ) -> Optional[dict[str, Any]]:
        """
        Call the gateway and return its payload when it is usable.

        A payload is usable when ``success`` is true and every key in
        ``required`` is present and non-empty.
        """
        # Drop unset optional fields so the gateway sees only what the caller gave
        params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self.gateway.call(self.gateway_service, operation, params)
        except GatewayUnavailable as e:
            logger.info(
                f"🔁 {self.gateway_service}/{operation} unavailable, using fallback: {e.last_error}"
            )
            return None

        if not response.success:
            logger.info(
                f"🔁 {self.gateway_service}/{operation} returned success=false, using fallback"
            )
            return None

        missing = [key for key in required if response.get(key) in (None, "")]
        if missing:
            logger.warning(
                f"⚠️ {self.gateway_service}/{operation} response missing {missing}, using fallback"
            )
            return None

        return response.payload
