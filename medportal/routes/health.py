"""Health check endpoints"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..dependencies import get_gateway
from ..services.gateway_client import GatewayClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

API_VERSION = "1.0.0"


@router.get("/health")
async def health(gateway: GatewayClient = Depends(get_gateway)):
    """Report service liveness and whether the clinical gateway answers"""
    gateway_healthy = await gateway.health_check()
    if not gateway_healthy:
        logger.info("Gateway unreachable, domain services will answer in fallback mode")

    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "gateway": {
            "baseUrl": gateway.base_url,
            "healthy": gateway_healthy,
        },
    }
