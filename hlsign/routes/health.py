"""
Health check and monitoring routes
"""
from fastapi import APIRouter
from hlsign import __version__
from hlsign.models import HealthResponse
from hlsign.config import settings
from hlsign.services.action_signer import EIP712_DOMAIN
from hlsign.routes.signing import signer
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Get the current health status of the signing service"
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for monitoring and load balancers.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        hyperliquid_testnet=settings.hyperliquid_testnet
    )


@router.get(
    "/status",
    summary="Service Status",
    description="Detailed service status information"
)
async def service_status() -> dict:
    """
    Detailed service status for debugging and monitoring.
    """
    return {
        "service": "Hyperliquid Signing Service",
        "version": __version__,
        "environment": settings.environment,
        "configuration": {
            "hyperliquid_testnet": settings.hyperliquid_testnet,
            "phantom_agent_source": signer.source,
            "verify_signatures": settings.verify_signatures,
            "eip712_domain": EIP712_DOMAIN,
            "cors_origins": settings.cors_origins,
            "rate_limit_per_minute": settings.rate_limit_per_minute
        },
        "status": "operational"
    }
