"""Simple health and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.api.dependencies.magento import get_magento_client
from storefront.services.magento_client import MagentoAPIError, MagentoClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", summary="Liveness check")
async def live() -> dict[str, str]:
    """Indicates the storefront process is running."""
    return {"status": "ok", "service": "storefront"}


@router.get("/ready", summary="Readiness check")
async def ready(
    client: MagentoClient = Depends(get_magento_client),
) -> dict[str, Any]:
    """Check that the commerce backend answers a categories request.

    Used by load balancers to determine if traffic should be routed to this instance.
    """
    checks: dict[str, Any] = {
        "status": "ok",
        "service": "storefront",
        "checks": {},
    }

    try:
        await client.get_categories()
        checks["checks"]["backend"] = {
            "status": "healthy",
            "message": "Backend connection successful",
        }
    except MagentoAPIError as e:
        logger.error(f"Backend health check failed: {e}")
        checks["status"] = "unhealthy"
        checks["checks"]["backend"] = {
            "status": "unhealthy",
            "message": str(e),
        }
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        ) from e

    return checks
