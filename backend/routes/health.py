"""
Service status endpoint.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status

from config import Settings
from deps import get_catalog, get_settings
from domain.catalog import Catalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "Baroque Print API v2 - Pre-upload flow"


@router.get("/", status_code=status.HTTP_200_OK)
@router.get("/health", status_code=status.HTTP_200_OK, include_in_schema=False)
async def health_check(
    settings: Settings = Depends(get_settings),
    catalog: Catalog = Depends(get_catalog),
):
    """Readiness: which credentials are configured (booleans only)."""
    return {
        "status": SERVICE_NAME,
        "products": catalog.ids(),
        "imageStrategy": settings.image_strategy,
        "config": settings.configured_credentials(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
