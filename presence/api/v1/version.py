"""
Version and metadata endpoint
"""
from fastapi import APIRouter
from presence.core.config import settings
from presence.core.constants import SERVICE_NAME

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Service name, version, environment and timezone
    """
    return {
        "service": SERVICE_NAME,
        "version": settings.VERSION or "1.0.0",
        "env": settings.APP_ENV,
        "tz": settings.OFFICE_TZ,
    }
