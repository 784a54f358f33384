"""
Version and metadata endpoint
"""
from fastapi import APIRouter

from tkms.core.config import settings
from tkms.core.constants import API_VERSION, SERVICE_NAME

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Service name, version, API version and environment
    """
    return {
        "success": True,
        "service": SERVICE_NAME,
        "version": settings.VERSION or "1.0.0",
        "apiVersion": API_VERSION,
        "env": settings.APP_ENV,
    }
