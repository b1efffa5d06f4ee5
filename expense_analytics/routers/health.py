"""
Health Check Router
Simple health check endpoint
"""
from fastapi import APIRouter
from datetime import datetime, timezone

from expense_analytics.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "record_backend": settings.RECORD_BACKEND,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
