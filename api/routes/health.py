"""
Health check endpoints
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from api.dependencies import OpinionClientDep
from api.schemas.envelope import HealthResponse
from config.settings import settings

router = APIRouter()


@router.get("/")
async def root():
    """Simple health check endpoint"""
    return {
        "status": "online",
        "service": "Opinion Portfolio Tracker API",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health", response_model=HealthResponse)
async def health(opinion_client: OpinionClientDep):
    """Detailed health check with upstream configuration"""
    return HealthResponse(
        status="healthy",
        service="Opinion Portfolio Tracker API",
        timestamp=datetime.now(timezone.utc).isoformat(),
        upstream=opinion_client.base_url,
        api_key_configured=bool(opinion_client.api_key),
        environment=settings.ENVIRONMENT,
    )
