"""
Health endpoints
================

GET /        -- liveness banner
GET /health  -- simple health check
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from src.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/", response_model=HealthResponse, summary="Service banner")
async def root():
    return HealthResponse(
        message="NextCut API is running", timestamp=datetime.now(timezone.utc)
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse(timestamp=datetime.now(timezone.utc))
