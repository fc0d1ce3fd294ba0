"""Health and readiness endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..models import HealthStatus

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthStatus)
async def healthz(settings: Settings = Depends(get_settings)) -> HealthStatus:
    """Liveness probe endpoint; also reports whether deliveries are dry runs."""
    return HealthStatus(dryRun=settings.DRY_RUN)
