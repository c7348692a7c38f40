"""Health check endpoint."""

import time

from fastapi import APIRouter, Depends
from ..dependencies import get_config
from ..models.config import APIConfig
from ..models.responses import HealthResponse
from ... import __version__

router = APIRouter()

_started_at = time.monotonic()


@router.get("/api/health", response_model=HealthResponse)
async def health_check(config: APIConfig = Depends(get_config)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=config.environment,
        uptime=round(time.monotonic() - _started_at, 2)
    )
