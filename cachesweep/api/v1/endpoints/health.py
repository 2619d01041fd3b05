"""Health check endpoint. Used for liveness probes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cachesweep.api.v1.dependencies import get_scheduler
from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler
from cachesweep.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(
    scheduler: Annotated[CleanupScheduler | None, Depends(get_scheduler)],
) -> HealthResponse:
    """Return ok status and whether periodic cleanup is running."""
    return HealthResponse(scheduler_running=scheduler is not None and scheduler.is_running)
