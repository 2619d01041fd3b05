"""Cache cleanup API: on-demand run and last-run summary."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cachesweep.api.v1.dependencies import get_scheduler
from cachesweep.domain.exceptions import ResourceNotFoundException, SqlNotConfiguredException
from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler
from cachesweep.schemas.cache_cleanup import CleanupRunResponse

router = APIRouter()


@router.post("/run", response_model=CleanupRunResponse)
async def run_cache_cleanup(
    scheduler: Annotated[CleanupScheduler | None, Depends(get_scheduler)],
) -> CleanupRunResponse:
    """Run one cache cleanup now.

    Waits for an in-progress scheduled run to finish first, then sweeps
    every authoritative data type and returns per-table deleted counts.
    """
    if scheduler is None:
        raise SqlNotConfiguredException()
    result = await scheduler.run_now()
    return CleanupRunResponse.from_result(result)


@router.get("/last-run", response_model=CleanupRunResponse)
async def get_last_cache_cleanup(
    scheduler: Annotated[CleanupScheduler | None, Depends(get_scheduler)],
) -> CleanupRunResponse:
    """Return the summary of the most recent completed run."""
    if scheduler is None or scheduler.last_result is None:
        raise ResourceNotFoundException("cleanup_run", "last")
    return CleanupRunResponse.from_result(scheduler.last_result)
