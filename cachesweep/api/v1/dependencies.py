"""API dependencies: access to objects created by the lifespan."""

from fastapi import Request

from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler


def get_scheduler(request: Request) -> CleanupScheduler | None:
    """Return the cleanup scheduler stored on app.state (None until startup ran)."""
    return getattr(request.app.state, "cleanup_scheduler", None)
