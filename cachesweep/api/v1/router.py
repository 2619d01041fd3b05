"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from cachesweep.api.v1.endpoints import cache_cleanup, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    cache_cleanup.router, prefix="/cache-cleanup", tags=["cache-cleanup"]
)
