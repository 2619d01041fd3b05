"""Application lifespan: startup and shutdown wiring.

Startup: logging, telemetry (if enabled), cleanup agent and its scheduler.
Shutdown runs in reverse: scheduler, telemetry, SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from cachesweep.core.config import Settings, get_settings
from cachesweep.shared.telemetry.logging import setup_logging
from cachesweep.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def _start_telemetry(app: FastAPI, settings: Settings) -> TelemetryConfig:
    telemetry = TelemetryConfig(
        service_name=settings.app_name,
        service_version=settings.app_version,
        environment=settings.telemetry_environment,
        metric_export_interval_seconds=settings.cleanup_poll_interval_seconds,
    )
    telemetry.setup_telemetry(
        exporter_type=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    )
    set_telemetry(telemetry)
    telemetry.instrument_fastapi(app)
    telemetry.instrument_logging()
    return telemetry


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the cleanup scheduler (when CLEANUP_ENABLED) and tear everything down on exit.

    The scheduler is always stored on app.state so on-demand runs work even
    with periodic cleanup disabled.
    """
    settings = get_settings()
    setup_logging()
    if settings.telemetry_enabled:
        _start_telemetry(app, settings)

    from cachesweep.infrastructure.factory import CleanupAgentFactory
    from cachesweep.infrastructure.persistence.database import dispose_engine, get_engine
    from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.instrument_sqlalchemy(get_engine())

    scheduler = CleanupScheduler(CleanupAgentFactory.create_cleanup_agent(settings))
    app.state.cleanup_scheduler = scheduler
    if settings.cleanup_enabled:
        scheduler.start()
    else:
        logger.info("Periodic cache cleanup disabled (CLEANUP_ENABLED=false)")

    try:
        yield
    finally:
        await scheduler.stop()
        app.state.cleanup_scheduler = None
        logger.info("Cleanup scheduler stopped")
        if telemetry is not None:
            telemetry.shutdown()
            set_telemetry(None)
        await dispose_engine()
