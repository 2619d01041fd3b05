"""Shared telemetry: logging setup, OpenTelemetry config, tracing and metrics helpers."""

from cachesweep.shared.telemetry.logging import get_logger, setup_logging
from cachesweep.shared.telemetry.metrics import CleanupMetrics
from cachesweep.shared.telemetry.telemetry import (
    TelemetryConfig,
    build_exporters,
    get_telemetry,
    set_telemetry,
)
from cachesweep.shared.telemetry.tracing import (
    TracedOperation,
    add_span_attributes,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "CleanupMetrics",
    "TelemetryConfig",
    "build_exporters",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
    "TracedOperation",
]
