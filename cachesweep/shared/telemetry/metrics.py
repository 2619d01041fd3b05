"""Cleanup agent metric instruments (OpenTelemetry metrics API)."""

from __future__ import annotations

from opentelemetry import metrics

from cachesweep.core.constants import METRIC_CLEANUP_DURATION, METRIC_RECORDS_DELETED
from cachesweep.domain.enums import TableKind

_METER_NAME = "cachesweep.cleanup"


class CleanupMetrics:
    """Implements ICleanupMetrics on top of the global (or given) meter provider.

    Counter: records deleted, tagged dataType and table.
    Histogram: per-data-type cleanup duration in seconds, tagged dataType.
    """

    def __init__(self, meter_provider: metrics.MeterProvider | None = None) -> None:
        meter = metrics.get_meter(_METER_NAME, meter_provider=meter_provider)
        self._deleted = meter.create_counter(
            METRIC_RECORDS_DELETED,
            unit="1",
            description="Cache records deleted because their owning agent is no longer configured.",
        )
        self._duration = meter.create_histogram(
            METRIC_CLEANUP_DURATION,
            unit="s",
            description="Time spent cleaning the tables of one data type.",
        )

    def record_deleted(self, data_type: str, kind: TableKind, count: int) -> None:
        # Zero is recorded too, so every scanned table shows up in the series.
        self._deleted.add(count, {"dataType": data_type, "table": kind.name})

    def record_duration(self, data_type: str, seconds: float) -> None:
        self._duration.record(seconds, {"dataType": data_type})
