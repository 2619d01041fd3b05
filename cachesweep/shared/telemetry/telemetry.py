"""OpenTelemetry tracing and metrics configuration.

One TelemetryConfig installs both global providers: the tracer provider
(per-run and per-data-type spans, one span per delete batch) and the
meter provider (deleted-records counter, cleanup duration histogram).
Exporters are console, OTLP gRPC, or none.
"""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricExporter,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from cachesweep.core.constants import DEFAULT_POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

Exporters = tuple[SpanExporter | None, MetricExporter | None]


def build_exporters(exporter_type: str, otlp_endpoint: str | None = None) -> Exporters:
    """Return (span exporter, metric exporter) for exporter_type.

    "otlp" without an endpoint and unknown types fall back to console.
    """
    match exporter_type:
        case "none":
            return None, None
        case "otlp" if otlp_endpoint:
            insecure = otlp_endpoint.startswith("http://")
            return (
                OTLPSpanExporter(endpoint=otlp_endpoint, insecure=insecure),
                OTLPMetricExporter(endpoint=otlp_endpoint, insecure=insecure),
            )
        case "console":
            return ConsoleSpanExporter(), ConsoleMetricExporter()
        case _:
            logger.warning(
                "Exporter '%s' not usable (endpoint=%s), using console", exporter_type, otlp_endpoint
            )
            return ConsoleSpanExporter(), ConsoleMetricExporter()


class TelemetryConfig:
    """Owns the tracer and meter providers and the library instrumentations."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        enabled: bool = True,
        environment: str = "development",
        metric_export_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize telemetry config.

        Args:
            service_name: Service name for resource attributes.
            service_version: Version for resource attributes.
            enabled: Whether telemetry is enabled.
            environment: Deployment environment (e.g. development, production).
            metric_export_interval_seconds: How often metrics are pushed;
                defaults to the cleanup poll interval (one export per run).
        """
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.metric_export_interval_seconds = metric_export_interval_seconds
        self.tracer_provider: TracerProvider | None = None
        self.meter_provider: MeterProvider | None = None

    @property
    def active(self) -> bool:
        return self.enabled and self.tracer_provider is not None

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Create both providers and install them globally.

        Telemetry failures never stop the service: errors are logged and
        None is returned.
        """
        if not self.enabled:
            logger.info("Telemetry disabled")
            return None
        try:
            resource = Resource(
                attributes={
                    SERVICE_NAME: self.service_name,
                    SERVICE_VERSION: self.service_version,
                    "deployment.environment": self.environment,
                }
            )
            span_exporter, metric_exporter = build_exporters(exporter_type, otlp_endpoint)

            tracer_provider = TracerProvider(resource=resource, sampler=TraceIdRatioBased(sample_rate))
            if span_exporter is not None:
                tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
            readers = (
                [
                    PeriodicExportingMetricReader(
                        metric_exporter,
                        export_interval_millis=self.metric_export_interval_seconds * 1000,
                    )
                ]
                if metric_exporter is not None
                else []
            )
            meter_provider = MeterProvider(resource=resource, metric_readers=readers)

            trace.set_tracer_provider(tracer_provider)
            metrics.set_meter_provider(meter_provider)
            self.tracer_provider = tracer_provider
            self.meter_provider = meter_provider
        except Exception:
            logger.exception("Failed to initialize telemetry")
            return None
        logger.info(
            "OpenTelemetry initialized: service=%s, exporter=%s, sample_rate=%s",
            self.service_name,
            exporter_type,
            sample_rate,
        )
        return self.tracer_provider

    def _instrument(self, what: str, instrument: Callable[[], None]) -> None:
        if not self.active:
            return
        try:
            instrument()
        except Exception:
            logger.exception("Failed to instrument %s", what)
            return
        logger.info("%s instrumentation enabled", what)

    def instrument_fastapi(self, app: FastAPI) -> None:
        """Trace API requests (health probes excluded)."""
        self._instrument(
            "FastAPI",
            lambda: FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls="/api/v1/health"
            ),
        )

    def instrument_sqlalchemy(self, engine: AsyncEngine) -> None:
        """Trace scan and delete statements on the cache engine."""
        self._instrument(
            "SQLAlchemy",
            lambda: SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=self.tracer_provider
            ),
        )

    def instrument_logging(self) -> None:
        """Add trace_id/span_id to log records."""
        self._instrument(
            "Logging",
            lambda: LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider),
        )

    def shutdown(self) -> None:
        """Flush and shut down both providers."""
        for provider in (self.tracer_provider, self.meter_provider):
            if provider is None:
                continue
            try:
                provider.shutdown()
            except Exception:
                logger.exception("Error shutting down %s", type(provider).__name__)
        logger.info("Telemetry shutdown complete")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the global telemetry instance (set at startup)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear, with None) the global telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
