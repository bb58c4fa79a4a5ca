"""OpenTelemetry metrics and tracing for TokenPlane.

The OpenTelemetry API hands out no-op tracers and meters until a provider is
installed, so instrumentation is always safe to call. ``init_telemetry``
installs SDK providers with an OTLP exporter when:
- OTEL_EXPORTER_OTLP_ENDPOINT env var is set, OR
- telemetry.enabled=true in TokenPlane config

Usage:
    from tokenplane.core.telemetry import record_suppressed_failure, span_context

    with span_context("ingest", {"project_id": project_id}):
        ...

    # Every failure that is logged and skipped instead of raised
    record_suppressed_failure("extraction")
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics, trace

from tokenplane.core.logging import get_logger

if TYPE_CHECKING:
    from tokenplane.config.models import TelemetryConfig

logger = get_logger("telemetry")

_INSTRUMENTATION_NAME = "tokenplane"

_tracer_provider: Any = None
_meter_provider: Any = None
_initialized: bool = False

_suppressed_counter: Any = None


def _is_telemetry_enabled(config: TelemetryConfig | None) -> bool:
    if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        return True
    return bool(config is not None and config.enabled)


def _get_otlp_endpoint(config: TelemetryConfig | None) -> str | None:
    endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        return endpoint
    if config is not None and config.otlp_endpoint:
        return config.otlp_endpoint
    return None


def _get_service_name(config: TelemetryConfig | None) -> str:
    service_name = os.environ.get("OTEL_SERVICE_NAME")
    if service_name:
        return service_name
    if config is not None:
        return config.service_name
    return "tokenplane"


def init_telemetry(config: TelemetryConfig | None = None) -> bool:
    """Install SDK tracer/meter providers exporting over OTLP.

    Idempotent. Returns True if providers were installed, False if telemetry
    is disabled or the exporter packages are missing (the API no-ops remain).
    """
    global _tracer_provider, _meter_provider, _initialized, _suppressed_counter

    if _initialized:
        return _tracer_provider is not None
    _initialized = True

    if not _is_telemetry_enabled(config):
        logger.debug("telemetry_disabled")
        return False

    endpoint = _get_otlp_endpoint(config)
    if not endpoint:
        logger.warning("telemetry_no_endpoint")
        return False

    try:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
            OTLPMetricExporter,
        )
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError as e:
        logger.warning("telemetry_exporter_missing", error=str(e))
        return False

    insecure = endpoint.startswith("http://")
    resource = Resource.create({"service.name": _get_service_name(config)})

    _tracer_provider = TracerProvider(resource=resource)
    _tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
    )
    trace.set_tracer_provider(_tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=endpoint, insecure=insecure),
        export_interval_millis=60000,
    )
    _meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(_meter_provider)
    # Recreate instruments against the real provider
    _suppressed_counter = None

    logger.info("telemetry_initialized", endpoint=endpoint)
    return True


def shutdown_telemetry() -> None:
    """Flush and shut down installed providers."""
    global _tracer_provider, _meter_provider, _initialized, _suppressed_counter

    for provider in (_tracer_provider, _meter_provider):
        if provider is not None:
            provider.shutdown()

    _tracer_provider = None
    _meter_provider = None
    _suppressed_counter = None
    _initialized = False


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(_INSTRUMENTATION_NAME)


def get_meter() -> metrics.Meter:
    return metrics.get_meter(_INSTRUMENTATION_NAME)


def record_suppressed_failure(kind: str, **attributes: str) -> None:
    """Count a failure that was logged and skipped rather than raised.

    ``kind`` names the skipped operation: extraction, file_read,
    token_persist, version_snapshot, design_context or token_check.
    """
    global _suppressed_counter
    if _suppressed_counter is None:
        _suppressed_counter = get_meter().create_counter(
            "tokenplane.suppressed_failures",
            description="Failures that were logged and skipped instead of raised",
        )
    _suppressed_counter.add(1, {"kind": kind, **attributes})


@contextmanager
def span_context(name: str, attributes: dict[str, Any] | None = None) -> Iterator[Any]:
    """Start a span; exceptions are recorded on it and re-raised."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span
