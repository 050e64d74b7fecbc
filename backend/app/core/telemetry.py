"""OpenTelemetry wiring for the analytics service.

``setup_telemetry`` installs OTLP exporters once per process. ``analytics_span``
wraps engine calls made by the routes; it records a span plus a call counter
and a duration histogram. When telemetry is disabled the global no-op
providers absorb these calls.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes

from app.config import AppSettings

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "folio_analytics.api"
METRIC_EXPORT_INTERVAL_MS = 10_000

_initialised = False


def setup_telemetry(app: FastAPI, settings: AppSettings) -> bool:
    """Export traces, metrics and logs over OTLP; return whether exporters were installed."""

    global _initialised  # noqa: PLW0603 - once per process

    if _initialised:
        return True
    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: "portfolio-analytics",
            "portfolio.reporting_currency": settings.reporting_currency,
        }
    )
    exporter_options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        exporter_options["endpoint"] = settings.telemetry_otlp_endpoint

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_options)))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(**exporter_options),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**exporter_options)))
    set_logger_provider(logger_provider)
    LoggingInstrumentor().instrument(set_logging_format=False)

    FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider, meter_provider=meter_provider)

    _initialised = True
    logger.info("Telemetry initialised for %s", settings.telemetry_service_name)
    return True


@contextmanager
def analytics_span(operation: str, **attributes: Any) -> Iterator[trace.Span]:
    """Trace one engine call and record its count and latency."""

    tracer = trace.get_tracer(INSTRUMENTATION_NAME)
    meter = metrics.get_meter(INSTRUMENTATION_NAME)
    calls = meter.create_counter(
        "analytics.operations", unit="1", description="Analytics engine calls by operation"
    )
    duration = meter.create_histogram(
        "analytics.operation.duration", unit="ms", description="Analytics engine call latency"
    )
    labels = {"analytics.operation": operation}
    started = time.perf_counter()
    with tracer.start_as_current_span(f"analytics.{operation}") as span:
        for key, value in attributes.items():
            span.set_attribute(f"analytics.{key}", value)
        try:
            yield span
        finally:
            calls.add(1, labels)
            duration.record((time.perf_counter() - started) * 1000.0, labels)


__all__ = ["analytics_span", "setup_telemetry"]
