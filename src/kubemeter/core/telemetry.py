# src/kubemeter/core/telemetry.py
"""
OpenTelemetry wiring for kubemeter.

Spans and instruments are created against the global API at import time, so
they are no-ops until ``initialize_telemetry`` installs real providers. The
CLI only does that when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set.
"""

import logging
import os
from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from kubemeter import __version__

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"
TELEMETRY_ENABLED = "OTEL_EXPORTER_OTLP_ENDPOINT" in os.environ


def initialize_telemetry(endpoint: Optional[str] = None):
    """
    Installs OTLP/HTTP exporting tracer and meter providers.

    Args:
        endpoint: Collector base URL. Defaults to ``OTEL_EXPORTER_OTLP_ENDPOINT``.
    """
    endpoint = (endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or DEFAULT_OTLP_ENDPOINT).rstrip("/")
    resource = Resource(attributes={SERVICE_NAME: "kubemeter", "service.version": __version__})

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"))
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))
    logger.info("OpenTelemetry initialized. Exporting to: %s", endpoint)


tracer = trace.get_tracer("kubemeter.executor")
meter = metrics.get_meter("kubemeter.executor")

backend_queries = meter.create_counter(
    "kubemeter.backend.queries",
    unit="1",
    description="Number of queries sent to the time-series backend.",
)
failed_batches = meter.create_counter(
    "kubemeter.batches.failed",
    unit="1",
    description="Number of query batches aborted by a backend failure.",
)
batch_size = meter.create_histogram(
    "kubemeter.batch.size",
    unit="1",
    description="Number of expressions fanned out per batch.",
)
