"""OpenTelemetry tracing and metrics for the Shortlink application.

Instruments are always created through the global API, so the code paths are
the same whether export is enabled or not. Until setup_telemetry() installs
SDK providers they are no-op proxies.
"""

import logging
from typing import Dict, Optional, Tuple

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter as GrpcMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter as GrpcSpanExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter as HttpMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as HttpSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio, Sampler, TraceIdRatioBased

from shortlink.core.config import settings

logger = logging.getLogger(__name__)

SAMPLERS = {
    "parentbased_traceidratio": ParentBasedTraceIdRatio,
    "traceidratio": TraceIdRatioBased,
}


Providers = Tuple[Optional[TracerProvider], Optional[MeterProvider]]

# Set by setup_telemetry(), cleared by shutdown_telemetry()
_providers: Optional[Providers] = None


def setup_telemetry() -> Providers:
    """
    Install the SDK tracer and meter providers once per process.

    Returns:
        The installed (tracer_provider, meter_provider), or (None, None)
        when OTEL_ENABLED is off or the exporters could not be built
    """
    global _providers

    if _providers is not None:
        return _providers

    if not settings.OTEL_ENABLED:
        logger.info("OpenTelemetry export disabled")
        _providers = (None, None)
        return _providers

    resource = Resource.create({
        "service.name": settings.OTEL_SERVICE_NAME,
        "service.version": settings.APP_VERSION,
        "deployment.environment": settings.ENVIRONMENT.value,
        **parse_resource_attributes(settings.OTEL_RESOURCE_ATTRIBUTES),
    })

    try:
        span_exporter, metric_exporter = _create_exporters()
    except Exception as e:
        logger.error(f"Failed to create OTLP exporters, telemetry stays disabled: {e}")
        _providers = (None, None)
        return _providers

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=create_sampler(settings.OTEL_TRACES_SAMPLER, settings.OTEL_TRACES_SAMPLER_ARG),
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        metric_exporter,
        export_interval_millis=settings.OTEL_METRICS_EXPORT_INTERVAL_MILLIS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    logger.info(f"Exporting traces and metrics over OTLP/{settings.OTEL_EXPORTER_OTLP_PROTOCOL}")
    _providers = (tracer_provider, meter_provider)
    return _providers


def shutdown_telemetry() -> None:
    """Flush pending spans and metrics. Does nothing if setup never ran."""
    global _providers

    if _providers is None:
        return
    tracer_provider, meter_provider = _providers
    _providers = None
    if tracer_provider is not None:
        tracer_provider.shutdown()
    if meter_provider is not None:
        meter_provider.shutdown()


def _create_exporters() -> Tuple[SpanExporter, MetricExporter]:
    if settings.OTEL_EXPORTER_OTLP_PROTOCOL.lower() == "grpc":
        return (
            GrpcSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True),
            GrpcMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_METRICS_ENDPOINT, insecure=True),
        )
    return (
        HttpSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT),
        HttpMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_METRICS_ENDPOINT),
    )


def create_sampler(name: str, ratio: float) -> Sampler:
    """Build a ratio sampler; unknown names fall back to plain trace-id ratio."""
    sampler_cls = SAMPLERS.get(name.lower(), TraceIdRatioBased)
    return sampler_cls(float(ratio))


def parse_resource_attributes(raw: str) -> Dict[str, str]:
    """Parse "key=value,key=value" into a dict, ignoring pairs without '='."""
    attributes = {}
    for pair in (raw or "").split(","):
        key, sep, value = pair.strip().partition("=")
        if sep and key:
            attributes[key] = value
    return attributes


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    return trace.get_tracer(name or settings.OTEL_SERVICE_NAME)


def get_meter(name: Optional[str] = None) -> metrics.Meter:
    return metrics.get_meter(name or settings.OTEL_SERVICE_NAME)
