"""Builds the tracer and meter providers a service runs with.

A profile with ``sdk=True`` gets its own SDK providers: one batch span
processor and one periodic metric reader per configured exporter, plus any
processors/readers the caller hands in (tests pass in-memory ones). A profile
with ``sdk=False``, or ``OTEL_SDK_DISABLED=true``, falls back to the global API
providers.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .models import TelemetryProfile

log = logging.getLogger("templab.telemetry")

TRACER_VERSION = "0.1.0"


def sdk_disabled() -> bool:
    return (os.getenv("OTEL_SDK_DISABLED") or "false").strip().lower() in ("1", "true", "yes")


class Telemetry:
    def __init__(
        self,
        profile: TelemetryProfile,
        tracer_provider,
        meter_provider,
        *,
        owns_providers: bool,
    ):
        self.profile = profile
        self.tracer_provider = tracer_provider
        self.meter_provider = meter_provider
        self.owns_providers = owns_providers
        self._shutdown = False

    @property
    def sdk_enabled(self) -> bool:
        return isinstance(self.tracer_provider, TracerProvider)

    def get_tracer(self, name: str, version: str = TRACER_VERSION) -> trace.Tracer:
        return self.tracer_provider.get_tracer(name, version)

    def get_meter(self, name: str, version: Optional[str] = None) -> metrics.Meter:
        return self.meter_provider.get_meter(name, version)

    def shutdown(self) -> None:
        if self._shutdown or not self.owns_providers:
            return
        self._shutdown = True
        if isinstance(self.tracer_provider, TracerProvider):
            self.tracer_provider.shutdown()
        if isinstance(self.meter_provider, MeterProvider):
            self.meter_provider.shutdown()


def build_resource(profile: TelemetryProfile, service_name: str) -> Resource:
    attrs = {SERVICE_VERSION: profile.archive_name}
    # OTEL_SERVICE_NAME wins when set; Resource.create already reads it.
    if not os.getenv("OTEL_SERVICE_NAME"):
        attrs[SERVICE_NAME] = service_name
    return Resource.create(attrs)


def _span_exporter(kind: str, profile: TelemetryProfile):
    if kind == "console":
        return ConsoleSpanExporter()
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    return OTLPSpanExporter(timeout=profile.otlp_timeout_seconds)


def _metric_exporter(kind: str, profile: TelemetryProfile):
    if kind == "console":
        return ConsoleMetricExporter()
    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

    return OTLPMetricExporter(timeout=profile.otlp_timeout_seconds)


def _instrument_logging(tracer_provider) -> None:
    from opentelemetry.instrumentation.logging import LoggingInstrumentor

    instrumentor = LoggingInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument(tracer_provider=tracer_provider, set_logging_format=False)


def build_telemetry(
    profile: TelemetryProfile,
    service_name: str,
    *,
    span_processors: Iterable[SpanProcessor] = (),
    metric_readers: Iterable[MetricReader] = (),
    register_global: bool = False,
) -> Telemetry:
    if not profile.sdk or sdk_disabled():
        log.info("telemetry api-only profile=%s service=%s", profile.name, service_name)
        return Telemetry(
            profile,
            trace.get_tracer_provider(),
            metrics.get_meter_provider(),
            owns_providers=False,
        )

    resource = build_resource(profile, service_name)

    tracer_provider = TracerProvider(resource=resource)
    for kind in profile.exporters:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(
                _span_exporter(kind, profile),
                schedule_delay_millis=profile.schedule_delay_millis,
            )
        )
    for processor in span_processors:
        tracer_provider.add_span_processor(processor)

    if profile.metrics:
        readers = [PeriodicExportingMetricReader(_metric_exporter(kind, profile)) for kind in profile.exporters]
        readers.extend(metric_readers)
        meter_provider = MeterProvider(resource=resource, metric_readers=readers)
    else:
        meter_provider = metrics.NoOpMeterProvider()

    if register_global:
        trace.set_tracer_provider(tracer_provider)
        if isinstance(meter_provider, MeterProvider):
            metrics.set_meter_provider(meter_provider)

    if profile.log_correlation:
        _instrument_logging(tracer_provider)

    log.info(
        "telemetry sdk profile=%s service=%s exporters=%s metrics=%s",
        profile.name,
        service_name,
        ",".join(profile.exporters) or "-",
        profile.metrics,
    )
    return Telemetry(profile, tracer_provider, meter_provider, owns_providers=True)
