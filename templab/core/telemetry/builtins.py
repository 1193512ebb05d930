from __future__ import annotations

from .models import TelemetryProfile

_WEB = ["fastapi", "uvicorn"]
_API = ["opentelemetry-api"]
_SDK = _API + ["opentelemetry-sdk"]
_OTLP = ["opentelemetry-exporter-otlp-proto-grpc"]
_LOG_CORRELATION = ["opentelemetry-instrumentation-logging"]


def builtin_profiles() -> list[TelemetryProfile]:
    return [
        TelemetryProfile(
            name="temperature-calculator",
            artifact="springtempcalc",
            version="0.0.1-SNAPSHOT",
            description="Calculator with console and OTLP span export",
            exporters=["console", "otlp"],
            requires=_WEB + _SDK + _OTLP,
        ),
        TelemetryProfile(
            name="temperature-simulator",
            artifact="springtempsimu",
            version="0.0.1-SNAPSHOT",
            description="Simulator without telemetry dependencies",
            sdk=False,
            requires=list(_WEB),
        ),
        TelemetryProfile(
            name="springotel-api",
            artifact="springotel",
            version="0.0.1-SNAPSHOT",
            description="API only; relies on an agent for the SDK",
            sdk=False,
            requires=_WEB + _API,
        ),
        TelemetryProfile(
            name="springotel-metrics",
            artifact="springotel",
            version="0.0.1-SNAPSHOT",
            description="Traces, metrics and log correlation with console and OTLP export",
            exporters=["console", "otlp"],
            metrics=True,
            log_correlation=True,
            requires=_WEB + _SDK + _OTLP + _LOG_CORRELATION,
        ),
        TelemetryProfile(
            name="tempsimulator",
            artifact="tempsimulator",
            version="0.0.1",
            description="Simulator with OTLP span export",
            exporters=["otlp"],
            requires=_WEB + _SDK + _OTLP,
        ),
        TelemetryProfile(
            name="data-processing",
            artifact="data-processing",
            version="0.1.0",
            description="Processing relay with OTLP span export",
            exporters=["otlp"],
            requires=_WEB + _SDK + _OTLP + ["requests"],
        ),
    ]
