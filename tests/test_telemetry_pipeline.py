import logging

import pytest
from opentelemetry import trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider

from templab.core.telemetry import TelemetryProfileRegistry, build_telemetry


def test_sdk_profile_builds_sdk_providers(make_telemetry):
    tel = make_telemetry("springotel-metrics", service="simulator")
    assert tel.sdk_enabled
    assert isinstance(tel.tracer_provider, TracerProvider)
    assert isinstance(tel.meter_provider, MeterProvider)

    attrs = tel.tracer_provider.resource.attributes
    assert attrs[SERVICE_NAME] == "temperature-simulator"
    assert attrs[SERVICE_VERSION] == "springotel-0.0.1-SNAPSHOT"


def test_profile_without_metrics_uses_noop_meter(make_telemetry):
    tel = make_telemetry("temperature-calculator")
    assert tel.sdk_enabled
    assert not isinstance(tel.meter_provider, MeterProvider)
    # no-op instruments still accept writes
    tel.get_meter("TemperatureMeter").create_counter("x").add(1)


def test_api_only_profile_uses_global_providers():
    profile = TelemetryProfileRegistry().require("springotel-api")
    tel = build_telemetry(profile, "temperature-simulator")

    assert not tel.sdk_enabled
    assert not tel.owns_providers
    assert tel.tracer_provider is trace.get_tracer_provider()

    with tel.get_tracer("test").start_as_current_span("noop") as span:
        assert span is not None
    tel.shutdown()


def test_sdk_disabled_env_forces_api_only(monkeypatch):
    monkeypatch.setenv("OTEL_SDK_DISABLED", "true")
    profile = TelemetryProfileRegistry().require("temperature-calculator").model_copy(update={"exporters": []})
    tel = build_telemetry(profile, "temperature-calculator")
    assert not tel.sdk_enabled


def test_otel_service_name_env_wins(monkeypatch, make_telemetry):
    monkeypatch.setenv("OTEL_SERVICE_NAME", "from-env")
    tel = make_telemetry("tempsimulator", service="simulator")
    assert tel.tracer_provider.resource.attributes[SERVICE_NAME] == "from-env"


def test_exporters_attached_per_profile():
    profile = TelemetryProfileRegistry().require("temperature-calculator").model_copy(
        update={"exporters": ["console"]}
    )
    tel = build_telemetry(profile, "temperature-calculator")
    try:
        processors = tel.tracer_provider._active_span_processor._span_processors
        assert len(processors) == 1
    finally:
        tel.shutdown()


def test_shutdown_is_idempotent(make_telemetry):
    tel = make_telemetry()
    tel.shutdown()
    tel.shutdown()


def test_log_correlation_injects_trace_ids(make_telemetry, caplog):
    from opentelemetry.instrumentation.logging import LoggingInstrumentor

    tel = make_telemetry("springotel-metrics")
    try:
        log = logging.getLogger("templab.test")
        with caplog.at_level(logging.INFO, logger="templab.test"):
            with tel.get_tracer("test").start_as_current_span("logged") as span:
                log.info("inside span")
                expected = format(span.get_span_context().trace_id, "032x")

        record = [r for r in caplog.records if r.getMessage() == "inside span"][0]
        assert record.otelTraceID == expected
    finally:
        LoggingInstrumentor().uninstrument()


def test_register_global_installs_built_providers(monkeypatch):
    from opentelemetry import metrics

    installed = {}
    monkeypatch.setattr(trace, "set_tracer_provider", lambda p: installed.setdefault("tracer", p))
    monkeypatch.setattr(metrics, "set_meter_provider", lambda p: installed.setdefault("meter", p))

    profile = TelemetryProfileRegistry().require("springotel-metrics").model_copy(update={"exporters": []})
    tel = build_telemetry(profile, "temperature-simulator", register_global=True)
    try:
        assert installed["tracer"] is tel.tracer_provider
        assert installed["meter"] is tel.meter_provider
    finally:
        tel.shutdown()


def test_register_global_skips_noop_meter(monkeypatch):
    from opentelemetry import metrics

    installed = {}
    monkeypatch.setattr(trace, "set_tracer_provider", lambda p: installed.setdefault("tracer", p))
    monkeypatch.setattr(metrics, "set_meter_provider", lambda p: installed.setdefault("meter", p))

    profile = TelemetryProfileRegistry().require("temperature-calculator").model_copy(update={"exporters": []})
    tel = build_telemetry(profile, "temperature-calculator", register_global=True)
    try:
        assert installed["tracer"] is tel.tracer_provider
        assert "meter" not in installed
    finally:
        tel.shutdown()


def test_without_register_global_nothing_is_installed(monkeypatch):
    from opentelemetry import metrics

    monkeypatch.setattr(trace, "set_tracer_provider", lambda p: pytest.fail("tracer provider installed"))
    monkeypatch.setattr(metrics, "set_meter_provider", lambda p: pytest.fail("meter provider installed"))

    profile = TelemetryProfileRegistry().require("tempsimulator").model_copy(update={"exporters": []})
    build_telemetry(profile, "temperature-simulator").shutdown()
