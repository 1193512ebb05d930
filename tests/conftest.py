from __future__ import annotations

import json
from typing import Optional
from urllib.parse import urlsplit

import pytest
import requests
from fastapi.testclient import TestClient
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from templab.api.main import SERVICE_NAMES, create_app
from templab.core.config import Settings
from templab.core.observability.metrics import reset_metrics
from templab.core.telemetry import TelemetryProfileRegistry, build_telemetry


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Tests never export to a real collector.
    monkeypatch.delenv("OTEL_SDK_DISABLED", raising=False)
    monkeypatch.delenv("OTEL_SERVICE_NAME", raising=False)
    reset_metrics()


class FakeResponse:
    """The subset of ``requests.Response`` the sources and relay use."""

    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class ASGISession:
    """Routes ``session.get(url, ...)`` calls into an in-process app."""

    def __init__(self, client: TestClient):
        self.client = client
        self.calls: list[dict] = []

    def get(self, url: str, headers: Optional[dict] = None, timeout: Optional[float] = None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        r = self.client.get(urlsplit(url).path, headers=headers or {})
        return FakeResponse(r.status_code, r.text)


class StaticSession:
    def __init__(self, status_code: int = 200, text: str = "21"):
        self.status_code = status_code
        self.text = text
        self.calls: list[dict] = []

    def get(self, url: str, headers: Optional[dict] = None, timeout: Optional[float] = None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        return FakeResponse(self.status_code, self.text)


class DownSession:
    def get(self, url: str, headers: Optional[dict] = None, timeout: Optional[float] = None):
        raise requests.ConnectionError(f"connection refused: {url}")


@pytest.fixture()
def static_session():
    return StaticSession


@pytest.fixture()
def down_session():
    return DownSession()


@pytest.fixture()
def asgi_session():
    return ASGISession


@pytest.fixture()
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture()
def metric_reader():
    return InMemoryMetricReader()


@pytest.fixture()
def make_telemetry(span_exporter, metric_reader):
    """Build SDK telemetry for a profile with its network exporters stripped."""
    built = []

    def _make(profile_name: str = "springotel-metrics", service: str = "calculator"):
        registry = TelemetryProfileRegistry()
        profile = registry.require(profile_name).model_copy(update={"exporters": []})
        # A metric reader can only be registered with one provider.
        readers = [] if any(t.profile.metrics for t in built) else [metric_reader]
        t = build_telemetry(
            profile,
            SERVICE_NAMES[service],
            span_processors=[SimpleSpanProcessor(span_exporter)],
            metric_readers=readers,
        )
        built.append(t)
        return t

    yield _make

    for t in built:
        t.shutdown()


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def calculator_app(make_telemetry, settings):
    return create_app("calculator", settings=settings, telemetry=make_telemetry(service="calculator"))


@pytest.fixture()
def calculator_client(calculator_app):
    return TestClient(calculator_app)


@pytest.fixture()
def simulator_client(make_telemetry, settings):
    app = create_app("simulator", settings=settings, telemetry=make_telemetry(service="simulator"))
    return TestClient(app)

