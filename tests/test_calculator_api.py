from fastapi.testclient import TestClient

from templab.api.main import create_app
from templab.core.config import Settings
from templab.core.telemetry import inject_headers


def test_measure_returns_int_in_configured_range(make_telemetry):
    app = create_app(
        "calculator",
        settings=Settings(min_temp=10, max_temp=12),
        telemetry=make_telemetry(service="calculator"),
    )
    c = TestClient(app)
    for _ in range(20):
        r = c.get("/measureTemperature")
        assert r.status_code == 200
        assert r.json() in (10, 11, 12)


def test_measure_span_joins_incoming_trace(calculator_client, make_telemetry, span_exporter):
    upstream = make_telemetry("temperature-calculator", service="simulator").get_tracer("upstream")
    with upstream.start_as_current_span("caller") as caller:
        headers = inject_headers()

    r = calculator_client.get("/measureTemperature", headers=headers)
    assert r.status_code == 200

    spans = {s.name: s for s in span_exporter.get_finished_spans()}
    measure = spans["measure"]
    assert measure.context.trace_id == caller.get_span_context().trace_id
    assert measure.parent.span_id == caller.get_span_context().span_id
    assert spans["measureOnce"].parent.span_id == measure.context.span_id


def test_measure_without_headers_starts_new_trace(calculator_client, span_exporter):
    calculator_client.get("/measureTemperature")
    spans = {s.name: s for s in span_exporter.get_finished_spans()}
    assert spans["measure"].parent is None
