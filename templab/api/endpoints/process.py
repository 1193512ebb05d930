from __future__ import annotations

import logging
import time

import requests
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from opentelemetry.trace import SpanKind, Status, StatusCode

from templab.api.observability.metrics import UPSTREAM_FAILURES_TOTAL
from templab.core.telemetry import extract_context, inject_headers

router = APIRouter(tags=["processing"])

log = logging.getLogger("templab.processing")

TEMPERATURE_ERROR = "Temperature error"


def do_processing() -> bool:
    time.sleep(0.001)
    return True


def _get_temperature(state, tracer) -> str:
    url = f"{state.settings.calculator_addr}/measureTemperature"
    with tracer.start_as_current_span(
        "GET /measureTemperature",
        kind=SpanKind.CLIENT,
        attributes={"http.method": "GET", "http.url": url},
    ) as span:
        try:
            resp = state.session.get(url, headers=inject_headers(), timeout=state.settings.http_timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            UPSTREAM_FAILURES_TOTAL.labels(service=state.service, upstream="calculator").inc()
            log.warning("temperature calculator call failed url=%s err=%s", url, type(e).__name__)
            raise HTTPException(status_code=502, detail="Temperature calculator unavailable") from e
        span.set_attribute("http.status_code", resp.status_code)
        return resp.text.strip()


@router.get("/processTemperature", response_class=PlainTextResponse)
def process_temperature(request: Request) -> str:
    state = request.app.state
    tracer = state.telemetry.get_tracer(__name__)
    parent = extract_context(request.headers)

    with tracer.start_as_current_span(
        "GET /processTemperature",
        context=parent,
        kind=SpanKind.SERVER,
        attributes={"http.method": "GET", "http.route": "/processTemperature"},
    ):
        if do_processing():
            return _get_temperature(state, tracer)
        return TEMPERATURE_ERROR
