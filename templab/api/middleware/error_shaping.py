from __future__ import annotations

import logging
import traceback
from typing import Callable, Optional

from fastapi import Request
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from templab.api.observability.metrics import normalize_path
from templab.core.telemetry import extract_context

log = logging.getLogger("templab.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    - Never return stack traces to clients
    - Record the failure as an ERROR span in the caller's trace
    - Return request_id and trace_id so the failure can be looked up
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            trace_id = _record_error_span(request, e, rid)
            log.error(
                "Unhandled error: %s rid=%s trace_id=%s path=%s\n%s",
                type(e).__name__,
                rid,
                trace_id,
                request.url.path,
                traceback.format_exc(),
            )
            payload = {"detail": "Internal Server Error"}
            if rid:
                payload["request_id"] = rid
            if trace_id:
                payload["trace_id"] = trace_id
            return JSONResponse(status_code=500, content=payload)


def _record_error_span(request: Request, exc: Exception, rid: Optional[str]) -> Optional[str]:
    telemetry = getattr(request.app.state, "telemetry", None)
    if telemetry is None:
        return None

    tracer = telemetry.get_tracer(__name__)
    attributes = {
        "http.method": request.method.upper(),
        "http.route": normalize_path(request.url.path),
        "http.status_code": 500,
    }
    if rid:
        attributes["request.id"] = rid

    with tracer.start_as_current_span(
        "unhandledError",
        context=extract_context(request.headers),
        kind=SpanKind.SERVER,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.record_exception(exc)
        span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
        ctx = span.get_span_context()

    if not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x")
