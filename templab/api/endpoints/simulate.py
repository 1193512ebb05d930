from __future__ import annotations

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request

from templab.api.observability.metrics import UPSTREAM_FAILURES_TOTAL
from templab.core.errors import UpstreamError

router = APIRouter(tags=["simulator"])

log = logging.getLogger("templab.simulator")

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_measurements(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        raise HTTPException(status_code=400, detail="Missing measurements parameter")
    if not _INTEGER.fullmatch(raw.strip()):
        raise HTTPException(status_code=400, detail="Invalid measurements parameter")
    return int(raw)


@router.get("/simulateTemperature")
def simulate_temperature(
    request: Request,
    location: Optional[str] = None,
    measurements: Optional[str] = None,
) -> List[int]:
    state = request.app.state
    tracer = state.telemetry.get_tracer(__name__)

    with tracer.start_as_current_span(
        "temperatureSimulation",
        attributes={"span.type": "web", "resource.name": "GET /simulateTemperature"},
    ):
        n = _parse_measurements(measurements)

        try:
            if state.executor is not None:
                result = _simulate_async(state, tracer, n)
            else:
                result = state.source.simulate_temperature(n)
        except UpstreamError as e:
            UPSTREAM_FAILURES_TOTAL.labels(service=state.service, upstream=state.source.name).inc()
            log.warning("temperature source failed source=%s err=%s", state.source.name, e)
            raise HTTPException(status_code=502, detail="Temperature source unavailable") from e

        if location:
            log.info("Temperature simulation for %s: %s", location, result)
        else:
            log.info("Temperature simulation for an unspecified location: %s", result)
        return result


def _simulate_async(state, tracer, n: int) -> List[int]:
    def task() -> List[int]:
        # Parented to temperatureSimulation through the executor's captured context.
        with tracer.start_as_current_span("asyncTemperatureSimulation"):
            return state.source.simulate_temperature(n)

    return state.executor.submit(task).result()
