from fastapi import APIRouter, Request

from templab.core.telemetry import extract_context

router = APIRouter(tags=["calculator"])


@router.get("/measureTemperature")
def measure(request: Request) -> int:
    tracer = request.app.state.telemetry.get_tracer(__name__)
    parent = extract_context(request.headers)

    with tracer.start_as_current_span("measure", context=parent):
        return request.app.state.thermometer.measure_once()
