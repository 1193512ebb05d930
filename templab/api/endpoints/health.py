from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from templab.core.observability.metrics import inc_named

router = APIRouter(tags=["health"])


@router.get("/health/live")
def live():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/health/ready")
def ready(request: Request):
    """
    Readiness reflects ability to serve traffic: every distribution the
    active telemetry profile depends on must be installed.
    """
    inc_named("health_ready")

    state = request.app.state
    problems = [f"missing_requirement:{d}" for d in state.profiles.missing_requirements(state.telemetry.profile)]

    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )

    return {"status": "ready"}
