from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import requests
from fastapi import FastAPI

from templab import __version__
from templab.api.endpoints import health, measure, metrics_export, process, simulate
from templab.api.endpoints import telemetry as telemetry_ep
from templab.api.endpoints import metrics as metrics_ep
from templab.api.middleware.error_shaping import SafeErrorMiddleware
from templab.api.middleware.request_context import RequestContextMiddleware
from templab.core.config import Settings
from templab.core.sources import ThermometerSource, build_source
from templab.core.telemetry import (
    ContextPropagatingExecutor,
    Telemetry,
    TelemetryProfileRegistry,
    build_telemetry,
)
from templab.core.thermometer import METER_NAME, Thermometer

SERVICES = ("simulator", "calculator", "processing")

SERVICE_NAMES = {
    "simulator": "temperature-simulator",
    "calculator": "temperature-calculator",
    "processing": "data-processing",
}

_TITLES = {
    "simulator": "Temperature Simulator",
    "calculator": "Temperature Calculator",
    "processing": "Data Processing",
}


def create_app(
    service: str,
    *,
    settings: Optional[Settings] = None,
    telemetry: Optional[Telemetry] = None,
    session: Optional[requests.Session] = None,
    source: Optional[ThermometerSource] = None,
) -> FastAPI:
    """Assemble one of the three services.

    ``telemetry``, ``session`` and ``source`` are injectable so tests can run
    the services with in-memory exporters and fake upstreams.
    """
    if service not in SERVICES:
        raise ValueError(f"Unknown service: {service} (expected one of {', '.join(SERVICES)})")

    settings = settings or Settings.from_env()
    profiles = TelemetryProfileRegistry(settings.profiles_dir)
    if telemetry is None:
        telemetry = build_telemetry(
            profiles.require(settings.profile_for(service)),
            SERVICE_NAMES[service],
        )

    owned_session: Optional[requests.Session] = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if app.state.executor is not None:
            app.state.executor.shutdown(wait=False)
        if getattr(app.state, "source", None) is not None:
            app.state.source.close()
        if owned_session is not None:
            owned_session.close()
        telemetry.shutdown()

    app = FastAPI(title=_TITLES[service], version=__version__, lifespan=lifespan)

    app.state.service = SERVICE_NAMES[service]
    app.state.settings = settings
    app.state.profiles = profiles
    app.state.telemetry = telemetry
    app.state.executor = None

    # ------------------------------------------------------------
    # Middleware stack: last added = outermost.
    #   RequestContext -> SafeErrorMiddleware -> handler
    # Shaped 500s pass back through RequestContext and get counted.
    # ------------------------------------------------------------
    app.add_middleware(SafeErrorMiddleware)
    app.add_middleware(RequestContextMiddleware, service=SERVICE_NAMES[service])

    if service == "simulator":
        app.state.source = source or build_source(
            settings.thermometer_source, settings, telemetry, session=session
        )
        if settings.simulator_async:
            app.state.executor = ContextPropagatingExecutor(max_workers=settings.simulator_workers)
        app.include_router(simulate.router)

    elif service == "calculator":
        app.state.thermometer = Thermometer(
            settings.min_temp,
            settings.max_temp,
            tracer=telemetry.get_tracer("templab.core.thermometer"),
            meter=telemetry.get_meter(METER_NAME),
        )
        app.include_router(measure.router)

    else:
        if session is None:
            session = owned_session = requests.Session()
        app.state.session = session
        app.include_router(process.router)

    app.include_router(health.router)
    app.include_router(metrics_ep.router)
    app.include_router(metrics_export.router)
    app.include_router(telemetry_ep.router)

    return app
