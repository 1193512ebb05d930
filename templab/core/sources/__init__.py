from __future__ import annotations

from typing import Optional

import requests

from templab.core.config import Settings
from templab.core.telemetry import Telemetry
from templab.core.thermometer import METER_NAME, Thermometer

from .base import HttpSource, ThermometerSource
from .calculator import CalculatorSource
from .local import LocalSource
from .processing import ProcessingSource

SOURCES = {
    "local": LocalSource,
    "calculator": CalculatorSource,
    "processing": ProcessingSource,
}


def build_source(
    kind: str,
    settings: Settings,
    telemetry: Telemetry,
    *,
    session: Optional[requests.Session] = None,
) -> ThermometerSource:
    tracer = telemetry.get_tracer("templab.core.sources")

    if kind == "local":
        thermometer = Thermometer(
            settings.min_temp,
            settings.max_temp,
            tracer=telemetry.get_tracer("templab.core.thermometer"),
            meter=telemetry.get_meter(METER_NAME),
        )
        return LocalSource(thermometer)
    if kind == "calculator":
        return CalculatorSource(
            settings.calculator_addr, tracer=tracer, session=session, timeout=settings.http_timeout_seconds
        )
    if kind == "processing":
        return ProcessingSource(
            settings.processing_addr, tracer=tracer, session=session, timeout=settings.http_timeout_seconds
        )
    raise ValueError(f"Unknown thermometer source: {kind} (expected one of {', '.join(sorted(SOURCES))})")


__all__ = [
    "SOURCES",
    "CalculatorSource",
    "HttpSource",
    "LocalSource",
    "ProcessingSource",
    "ThermometerSource",
    "build_source",
]
