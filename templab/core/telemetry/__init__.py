from .executor import ContextPropagatingExecutor
from .models import TelemetryProfile
from .pipeline import Telemetry, build_telemetry
from .propagation import extract_context, inject_headers
from .registry import TelemetryProfileRegistry

__all__ = [
    "ContextPropagatingExecutor",
    "Telemetry",
    "TelemetryProfile",
    "TelemetryProfileRegistry",
    "build_telemetry",
    "extract_context",
    "inject_headers",
]
