"""OpenTelemetry-instrumented temperature services."""

__version__ = "0.1.0"
