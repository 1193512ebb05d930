import logging
import sys

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
CORRELATED_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "[trace_id=%(otelTraceID)s span_id=%(otelSpanID)s] - %(message)s"
)


def configure_logging(level: str = "INFO", correlate: bool = False) -> None:
    """Install a single stdout handler on the root logger.

    With ``correlate`` the format expects the ``otelTraceID``/``otelSpanID``
    record fields populated by the OpenTelemetry logging instrumentation, so
    only enable it once telemetry has been built with log correlation.
    """
    levelno = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(CORRELATED_FORMAT if correlate else PLAIN_FORMAT)

    root = logging.getLogger()
    root.setLevel(levelno)

    existing = [h for h in root.handlers if getattr(h, "_templab", False)]
    if existing:
        for h in existing:
            h.setFormatter(formatter)
    else:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(formatter)
        handler._templab = True
        root.addHandler(handler)

    # reduce noisy third-party libs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
