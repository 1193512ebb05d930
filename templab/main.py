from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from templab.api.main import SERVICE_NAMES, SERVICES, create_app
from templab.core.config import Settings
from templab.core.errors import ConfigError, UnknownProfileError
from templab.core.logging_config import configure_logging
from templab.core.telemetry import TelemetryProfileRegistry, build_telemetry

log = logging.getLogger("templab")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="templab", description="Run one of the temperature services.")
    ap.add_argument("service", nargs="?", choices=SERVICES)
    ap.add_argument("--host", default=None, help="bind address (default: TEMPLAB_HOST or 0.0.0.0)")
    ap.add_argument("--port", type=int, default=None, help="bind port (default: per service)")
    ap.add_argument("--profile", default=None, help="telemetry profile name")
    ap.add_argument("--list-profiles", action="store_true", help="print telemetry profiles and exit")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 2

    profiles = TelemetryProfileRegistry(settings.profiles_dir)
    if args.list_profiles:
        for name in profiles.list_names():
            p = profiles.require(name)
            print(f"{name}\t{p.archive_name}\t{p.description or ''}")
        return 0

    if args.service is None:
        parser.error("service is required unless --list-profiles is given")

    try:
        profile = profiles.require(args.profile or settings.profile_for(args.service))
    except UnknownProfileError as e:
        print(f"ERROR: unknown telemetry profile {e.name!r} (see --list-profiles)")
        return 2

    # Telemetry first: correlated log formats need the instrumented record factory.
    telemetry = build_telemetry(profile, SERVICE_NAMES[args.service], register_global=True)
    configure_logging(settings.log_level, correlate=profile.log_correlation and telemetry.sdk_enabled)

    missing = profiles.missing_requirements(profile)
    if missing:
        log.warning("telemetry profile %s is missing distributions: %s", profile.name, ", ".join(missing))

    app = create_app(args.service, settings=settings, telemetry=telemetry)

    host = args.host or settings.host
    port = args.port or settings.port_for(args.service)
    log.info("starting %s artifact=%s on %s:%s", SERVICE_NAMES[args.service], profile.archive_name, host, port)
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
