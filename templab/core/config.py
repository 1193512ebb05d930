from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from templab.core.errors import ConfigError

_TRUE = ("1", "true", "yes")

SERVICE_DEFAULT_PORTS = {
    "simulator": 8080,
    "calculator": 8088,
    "processing": 9000,
}

SERVICE_DEFAULT_PROFILES = {
    "simulator": "tempsimulator",
    "calculator": "temperature-calculator",
    "processing": "data-processing",
}


def _get(environ: Mapping[str, str], key: str, default: str = "") -> str:
    return (environ.get(key) or default).strip()


def _int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = _get(environ, key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(key, raw, "expected an integer") from None


def _float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = _get(environ, key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(key, raw, "expected a number") from None


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    host: str = "0.0.0.0"
    port: Optional[int] = None

    telemetry_profile: Optional[str] = None
    profiles_dir: Optional[Path] = None

    min_temp: int = 20
    max_temp: int = 35
    thermometer_source: str = "local"

    simulator_async: bool = False
    simulator_workers: int = 4

    calculator_addr: str = "http://localhost:8088"
    processing_addr: str = "http://localhost:9000"
    http_timeout_seconds: float = 5.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        e = os.environ if environ is None else environ

        port_raw = _get(e, "TEMPLAB_PORT")
        profiles_dir = _get(e, "TEMPLAB_PROFILES_DIR")

        return cls(
            env=_get(e, "TEMPLAB_ENV", "dev").lower(),
            host=_get(e, "TEMPLAB_HOST", "0.0.0.0"),
            port=_int(e, "TEMPLAB_PORT", 0) if port_raw else None,
            telemetry_profile=_get(e, "TEMPLAB_TELEMETRY_PROFILE") or None,
            profiles_dir=Path(profiles_dir) if profiles_dir else None,
            min_temp=_int(e, "TEMPLAB_THERMOMETER_MIN_TEMP", 20),
            max_temp=_int(e, "TEMPLAB_THERMOMETER_MAX_TEMP", 35),
            thermometer_source=_get(e, "TEMPLAB_THERMOMETER_SOURCE", "local").lower(),
            simulator_async=_get(e, "TEMPLAB_SIMULATOR_ASYNC", "0").lower() in _TRUE,
            simulator_workers=max(1, _int(e, "TEMPLAB_SIMULATOR_WORKERS", 4)),
            calculator_addr=_get(e, "TEMP_CALCULATOR_ADDR", "http://localhost:8088").rstrip("/"),
            processing_addr=_get(e, "DATA_PROCESSING_ADDR", "http://localhost:9000").rstrip("/"),
            http_timeout_seconds=_float(e, "TEMPLAB_HTTP_TIMEOUT_SECONDS", 5.0),
            log_level=_get(e, "TEMPLAB_LOG_LEVEL", "INFO").upper(),
        )

    def port_for(self, service: str) -> int:
        return self.port or SERVICE_DEFAULT_PORTS[service]

    def profile_for(self, service: str) -> str:
        return self.telemetry_profile or SERVICE_DEFAULT_PROFILES[service]
