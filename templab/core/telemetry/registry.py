from __future__ import annotations

import json
import logging
from importlib import metadata
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from templab.core.errors import UnknownProfileError

from .builtins import builtin_profiles
from .models import TelemetryProfile

log = logging.getLogger("templab.telemetry.profiles")


class TelemetryProfileRegistry:
    """Resolves telemetry profiles by name.

    Resolution order:
      1) Built-in profiles (always present)
      2) Optional <profiles_dir>/*.json, overriding built-ins of the same name
    """

    def __init__(self, profiles_dir: Optional[Path] = None):
        self.profiles_dir = profiles_dir
        self._profiles: Dict[str, TelemetryProfile] = {}
        self._load_all()

    def _load_all(self) -> None:
        self._profiles = {p.name: p for p in builtin_profiles()}

        if self.profiles_dir is None or not self.profiles_dir.exists():
            return

        for p in sorted(self.profiles_dir.glob("*.json")):
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
                profile = TelemetryProfile(**data)
            except (OSError, ValueError, TypeError, ValidationError) as e:
                log.warning("skipping invalid telemetry profile file=%s err=%s", p, type(e).__name__)
                continue
            self._profiles[profile.name] = profile

    def list_names(self) -> list[str]:
        return sorted(self._profiles.keys())

    def get(self, name: str) -> Optional[TelemetryProfile]:
        return self._profiles.get(name)

    def require(self, name: str) -> TelemetryProfile:
        profile = self.get(name)
        if profile is None:
            raise UnknownProfileError(name)
        return profile

    def missing_requirements(self, profile: Union[str, TelemetryProfile]) -> list[str]:
        if isinstance(profile, str):
            profile = self.require(profile)
        missing: list[str] = []
        for dist in profile.requires:
            try:
                metadata.version(dist)
            except metadata.PackageNotFoundError:
                missing.append(dist)
        return missing
