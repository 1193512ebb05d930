from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


Exporter = Literal["console", "otlp"]


class TelemetryProfile(BaseModel):
    """Which parts of the OpenTelemetry stack a service deploys with.

    ``sdk=False`` means API only: tracers and meters come from the global
    providers, which stay no-op unless an agent configured them.
    """

    name: str
    artifact: str
    version: str

    sdk: bool = True
    exporters: List[Exporter] = Field(default_factory=list)
    metrics: bool = False
    log_correlation: bool = False

    # Distribution names on the package index, checked by /health/ready.
    requires: List[str] = Field(default_factory=list)

    otlp_timeout_seconds: float = 2.0
    schedule_delay_millis: int = 100

    description: Optional[str] = None

    @property
    def archive_name(self) -> str:
        return f"{self.artifact}-{self.version}"
