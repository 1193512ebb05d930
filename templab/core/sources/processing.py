from __future__ import annotations

from .base import HttpSource


class ProcessingSource(HttpSource):
    """Readings relayed through the data-processing service (plain text body)."""

    name = "processing"
    path = "/processTemperature"

    def _parse(self, resp) -> int:
        return int(resp.text.strip())
