from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from opentelemetry import trace

from templab.core.errors import UpstreamError
from templab.core.telemetry.propagation import inject_headers


class ThermometerSource(ABC):
    name: str

    @abstractmethod
    def simulate_temperature(self, measurements: int) -> List[int]:
        """Return ``measurements`` readings; an empty list when it is not positive."""

    def close(self) -> None:
        pass


class HttpSource(ThermometerSource):
    """Takes each reading from a remote service, one GET per reading.

    The current trace context is injected into every request so the remote
    spans join the caller's trace.
    """

    path: str

    def __init__(
        self,
        base_url: str,
        *,
        tracer: trace.Tracer,
        session: Optional[requests.Session] = None,
        timeout: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.url = f"{self.base_url}{self.path}"
        self._tracer = tracer
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout = timeout

    @abstractmethod
    def _parse(self, resp) -> int:
        ...

    def read_once(self) -> int:
        try:
            resp = self._session.get(self.url, headers=inject_headers(), timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise UpstreamError(self.url, type(e).__name__) from e

        try:
            return self._parse(resp)
        except (TypeError, ValueError) as e:
            raise UpstreamError(self.url, f"unparsable body: {resp.text[:64]!r}") from e

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def simulate_temperature(self, measurements: int) -> List[int]:
        with self._tracer.start_as_current_span("simulateTemperature"):
            return [self.read_once() for _ in range(measurements)]
