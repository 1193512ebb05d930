from __future__ import annotations

from .base import HttpSource


class CalculatorSource(HttpSource):
    """Readings from the temperature calculator's JSON endpoint."""

    name = "calculator"
    path = "/measureTemperature"

    def _parse(self, resp) -> int:
        value = resp.json()
        # bool is an int subclass.
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{type(value).__name__} is not a temperature")
        return value
