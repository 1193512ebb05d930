from __future__ import annotations

import random
from typing import List, Optional

from opentelemetry import metrics, trace

from templab.core.errors import InvalidTemperatureRange

METER_NAME = "TemperatureMeter"
COUNTER_NAME = "temperature_measurements"


class Thermometer:
    """Produces integer readings uniformly drawn from ``[min_temp, max_temp]``."""

    def __init__(
        self,
        min_temp: int,
        max_temp: int,
        tracer: Optional[trace.Tracer] = None,
        meter: Optional[metrics.Meter] = None,
        rng: Optional[random.Random] = None,
    ):
        self.set_temp(min_temp, max_temp)
        self._tracer = tracer or trace.get_tracer(__name__, "0.1.0")
        meter = meter or metrics.get_meter(METER_NAME)
        self._measurements = meter.create_counter(
            COUNTER_NAME,
            unit="1",
            description="Counts the number of temperature measurements made",
        )
        self._rng = rng or random.Random()

    def set_temp(self, min_temp: int, max_temp: int) -> None:
        if min_temp > max_temp:
            raise InvalidTemperatureRange(min_temp, max_temp)
        self.min_temp = int(min_temp)
        self.max_temp = int(max_temp)

    def measure_once(self) -> int:
        with self._tracer.start_as_current_span("measureOnce"):
            return self._rng.randint(self.min_temp, self.max_temp)

    def simulate_temperature(self, measurements: int) -> List[int]:
        temperatures: List[int] = []
        with self._tracer.start_as_current_span("simulateTemperature"):
            for _ in range(measurements):
                temperatures.append(self.measure_once())
                self._measurements.add(1)
        return temperatures
