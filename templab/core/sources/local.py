from __future__ import annotations

from typing import List

from templab.core.thermometer import Thermometer

from .base import ThermometerSource


class LocalSource(ThermometerSource):
    name = "local"

    def __init__(self, thermometer: Thermometer):
        self.thermometer = thermometer

    def simulate_temperature(self, measurements: int) -> List[int]:
        return self.thermometer.simulate_temperature(measurements)
