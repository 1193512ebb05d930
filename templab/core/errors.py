"""Domain exceptions shared by the services."""

from __future__ import annotations


class ConfigError(Exception):
    def __init__(self, key: str, value: str, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"invalid value for {key}={value!r}: {reason}")


class InvalidTemperatureRange(ValueError):
    def __init__(self, min_temp: int, max_temp: int):
        self.min_temp = min_temp
        self.max_temp = max_temp
        super().__init__(f"min_temp={min_temp} must not exceed max_temp={max_temp}")


class UpstreamError(Exception):
    """A remote temperature service could not be reached or answered garbage."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"upstream call failed url={url} reason={reason}")


class UnknownProfileError(KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown telemetry profile: {name}")
