from __future__ import annotations

from typing import Any, List, Mapping, MutableMapping, Optional

from opentelemetry import propagate
from opentelemetry.context import Context
from opentelemetry.propagators.textmap import Getter


class _HeaderGetter(Getter[Mapping[str, Any]]):
    """Case-insensitive lookup over plain dicts and Starlette ``Headers``."""

    def get(self, carrier: Mapping[str, Any], key: str) -> Optional[List[str]]:
        value = carrier.get(key)
        if value is None:
            lowered = key.lower()
            for k, v in carrier.items():
                if k.lower() == lowered:
                    value = v
                    break
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]

    def keys(self, carrier: Mapping[str, Any]) -> List[str]:
        return list(carrier.keys())


_getter = _HeaderGetter()


def inject_headers(
    headers: Optional[MutableMapping[str, str]] = None,
    context: Optional[Context] = None,
) -> dict:
    carrier = dict(headers or {})
    propagate.inject(carrier, context=context)
    return carrier


def extract_context(headers: Mapping[str, Any], context: Optional[Context] = None) -> Context:
    return propagate.extract(headers, context=context, getter=_getter)
