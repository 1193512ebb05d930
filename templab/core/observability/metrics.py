from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Dict, Optional

_lock = Lock()

# Requests counters (HTTP-level)
_REQUESTS = Counter()

# Named counters (custom)
_NAMED = Counter()


def reset_metrics() -> None:
    """
    Test helper: clears all counters to avoid cross-test leakage.
    """
    with _lock:
        _REQUESTS.clear()
        _NAMED.clear()


def inc_http(method: str, path: str, status: Optional[int] = None) -> None:
    """
    Canonical HTTP counter increment used by the request middleware.
    """
    m = (method or "UNKNOWN").upper()
    p = path or "/"
    s = status if status is not None else "unknown"

    with _lock:
        _REQUESTS["requests_total"] += 1
        _REQUESTS[f"requests_{m}"] += 1
        _REQUESTS[f"path_{p}"] += 1
        _REQUESTS[f"path_{p}|{s}"] += 1


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    with _lock:
        _NAMED[name] += int(value)


def snapshot_requests() -> Dict[str, int]:
    with _lock:
        return dict(_REQUESTS)


def snapshot_named() -> Dict[str, int]:
    with _lock:
        return dict(_NAMED)
