from __future__ import annotations

import concurrent.futures
from typing import Any, Callable, TypeVar

from opentelemetry import context as otel_context

T = TypeVar("T")


class ContextPropagatingExecutor:
    """Thread pool whose tasks run under the context current at submit time.

    Spans started inside a task become children of whatever span was active
    when the task was submitted, not of whatever the worker thread ran last.
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "templab-worker"):
        self.max_workers = max_workers
        self._pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "concurrent.futures.Future[T]":
        captured = otel_context.get_current()

        def _run() -> T:
            token = otel_context.attach(captured)
            try:
                return fn(*args, **kwargs)
            finally:
                otel_context.detach(token)

        return self._pool.submit(_run)

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "ContextPropagatingExecutor":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
