"""
Per-key coalescing of concurrent provider scans.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Generic, TypeVar

T = TypeVar("T")


class InFlightRegistry(Generic[T]):
    """
    Runs at most one call per key at a time inside this process.

    A caller arriving while the same key is in flight blocks on the first
    caller's result (or exception) instead of repeating the work. Finished
    keys are forgotten, so sequential calls always run.
    """

    def __init__(self) -> None:
        self._futures: dict[str, Future[T]] = {}
        self._lock = threading.Lock()

    def run(self, key: str, fn: Callable[[], T]) -> T:
        future: Future[T] = Future()
        with self._lock:
            current = self._futures.setdefault(key, future)
        if current is not future:
            return current.result()

        try:
            result = fn()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._futures.pop(key, None)
