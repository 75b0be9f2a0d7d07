"""Counting and timing profilers keyed by label."""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from pixelsio.config import InvalidArgumentError


class CountProfiler:
    """Thread-safe counters keyed by label."""

    _instance: Optional["CountProfiler"] = None
    _instance_lock = threading.Lock()

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._lock = threading.Lock()
        self._result: dict[str, int] = {}

    @classmethod
    def instance(cls) -> "CountProfiler":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def count(self, label: str, num: int = 1) -> None:
        if not self.enabled:
            return
        with self._lock:
            if label in self._result:
                self._result[label] += num
            elif not label:
                raise InvalidArgumentError("Label cannot be the empty string.")
            else:
                self._result[label] = num

    def get(self, label: str) -> int:
        with self._lock:
            try:
                return self._result[label]
            except KeyError:
                raise InvalidArgumentError(
                    f"The label {label!r} is not contained in CountProfiler.") from None

    def reset(self) -> None:
        with self._lock:
            self._result.clear()

    def report(self) -> str:
        """Return one line per label, sorted by label; empty when disabled."""
        if not self.enabled:
            return ""
        with self._lock:
            items = sorted(self._result.items())
        return "\n".join(f"The count of {label} is {value}" for label, value in items)


class TimeProfiler:
    """Per-thread timers whose totals are merged into shared results by :meth:`collect`."""

    _instance: Optional["TimeProfiler"] = None
    _instance_lock = threading.Lock()

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._lock = threading.Lock()
        self._global: dict[str, int] = {}
        self._thread = threading.local()

    @classmethod
    def instance(cls) -> "TimeProfiler":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def _state(self) -> threading.local:
        state = self._thread
        if not hasattr(state, "started"):
            state.started = {}
            state.local = {}
        return state

    def start(self, label: str) -> None:
        if not self.enabled:
            return
        started = self._state().started
        if label in started:
            raise InvalidArgumentError(f"The label {label!r} has already been started.")
        if not label:
            raise InvalidArgumentError("Label cannot be the empty string.")
        started[label] = time.monotonic_ns()

    def end(self, label: str) -> None:
        if not self.enabled:
            return
        end_time = time.monotonic_ns()
        state = self._state()
        try:
            start_time = state.started.pop(label)
        except KeyError:
            raise InvalidArgumentError(f"The label {label!r} is not started yet.") from None
        state.local[label] = state.local.get(label, 0) + end_time - start_time

    @contextmanager
    def measure(self, label: str) -> Iterator[None]:
        """Time the enclosed block under ``label``."""
        self.start(label)
        try:
            yield
        finally:
            self.end(label)

    def collect(self) -> None:
        """Add this thread's totals to the shared results and clear them."""
        local = self._state().local
        with self._lock:
            for label, value in local.items():
                self._global[label] = self._global.get(label, 0) + value
        local.clear()

    def get(self, label: str) -> int:
        """Return the collected total for ``label`` in nanoseconds."""
        with self._lock:
            try:
                return self._global[label]
            except KeyError:
                raise InvalidArgumentError(
                    f"The label {label!r} is not contained in TimeProfiler.") from None

    def result_size(self) -> int:
        with self._lock:
            return len(self._global)

    def reset(self) -> None:
        state = self._state()
        state.started.clear()
        state.local.clear()
        with self._lock:
            self._global.clear()

    def report(self) -> str:
        """Return one line per collected label with its total in seconds."""
        if not self.enabled:
            return ""
        with self._lock:
            items = sorted(self._global.items())
        return "\n".join(f"{label} {value / 1e9:g}s(thread time)" for label, value in items)