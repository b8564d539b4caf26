"""
In-process named counters for outputs.

Intent:
    Keep per-output statistics (e.g. `ociobjectstorage{status=ok}`) in memory
    so operators and tests can read them without a metrics backend. The
    Prometheus registry and StatsD carry the same information outward; this
    store is the local view.

Concurrency:
    Many uploads may run at once, so every mutation happens under one lock.
"""
from __future__ import annotations

from collections import defaultdict
from threading import Lock
from typing import Dict, Tuple

LabelKey = Tuple[Tuple[str, str], ...]


def _label_key(labels: dict[str, str] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


class CounterStore:
    """Thread-safe map of counter name -> label set -> count."""

    def __init__(self) -> None:
        self._counters: Dict[str, Dict[LabelKey, int]] = defaultdict(dict)
        self._lock = Lock()

    def increment(self, name: str, *, amount: int = 1, **labels: str) -> None:
        """Increase a named counter by `amount` (defaults to 1)."""
        if amount == 0:
            return
        key = _label_key(labels)
        with self._lock:
            current = self._counters[name].get(key, 0)
            self._counters[name][key] = current + amount

    def value(self, name: str, **labels: str) -> int:
        key = _label_key(labels)
        with self._lock:
            return self._counters.get(name, {}).get(key, 0)

    def snapshot(self, name: str) -> dict[LabelKey, int]:
        """Return a shallow copy of the stored counter values."""
        with self._lock:
            return dict(self._counters.get(name, {}))

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


_default_store = CounterStore()


def default_store() -> CounterStore:
    """Process-wide store used when no explicit store is injected."""
    return _default_store


def reset_for_tests() -> None:
    """Clear the process-wide store. Intended for pytest fixtures."""
    _default_store.reset()


__all__ = [
    "CounterStore",
    "default_store",
    "reset_for_tests",
]
