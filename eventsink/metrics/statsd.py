"""
Fire-and-forget StatsD / DogStatsD dispatch.

Intent:
    Outputs report `outputs` counts to StatsD-compatible agents without ever
    waiting on the network. Sends are queued and drained by one daemon thread.

Behavior:
    - `count_metric()` never blocks: when the bounded queue is full the metric
      is dropped and a warning is logged.
    - Plain StatsD has no tags, so tag values are folded into the metric name
      (`outputs` + ["output:x", "status:ok"] -> `outputs.x.ok`).
    - DogStatsD receives the metric name unchanged with the tags attached.
    - Send failures are logged by the worker and never reach callers.
    - `close()` sends everything queued before it; later metrics are refused.

Env:
    STATSD_FORWARDER / STATSD_NAMESPACE
    DOGSTATSD_FORWARDER / DOGSTATSD_NAMESPACE / DOGSTATSD_TAGS
"""
from __future__ import annotations

import logging
import os
import queue
import threading
import time
from typing import Any, Optional, Sequence

from datadog.dogstatsd import DogStatsd

_log = logging.getLogger("eventsink.metrics")

_STOP = object()


def flatten_tags(metric: str, tags: Sequence[str]) -> str:
    """Fold `key:value` tag values into a dotted StatsD metric name."""
    name = metric
    for tag in tags:
        _, _, value = tag.partition(":")
        if value:
            name += "." + value
    return name


class MetricDispatcher:
    """Background sender for counter metrics.

    Parameters:
        statsd: Client used as plain StatsD (tags folded into the name).
        dogstatsd: Client used as DogStatsD (tags passed through).
        queue_size: Bound of the pending-send queue.

    Both clients only need `increment(metric, value, tags=...)`.
    """

    def __init__(self, *, statsd: Any = None, dogstatsd: Any = None, queue_size: int = 1000):
        self._statsd = statsd
        self._dogstatsd = dogstatsd
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=max(1, queue_size))
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()
        self._closed = False

    @property
    def enabled(self) -> bool:
        return self._statsd is not None or self._dogstatsd is not None

    def _ensure_worker(self) -> None:
        # caller holds _start_lock
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="eventsink-statsd", daemon=True)
            self._thread.start()

    def count_metric(self, metric: str, value: int, tags: Sequence[str]) -> bool:
        """Queue a counter increment. Returns False when nothing was queued."""
        if not self.enabled:
            return False
        # close() sets _closed under this lock; nothing is queued after _STOP.
        with self._start_lock:
            if self._closed:
                return False
            self._ensure_worker()
            try:
                self._queue.put_nowait((metric, value, list(tags)))
                queued = True
            except queue.Full:
                queued = False
        if not queued:
            _log.warning("statsd queue full, dropping metric=%s tags=%s", metric, ",".join(tags))
            return False
        return True

    def _send(self, metric: str, value: int, tags: list[str]) -> None:
        if self._statsd is not None:
            try:
                self._statsd.increment(flatten_tags(metric, tags), value)
            except Exception as exc:
                _log.error("Unable to send metric (%s) to StatsD: %s", metric, exc)
        if self._dogstatsd is not None:
            try:
                self._dogstatsd.increment(metric, value, tags=tags)
            except Exception as exc:
                _log.error("Unable to send metric (%s) to DogStatsD: %s", metric, exc)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._send(*item)
            finally:
                self._queue.task_done()

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until queued metrics are sent. Returns False on timeout."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                if deadline is None:
                    self._queue.all_tasks_done.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Drain pending sends and stop the worker thread."""
        with self._start_lock:
            self._closed = True
            thread = self._thread
        if thread is None:
            return
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            _log.warning("statsd queue did not drain within %.1fs", timeout)
            return
        thread.join(timeout)


def _parse_forwarder(raw: str) -> tuple[str, int] | None:
    host, sep, port = raw.strip().rpartition(":")
    if not sep or not host:
        return None
    try:
        return host, int(port)
    except ValueError:
        return None


def _client_from_env(prefix: str, *, with_tags: bool) -> DogStatsd | None:
    raw = (os.getenv(f"{prefix}_FORWARDER") or "").strip()
    if not raw:
        return None
    target = _parse_forwarder(raw)
    if target is None:
        _log.warning("Invalid %s_FORWARDER=%s, expected host:port", prefix, raw)
        return None
    namespace = (os.getenv(f"{prefix}_NAMESPACE") or "").strip().rstrip(".") or None
    constant_tags = None
    if with_tags:
        constant_tags = [t.strip() for t in (os.getenv(f"{prefix}_TAGS") or "").split(",") if t.strip()] or None
    host, port = target
    _log.info("%s client enabled: %s:%s", prefix.capitalize(), host, port)
    return DogStatsd(host=host, port=port, namespace=namespace, constant_tags=constant_tags)


def build_dispatcher_from_env(queue_size: int = 1000) -> MetricDispatcher:
    """Create a dispatcher with StatsD/DogStatsD clients when forwarders are set."""
    return MetricDispatcher(
        statsd=_client_from_env("STATSD", with_tags=False),
        dogstatsd=_client_from_env("DOGSTATSD", with_tags=True),
        queue_size=queue_size,
    )


__all__ = ["MetricDispatcher", "build_dispatcher_from_env", "flatten_tags"]
