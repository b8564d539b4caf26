"""
Pytest configuration for eventsink tests.

Why: Tests must never pick up real OCI/StatsD settings from the developer's
shell, and AnyIO should run on asyncio only.
"""
from __future__ import annotations

import threading

import pytest

from eventsink.metrics import counters
from eventsink.metrics.counters import CounterStore
from eventsink.metrics.prometheus import OutputMetrics
from eventsink.metrics.statsd import MetricDispatcher
from eventsink.outputs.client import OutputContext

_ENV_VARS = (
    "OCI_TENANCY",
    "OCI_USER",
    "OCI_REGION",
    "OCI_FINGERPRINT",
    "OCI_PRIVATEKEY",
    "OCI_PASSPHRASE",
    "OCI_OBJECTSTORAGE_BUCKET",
    "OCI_OBJECTSTORAGE_NAMESPACE",
    "OCI_OBJECTSTORAGE_OBJECTNAMEPREFIX",
    "STATSD_FORWARDER",
    "STATSD_NAMESPACE",
    "DOGSTATSD_FORWARDER",
    "DOGSTATSD_NAMESPACE",
    "DOGSTATSD_TAGS",
    "EVENTSINK_METRICS_QUEUE_SIZE",
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    counters.reset_for_tests()
    yield
    counters.reset_for_tests()


class FakeStatsd:
    """Records `increment` calls like a DogStatsd client would receive them."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, int, list[str] | None]] = []
        self.error = error
        self._lock = threading.Lock()

    def increment(self, metric, value=1, tags=None, sample_rate=None):
        with self._lock:
            self.calls.append((metric, value, tags))
        if self.error is not None:
            raise self.error


class FakeStorage:
    """In-memory `ObjectPutStorage`; optionally fails every call."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict] = []
        self.error = error
        self._lock = threading.Lock()

    def put_object(self, *, namespace: str, bucket: str, name: str, body: bytes, content_type: str) -> None:
        with self._lock:
            self.calls.append(
                {"namespace": namespace, "bucket": bucket, "name": name, "body": body, "content_type": content_type}
            )
        if self.error is not None:
            raise self.error


@pytest.fixture
def statsd_clients():
    return FakeStatsd(), FakeStatsd()


@pytest.fixture
def output_context(statsd_clients):
    statsd, dogstatsd = statsd_clients
    ctx = OutputContext(
        counters=CounterStore(),
        prometheus=OutputMetrics(),
        dispatcher=MetricDispatcher(statsd=statsd, dogstatsd=dogstatsd),
    )
    yield ctx
    ctx.dispatcher.close()
