"""
Prometheus metrics for outputs.

Metrics exposed:
- eventsink_outputs_total: Upload outcomes by destination and status

A dedicated `CollectorRegistry` is used per `OutputMetrics` instance so tests
(and multiple apps in one process) never collide on metric names in the
global default registry.
"""
from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest


class OutputMetrics:
    """Labeled `outputs` counter inside its own registry."""

    def __init__(self, registry: CollectorRegistry | None = None, *, namespace: str = "eventsink"):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._namespace = namespace
        self.outputs = Counter(
            "outputs",
            "Number of events sent to outputs, by destination and status",
            ["destination", "status"],
            namespace=namespace,
            registry=self.registry,
        )

    def inc(self, destination: str, status: str) -> None:
        self.outputs.labels(destination=destination, status=status).inc()

    def value(self, destination: str, status: str) -> float:
        """Current counter value (0.0 when the label set was never touched)."""
        sample = self.registry.get_sample_value(
            f"{self._namespace}_outputs_total",
            {"destination": destination, "status": status},
        )
        return sample or 0.0

    def render(self) -> tuple[bytes, str]:
        """Return (body, content_type) in Prometheus text exposition format."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


__all__ = ["OutputMetrics"]
