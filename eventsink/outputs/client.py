"""
Shared context for outputs: where upload outcomes are recorded.

Every output reports one outcome per event into three sinks:
    1. the in-process `CounterStore` (counter named after the destination),
    2. the Prometheus `outputs{destination, status}` counter,
    3. StatsD/DogStatsD `outputs` with tags `output:<dest>,status:<status>`,
       sent in the background.

The context is built once at startup and injected into each output.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from eventsink.metrics.counters import CounterStore, default_store
from eventsink.metrics.prometheus import OutputMetrics
from eventsink.metrics.statsd import MetricDispatcher

OK = "ok"
ERROR = "error"


@dataclass
class OutputContext:
    counters: CounterStore = field(default_factory=default_store)
    prometheus: OutputMetrics = field(default_factory=OutputMetrics)
    dispatcher: MetricDispatcher = field(default_factory=MetricDispatcher)

    def count_metric(self, metric: str, value: int, tags: Sequence[str]) -> None:
        """Hand a counter to the background dispatcher; never blocks."""
        self.dispatcher.count_metric(metric, value, tags)

    def record(self, destination: str, status: str) -> None:
        """Record one outcome for `destination` in all sinks."""
        self.counters.increment(destination, status=status)
        self.count_metric("outputs", 1, [f"output:{destination}", f"status:{status}"])
        self.prometheus.inc(destination, status)


__all__ = ["ERROR", "OK", "OutputContext"]
