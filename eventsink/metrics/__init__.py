"""Metric sinks used by outputs: process counters, Prometheus, StatsD."""
