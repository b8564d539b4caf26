"""
Helpers to generate object names for archived events.

Conventions:
    {prefix}/{YYYY-MM-DD}/{RFC3339Nano}.json

    - Date and timestamp are UTC.
    - The timestamp follows the RFC3339Nano layout: up to nine fractional
      digits, trailing zeros dropped, the dot dropped when the fraction is 0.
    - Uniqueness relies on nanosecond resolution; there is no collision check.
    - An empty prefix yields a leading slash ("/2026-10-19/...json"). Object
      storage accepts such names, and existing buckets already contain them,
      so the shape is kept.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

_NS_PER_SECOND = 1_000_000_000


def rfc3339_nano(epoch_ns: int) -> str:
    """Format nanoseconds since the epoch as RFC3339Nano in UTC."""
    seconds, nanos = divmod(epoch_ns, _NS_PER_SECOND)
    base = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{nanos:09d}".rstrip("0")
    if fraction:
        return f"{base}.{fraction}Z"
    return f"{base}Z"


def make_object_name(prefix: str | None, *, epoch_ns: int | None = None) -> str:
    """Build the object name for one upload.

    Returns: {prefix}/{YYYY-MM-DD}/{RFC3339Nano}.json
    """
    if epoch_ns is None:
        epoch_ns = time.time_ns()
    day = datetime.fromtimestamp(epoch_ns // _NS_PER_SECOND, tz=timezone.utc).strftime("%Y-%m-%d")
    p = (prefix or "").strip()
    return f"{p}/{day}/{rfc3339_nano(epoch_ns)}.json"


__all__ = ["make_object_name", "rfc3339_nano"]
