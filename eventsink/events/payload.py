"""
Event record model and canonical JSON encoding.

Intent:
    Outputs never interpret event fields; they only need a stable byte
    representation to ship. This module owns that representation so every
    output encodes the same way.

Shape:
    {"uuid", "output", "priority", "rule", "time", "output_fields",
     "source", "tags", "hostname"}

Behavior:
    - `encode_event` accepts an `EventPayload` or any JSON-like mapping.
    - Output is compact JSON (no whitespace between tokens), UTF-8 encoded.
    - Datetimes are rendered as RFC 3339 in UTC with a `Z` suffix.
"""
from __future__ import annotations

import json
import uuid as _uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping


class EventEncodingError(ValueError):
    """Raised when an event record cannot be represented as JSON."""


class Priority(str, Enum):
    """Falco priorities, most to least severe."""

    EMERGENCY = "Emergency"
    ALERT = "Alert"
    CRITICAL = "Critical"
    ERROR = "Error"
    WARNING = "Warning"
    NOTICE = "Notice"
    INFORMATIONAL = "Informational"
    DEBUG = "Debug"

    @classmethod
    def parse(cls, value: str | "Priority" | None) -> "Priority":
        """Parse a priority name case-insensitively (`info` is accepted too)."""
        if isinstance(value, Priority):
            return value
        raw = (value or "").strip().lower()
        if raw == "info":
            raw = "informational"
        for member in cls:
            if member.value.lower() == raw:
                return member
        raise ValueError(f"unknown priority: {value!r}")


def format_rfc3339(value: datetime) -> str:
    """Render a datetime as RFC 3339 UTC, e.g. `2026-10-19T08:15:02.123456Z`.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class EventPayload:
    """A security event as received from the detection engine.

    Parameters:
        output: Human-readable alert line.
        priority: Severity of the rule that fired.
        rule: Name of the rule that fired.
        time: Event time; defaults to now (UTC).
        output_fields: Rule output fields, e.g. {"proc.name": "bash"}.
        source: Event source (e.g. "syscall", "k8s_audit").
        tags: Rule tags.
        hostname: Host that produced the event.
        uuid: Unique event id; generated when not provided.
    """

    output: str
    priority: Priority
    rule: str
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    output_fields: Dict[str, Any] = field(default_factory=dict)
    source: str = ""
    tags: List[str] = field(default_factory=list)
    hostname: str = ""
    uuid: str = field(default_factory=lambda: str(_uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "output": self.output,
            "priority": Priority.parse(self.priority).value,
            "rule": self.rule,
            "time": format_rfc3339(self.time),
            "output_fields": dict(self.output_fields),
            "source": self.source,
            "tags": list(self.tags),
            "hostname": self.hostname,
        }


def _default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return format_rfc3339(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_event(record: EventPayload | Mapping[str, Any]) -> bytes:
    """Serialize an event record to compact UTF-8 JSON.

    Raises:
        EventEncodingError when the record (or a nested value) has no JSON form.
    """
    data: Any = record.to_dict() if isinstance(record, EventPayload) else record
    if not isinstance(data, Mapping):
        raise EventEncodingError(f"event record must be a mapping, got {type(data).__name__}")
    data = dict(data)
    try:
        text = json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=_default)
    except (TypeError, ValueError) as exc:
        raise EventEncodingError(str(exc)) from exc
    return text.encode("utf-8")


def make_test_event(hostname: str = "") -> EventPayload:
    """Fixed event used to check an output end to end."""
    return EventPayload(
        output="This is a test from eventsink",
        priority=Priority.DEBUG,
        rule="Test rule",
        output_fields={"proc.name": "eventsink", "user.name": "eventsink"},
        source="eventsink",
        tags=["test", "example"],
        hostname=hostname,
    )


__all__ = [
    "EventEncodingError",
    "EventPayload",
    "Priority",
    "encode_event",
    "format_rfc3339",
    "make_test_event",
]
