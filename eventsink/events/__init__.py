"""Event record model and JSON encoding."""

from .payload import EventEncodingError, EventPayload, Priority, encode_event, make_test_event

__all__ = ["EventEncodingError", "EventPayload", "Priority", "encode_event", "make_test_event"]
