"""
Storage ports used by outputs.

Keep these small and SDK-agnostic so tests can supply simple fakes.
"""
from __future__ import annotations

from typing import Protocol


class ObjectStorageError(Exception):
    """A put-object call failed (provider rejection or transport error)."""


class ObjectStorageClientError(ObjectStorageError):
    """The storage client could not be constructed from the configuration."""


class ObjectPutStorage(Protocol):
    """Minimal interface to write one object into a namespace/bucket.

    Implementations raise `ObjectStorageError` on failure and return nothing
    on success.
    """

    def put_object(self, *, namespace: str, bucket: str, name: str, body: bytes, content_type: str) -> None: ...


__all__ = ["ObjectPutStorage", "ObjectStorageClientError", "ObjectStorageError"]
