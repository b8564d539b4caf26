"""
OCI Object Storage output: archive each event as one JSON object.

Intent:
    Best-effort sink in a fan-out pipeline. Each call serializes the event,
    names the object `{prefix}/{YYYY-MM-DD}/{RFC3339Nano}.json`, issues one
    blocking put-object and records exactly one outcome (ok XOR error).

Behavior:
    - Nothing is raised to the caller. Failures are visible through logs and
      metrics only; the returned `UploadResult` is informational.
    - No retry, no re-queue: a failed upload drops the event.
    - The storage client is built on first use and cached. A construction
      failure is not cached, so the next event tries again. Pass
      `cache_client=False` to rebuild the client for every event.
    - No timeout is set here; the SDK transport defaults apply.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from eventsink.events.payload import EventEncodingError, EventPayload, encode_event
from eventsink.storage.config import OCIConfig
from eventsink.storage.keys import make_object_name
from eventsink.storage.oci_adapter import OCIObjectStorageAdapter, build_oci_client
from eventsink.storage.ports import ObjectPutStorage, ObjectStorageError

from .client import ERROR, OK, OutputContext

LOG = logging.getLogger("eventsink.outputs")

DESTINATION = "ociobjectstorage"
CONTENT_TYPE = "application/json"

StorageFactory = Callable[[OCIConfig], ObjectPutStorage]


def _default_storage_factory(config: OCIConfig) -> ObjectPutStorage:
    return OCIObjectStorageAdapter(build_oci_client(config))


@dataclass
class UploadResult:
    """Outcome of one upload; `error` carries the logged message on failure."""

    status: str
    object_name: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OK


class OCIObjectStorageOutput:
    """Uploads events to one configured OCI bucket.

    Parameters:
        config: Destination and credentials; trimmed on construction.
        context: Metric sinks outcomes are recorded into.
        storage_factory: Builds the put-object adapter from the config.
        cache_client: Reuse the adapter across uploads (default True). The
            first construction runs under a lock, so concurrent first
            uploads wait behind it; a slow or failing factory delays them
            all, and after a failure the next caller builds again.
        clock: Nanoseconds since the epoch; injectable for tests.
    """

    destination = DESTINATION

    def __init__(
        self,
        config: OCIConfig,
        context: OutputContext,
        *,
        storage_factory: StorageFactory = _default_storage_factory,
        cache_client: bool = True,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        self.config = config.trimmed()
        self.context = context
        self._storage_factory = storage_factory
        self._cache_client = cache_client
        self._clock = clock
        self._storage: Optional[ObjectPutStorage] = None
        self._storage_lock = threading.Lock()

    def _get_storage(self) -> ObjectPutStorage:
        if not self._cache_client:
            return self._storage_factory(self.config)
        with self._storage_lock:
            if self._storage is None:
                self._storage = self._storage_factory(self.config)
            return self._storage

    def _fail(self, message: str, object_name: Optional[str] = None) -> UploadResult:
        LOG.error("OCIObjectStorage - %s", message)
        self.context.record(self.destination, ERROR)
        return UploadResult(status=ERROR, object_name=object_name, error=message)

    def upload(self, event: EventPayload | Mapping[str, Any]) -> UploadResult:
        """Archive one event. Never raises; see module docstring."""
        try:
            body = encode_event(event)
        except EventEncodingError as exc:
            return self._fail(f"Error while encoding message - {exc}")

        object_name = make_object_name(self.config.object_storage.object_name_prefix, epoch_ns=self._clock())

        try:
            storage = self._get_storage()
        except ObjectStorageError as exc:
            return self._fail(str(exc), object_name)

        try:
            storage.put_object(
                namespace=self.config.object_storage.namespace,
                bucket=self.config.object_storage.bucket,
                name=object_name,
                body=body,
                content_type=CONTENT_TYPE,
            )
        except ObjectStorageError as exc:
            return self._fail(f"Error while Uploading message - {exc}", object_name)

        LOG.info("OCIObjectStorage - Upload to bucket OK (%s)", object_name)
        self.context.record(self.destination, OK)
        return UploadResult(status=OK, object_name=object_name)


__all__ = ["DESTINATION", "OCIObjectStorageOutput", "UploadResult"]
