"""
OCI-backed object storage adapter.

This adapter implements `ObjectPutStorage` on top of the `oci` SDK. The
client is duck-typed: anything exposing

- put_object(namespace_name, bucket_name, object_name, put_object_body,
  content_length=..., content_type=...)

works, which keeps unit tests free of network calls.

Each upload is one attempt: the client is built with the SDK retry strategy
disabled, so a failed PutObject is reported once instead of being resent
with backoff.

Security:
- Credentials are static API-key credentials (tenancy/user/fingerprint/key).
- Key material and passphrase are handed to the SDK only; they are never
  logged.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

import oci
from oci.exceptions import ClientError, ServiceError

from .config import OCIConfig, read_private_key
from .ports import ObjectPutStorage, ObjectStorageClientError, ObjectStorageError

_log = logging.getLogger("eventsink.storage")


def build_sdk_config(config: OCIConfig) -> Dict[str, Any]:
    """Translate `OCIConfig` into the dict shape the SDK expects.

    Key material is always passed inline (`key_content`); a configured key
    path is read here so a missing file surfaces as a logged error and an
    empty key rather than an exception.
    """
    return {
        "tenancy": config.tenancy,
        "user": config.user,
        "region": config.region,
        "fingerprint": config.fingerprint,
        "key_content": read_private_key(config),
        "pass_phrase": config.passphrase or None,
    }


def build_oci_client(config: OCIConfig) -> Any:
    """Create an Object Storage client from static credentials.

    SDK-level retries are turned off; callers see the first failure.

    Raises:
        ObjectStorageClientError when the SDK rejects the configuration.
    """
    sdk_config = build_sdk_config(config)
    try:
        return oci.object_storage.ObjectStorageClient(sdk_config, retry_strategy=oci.retry.NO_RETRY_STRATEGY)
    except (ClientError, ValueError, TypeError) as exc:
        raise ObjectStorageClientError(f"Error while creating Object Storage Client [{exc}]") from exc


class OCIObjectStorageAdapter(ObjectPutStorage):
    """Storage adapter using an OCI Object Storage client."""

    def __init__(self, client: Any):
        self._client = client

    def put_object(self, *, namespace: str, bucket: str, name: str, body: bytes, content_type: str) -> None:
        """Upload one object.

        Raises:
            ObjectStorageError wrapping SDK service errors and transport failures.
        """
        try:
            self._client.put_object(
                namespace,
                bucket,
                name,
                body,
                content_length=len(body),
                content_type=content_type,
            )
        except ServiceError as exc:
            raise ObjectStorageError(f"status={exc.status} code={exc.code} message={exc.message}") from exc
        except (ClientError, OSError) as exc:
            raise ObjectStorageError(str(exc) or exc.__class__.__name__) from exc
        _log.debug("put_object namespace=%s bucket=%s name=%s bytes=%s", namespace, bucket, name, len(body))


__all__ = ["OCIObjectStorageAdapter", "build_oci_client", "build_sdk_config"]
