"""
Centralized configuration for the OCI Object Storage output.

Intent:
    Provide a single source of truth for the bucket/namespace/prefix and the
    static API-key credentials the output authenticates with. The config is
    loaded once at startup and held for the process lifetime.

Behavior:
    - `load_oci_config_from_env()` reads the OCI_* variables listed below.
    - Every identifier and path is whitespace-trimmed at load time, so stray
      spaces from env files or secrets mounts never reach the SDK. The
      passphrase is kept verbatim; it is secret material, not an identifier.
    - The private key may be given inline (PEM text) or as a file path;
      `read_private_key()` resolves either form.
    - Presence of fields is not enforced here. `missing_fields()` lets callers
      warn early; the provider reports bad credentials at call time.

Env:
    OCI_TENANCY, OCI_USER, OCI_REGION, OCI_FINGERPRINT, OCI_PRIVATEKEY,
    OCI_PASSPHRASE, OCI_OBJECTSTORAGE_BUCKET, OCI_OBJECTSTORAGE_NAMESPACE,
    OCI_OBJECTSTORAGE_OBJECTNAMEPREFIX
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

_log = logging.getLogger("eventsink.storage")

PEM_MARKER = "-----BEGIN"


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _parse_int_env(name: str, default: int, *, minimum: int = 1) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        _log.warning("Invalid %s=%s, defaulting to %s", name, raw, default)
        return default
    if value < minimum:
        return default
    return value


@dataclass(frozen=True)
class ObjectStorageConfig:
    """Destination inside OCI Object Storage."""

    bucket: str = ""
    namespace: str = ""
    object_name_prefix: str = ""


@dataclass(frozen=True)
class OCIConfig:
    """Static API-key credentials plus the object storage destination.

    `private_key` holds either inline PEM text or a path to a PEM file.
    """

    tenancy: str = ""
    user: str = ""
    region: str = ""
    fingerprint: str = ""
    private_key: str = ""
    passphrase: str = ""
    object_storage: ObjectStorageConfig = field(default_factory=ObjectStorageConfig)

    def trimmed(self) -> "OCIConfig":
        """Return a copy with all identifiers and paths stripped of whitespace."""
        storage = ObjectStorageConfig(
            bucket=self.object_storage.bucket.strip(),
            namespace=self.object_storage.namespace.strip(),
            object_name_prefix=self.object_storage.object_name_prefix.strip(),
        )
        return replace(
            self,
            tenancy=self.tenancy.strip(),
            user=self.user.strip(),
            region=self.region.strip(),
            fingerprint=self.fingerprint.strip(),
            private_key=self.private_key.strip(),
            object_storage=storage,
        )

    @property
    def enabled(self) -> bool:
        """The output is active as soon as a bucket is configured."""
        return bool(self.object_storage.bucket.strip())

    @property
    def private_key_is_inline(self) -> bool:
        return self.private_key.lstrip().startswith(PEM_MARKER)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty (passphrase is optional)."""
        missing = [
            f.name
            for f in fields(self)
            if f.name not in ("passphrase", "object_storage") and not str(getattr(self, f.name)).strip()
        ]
        if not self.object_storage.bucket.strip():
            missing.append("object_storage.bucket")
        if not self.object_storage.namespace.strip():
            missing.append("object_storage.namespace")
        return missing


def load_oci_config_from_env() -> OCIConfig:
    """Read the OCI output configuration from environment variables."""
    return OCIConfig(
        tenancy=_env_str("OCI_TENANCY"),
        user=_env_str("OCI_USER"),
        region=_env_str("OCI_REGION"),
        fingerprint=_env_str("OCI_FINGERPRINT"),
        private_key=_env_str("OCI_PRIVATEKEY"),
        passphrase=os.getenv("OCI_PASSPHRASE") or "",
        object_storage=ObjectStorageConfig(
            bucket=_env_str("OCI_OBJECTSTORAGE_BUCKET"),
            namespace=_env_str("OCI_OBJECTSTORAGE_NAMESPACE"),
            object_name_prefix=_env_str("OCI_OBJECTSTORAGE_OBJECTNAMEPREFIX"),
        ),
    )


def read_private_key(config: OCIConfig) -> str:
    """Return PEM key material for `config`.

    Behavior:
        - Inline PEM is returned as-is.
        - Otherwise `private_key` is treated as a file path and read.
        - A read failure is logged and yields an empty string; the SDK then
          rejects the credentials when the client is built or used.
    """
    if config.private_key_is_inline:
        return config.private_key
    path = config.private_key.strip()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _log.error("Error while reading Private Key from file [%s]: %s", path, exc)
        return ""


def get_metrics_queue_size() -> int:
    """Bound of the background StatsD dispatch queue (default 1000)."""
    return _parse_int_env("EVENTSINK_METRICS_QUEUE_SIZE", 1000)


__all__ = [
    "ObjectStorageConfig",
    "OCIConfig",
    "get_metrics_queue_size",
    "load_oci_config_from_env",
    "read_private_key",
]
