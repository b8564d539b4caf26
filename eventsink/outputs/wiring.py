"""
Shared helper for wiring the OCI output from the environment.

Why:
    Both the HTTP app and the CLI need the same startup sequence: load the
    config, decide whether the output is enabled, warn about obviously
    incomplete credentials and build the metric context once.

Behavior:
    - Returns None when OCI_OBJECTSTORAGE_BUCKET is unset (output disabled).
    - Missing credential fields are logged as a warning only; the provider
      reports bad credentials when the first upload runs.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from eventsink.metrics.statsd import build_dispatcher_from_env
from eventsink.storage.config import get_metrics_queue_size, load_oci_config_from_env

from .client import OutputContext
from .oci_object_storage import OCIObjectStorageOutput

logger = logging.getLogger("eventsink.outputs")


def _should_load_dotenv() -> bool:
    """Load `.env` outside pytest unless EVENTSINK_ENABLE_DOTENV is false."""
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("EVENTSINK_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


def load_dotenv_if_enabled() -> None:
    if not _should_load_dotenv():
        return
    from dotenv import load_dotenv

    load_dotenv()


def build_context_from_env() -> OutputContext:
    """Metric context with StatsD/DogStatsD clients taken from the environment."""
    return OutputContext(dispatcher=build_dispatcher_from_env(get_metrics_queue_size()))


def build_oci_output_if_configured(context: Optional[OutputContext] = None) -> Optional[OCIObjectStorageOutput]:
    """Build the OCI Object Storage output when a bucket is configured."""
    config = load_oci_config_from_env()
    if not config.enabled:
        logger.debug("OCI Object Storage output disabled: no bucket configured")
        return None
    missing = config.missing_fields()
    if missing:
        logger.warning("OCI Object Storage output configured with empty fields: %s", ", ".join(missing))
    output = OCIObjectStorageOutput(config, context or build_context_from_env())
    logger.info(
        "Enabled Outputs: OCIObjectStorage (namespace=%s bucket=%s prefix=%s)",
        config.object_storage.namespace,
        config.object_storage.bucket,
        config.object_storage.object_name_prefix or "<none>",
    )
    return output


__all__ = [
    "build_context_from_env",
    "build_oci_output_if_configured",
    "load_dotenv_if_enabled",
]
