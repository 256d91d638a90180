"""Logging formatting and functions for debugging."""

import logging
import os
from typing import Mapping

import ujson

FORMAT = "[{asctime}][{name}][{threadName:<12}] [{levelname:8s}](L:{lineno}) {funcName}: {message}"
logging.basicConfig(format=FORMAT, datefmt="%Y-%m-%d %H:%M:%S", style="{")

LOG = logging.getLogger("ezid_client")
LOG.setLevel(os.getenv("LOG_LEVEL", "INFO"))


def log_debug_metadata(identifier: str, metadata: Mapping[str, str] | None) -> None:
    """
    Log the metadata record sent for or received about an identifier at the debug level.

    The record is pretty-printed as JSON so multi-line values stay readable in the log.

    :param identifier: Identifier the record belongs to.
    :param metadata: Metadata field names mapped to their values.
    """
    if not LOG.isEnabledFor(logging.DEBUG):
        return
    LOG.debug(
        "Metadata for %r: %s",
        identifier,
        ujson.dumps(
            {str(key): str(value) for key, value in (metadata or {}).items()},
            indent=4,
            ensure_ascii=False,
            escape_forward_slashes=False,
        ),
    )
