"""Flattening of span attributes, status and scope metadata into Zipkin tags.

Tags are built in two phases:

1. Attribute flattening in input order. Arrays are JSON encoded, scalars use
   their canonical emission. A repeated key overwrites the earlier value.
2. Synthetic tags:
   - ``otel.status_code`` when the status is not UNSET
   - ``error`` = status message when the status is ERROR
   - ``error`` removed when its final value is the literal ``"false"``
   - ``otel.library.name`` / ``otel.library.version`` from the
     instrumentation library when its name is set

The synthetic ``error`` tag overwrites an ``error`` attribute, and the
``"false"`` cleanup only inspects the value left after that overwrite.

Constants:
    KEY_STATUS_CODE, KEY_ERROR, KEY_LIBRARY_NAME, KEY_LIBRARY_VERSION
"""
from __future__ import annotations

from typing import Dict, Optional

from ..models.otel import SpanRecord, StatusCode
from .values import array_to_json, emit, is_array

__all__ = [
    "KEY_ERROR",
    "KEY_LIBRARY_NAME",
    "KEY_LIBRARY_VERSION",
    "KEY_STATUS_CODE",
    "to_zipkin_tags",
]

KEY_STATUS_CODE = "otel.status_code"
KEY_ERROR = "error"
KEY_LIBRARY_NAME = "otel.library.name"
KEY_LIBRARY_VERSION = "otel.library.version"


def to_zipkin_tags(record: SpanRecord) -> Optional[Dict[str, str]]:
    """Build the tag map for a span, or None when it would be empty."""
    tags: Dict[str, str] = {}
    for attr in record.attributes:
        if is_array(attr.value):
            tags[attr.key] = array_to_json(attr.value)
        else:
            tags[attr.key] = emit(attr.value)

    if record.status_code != StatusCode.UNSET:
        tags[KEY_STATUS_CODE] = record.status_code.value
    if record.status_code == StatusCode.ERROR:
        tags[KEY_ERROR] = record.status_message
    # a boolean error attribute set to false means "no error"
    if tags.get(KEY_ERROR) == "false":
        del tags[KEY_ERROR]

    library = record.instrumentation_library
    if library.name:
        tags[KEY_LIBRARY_NAME] = library.name
        if library.version:
            tags[KEY_LIBRARY_VERSION] = library.version

    return tags or None
