"""Internal mapping subpackage for decomposed span conversion logic.

This package contains the implementation of the OpenTelemetry span record to
Zipkin span conversion, split into focused, single-responsibility modules. All
functions within this package are pure (no network I/O) and deterministic.

The public API lives in the top-level `mapper.py` facade. Callers should not
import directly from this package unless accessing helpers for testing.

Modules:
    orchestrator: Per-span and batch composition of the mappers below
    id_utils: Trace/span/parent id conversion
    kind: Span kind mapping
    annotations: Event to annotation conversion
    tags: Attribute, status and scope flattening into tags
    remote_endpoint: Ranked remote endpoint selection
    values: Canonical string and JSON forms of attribute values
    time_utils: Timestamp conversion and UTC normalization

Design Invariants:
    - No network calls permitted
    - Input records are never mutated
    - Output order matches input order, one span out per span in
    - Conversion never raises for a valid input record
"""
from __future__ import annotations

from . import time_utils as time_utils  # noqa: F401

__all__ = ["time_utils"]
