"""Span kind mapping from OpenTelemetry roles to Zipkin kinds.

Zipkin has no notion of an internal span. INTERNAL (like UNSPECIFIED)
collapses to UNDETERMINED, which is omitted on the wire. This mapping is
intentionally lossy.
"""
from __future__ import annotations

from typing import Any, Dict

from ..models.otel import SpanKind
from ..models.zipkin import ZipkinKind

__all__ = ["to_zipkin_kind"]

_KIND_MAP: Dict[SpanKind, ZipkinKind] = {
    SpanKind.UNSPECIFIED: ZipkinKind.UNDETERMINED,
    SpanKind.INTERNAL: ZipkinKind.UNDETERMINED,
    SpanKind.SERVER: ZipkinKind.SERVER,
    SpanKind.CLIENT: ZipkinKind.CLIENT,
    SpanKind.PRODUCER: ZipkinKind.PRODUCER,
    SpanKind.CONSUMER: ZipkinKind.CONSUMER,
}


def to_zipkin_kind(kind: Any) -> ZipkinKind:
    """Map a span kind to its Zipkin counterpart; unknown values are UNDETERMINED."""
    return _KIND_MAP.get(kind, ZipkinKind.UNDETERMINED)
