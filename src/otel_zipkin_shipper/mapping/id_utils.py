"""Trace, span and parent identifier conversion to Zipkin numeric ids.

Zipkin models a 128-bit trace id as two unsigned 64-bit integers and span ids
as a single unsigned 64-bit integer. Input identifiers are fixed-width byte
strings, interpreted big-endian.

ID Format:
    Trace ID: high = bytes[0:8], low = bytes[8:16]
    Span ID: int.from_bytes(bytes[0:8], "big")
    Parent ID: None when the parent span id is all zero bytes

Public Functions:
    to_zipkin_trace_id: Split a 16-byte trace id into a TraceID
    to_zipkin_id: Convert an 8-byte span id to an int
    to_zipkin_parent_id: Convert a parent span id, mapping the invalid id to None
"""
from __future__ import annotations

from typing import Optional

from ..models.zipkin import TraceID

__all__ = ["to_zipkin_trace_id", "to_zipkin_id", "to_zipkin_parent_id"]


def to_zipkin_trace_id(trace_id: bytes) -> TraceID:
    return TraceID(
        high=int.from_bytes(trace_id[:8], "big"),
        low=int.from_bytes(trace_id[8:], "big"),
    )


def to_zipkin_id(span_id: bytes) -> int:
    return int.from_bytes(span_id, "big")


def to_zipkin_parent_id(span_id: bytes) -> Optional[int]:
    """Return the numeric parent id, or None when the span has no parent."""
    if not any(span_id):
        return None
    return to_zipkin_id(span_id)
