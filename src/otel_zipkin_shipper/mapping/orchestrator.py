"""Span record to Zipkin span mapping pipeline.

Composes the individual mappers into the per-span conversion and maps a batch
one-to-one in input order. All functions are pure: inputs are never mutated
and no network I/O happens here.
"""
from __future__ import annotations

from typing import Iterable, List

from ..models.otel import SpanRecord
from ..models.zipkin import Endpoint, SpanContext, ZipkinSpanModel
from .annotations import to_zipkin_annotations
from .id_utils import to_zipkin_id, to_zipkin_parent_id, to_zipkin_trace_id
from .kind import to_zipkin_kind
from .remote_endpoint import to_zipkin_remote_endpoint
from .tags import to_zipkin_tags

__all__ = ["to_zipkin_span_context", "to_zipkin_span_model", "to_zipkin_span_models"]


def to_zipkin_span_context(record: SpanRecord) -> SpanContext:
    return SpanContext(
        trace_id=to_zipkin_trace_id(record.trace_id),
        id=to_zipkin_id(record.span_id),
        parent_id=to_zipkin_parent_id(record.parent_span_id),
    )


def to_zipkin_span_model(record: SpanRecord, service_name: str) -> ZipkinSpanModel:
    """Convert one finished span into a Zipkin span.

    Args:
        record: Finished span record (read-only)
        service_name: Used verbatim as the local endpoint service name

    Returns:
        ZipkinSpanModel with absent optional members set to None
    """
    return ZipkinSpanModel(
        span_context=to_zipkin_span_context(record),
        name=record.name,
        kind=to_zipkin_kind(record.span_kind),
        timestamp=record.start_time,
        duration=record.end_time - record.start_time,
        shared=False,
        local_endpoint=Endpoint(service_name=service_name),
        remote_endpoint=to_zipkin_remote_endpoint(record),
        annotations=to_zipkin_annotations(record.message_events),
        tags=to_zipkin_tags(record),
    )


def to_zipkin_span_models(
    records: Iterable[SpanRecord], service_name: str
) -> List[ZipkinSpanModel]:
    """Convert a batch, preserving order (one output per input)."""
    return [to_zipkin_span_model(record, service_name) for record in records]
