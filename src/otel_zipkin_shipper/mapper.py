"""Public facade for span record to Zipkin span mapping.

This module provides the stable public API for converting finished span
records into Zipkin span models. The mapping logic lives in the
otel_zipkin_shipper.mapping package.

Public Functions:
    to_zipkin_span_model: Convert a single span record
    to_zipkin_span_models: Convert a batch, order preserved
    map_readable_spans: Adapt and convert OpenTelemetry SDK spans

Internal Re-exports:
    REMOTE_ENDPOINT_KEY_RANK: Remote endpoint precedence table (test usage)
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .mapping.orchestrator import to_zipkin_span_model, to_zipkin_span_models
from .mapping.remote_endpoint import REMOTE_ENDPOINT_KEY_RANK
from .models.otel import SpanRecord
from .models.zipkin import ZipkinSpanModel

if TYPE_CHECKING:  # pragma: no cover - typing only
    from opentelemetry.sdk.trace import ReadableSpan

__all__ = [
    "map_readable_spans",
    "to_zipkin_span_model",
    "to_zipkin_span_models",
    "REMOTE_ENDPOINT_KEY_RANK",
]


def map_readable_spans(
    spans: Sequence["ReadableSpan"], service_name: str
) -> List[ZipkinSpanModel]:
    """Convert OpenTelemetry SDK spans into Zipkin spans.

    Args:
        spans: Finished SDK spans, typically the batch handed to an exporter
        service_name: Local endpoint service name for every span

    Returns:
        One ZipkinSpanModel per input span, in input order
    """
    records = [SpanRecord.from_readable_span(span) for span in spans]
    return to_zipkin_span_models(records, service_name)
