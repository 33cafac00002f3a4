from __future__ import annotations

import pytest

from otel_zipkin_shipper.mapping.kind import to_zipkin_kind
from otel_zipkin_shipper.models.otel import SpanKind
from otel_zipkin_shipper.models.zipkin import ZipkinKind


@pytest.mark.parametrize(
    "kind,expected",
    [
        (SpanKind.UNSPECIFIED, ZipkinKind.UNDETERMINED),
        (SpanKind.INTERNAL, ZipkinKind.UNDETERMINED),
        (SpanKind.SERVER, ZipkinKind.SERVER),
        (SpanKind.CLIENT, ZipkinKind.CLIENT),
        (SpanKind.PRODUCER, ZipkinKind.PRODUCER),
        (SpanKind.CONSUMER, ZipkinKind.CONSUMER),
    ],
)
def test_every_kind_maps(kind, expected):
    assert to_zipkin_kind(kind) is expected


@pytest.mark.parametrize("unknown", ["LINK", 42, None])
def test_unknown_kind_defaults_to_undetermined(unknown):
    assert to_zipkin_kind(unknown) is ZipkinKind.UNDETERMINED
