"""Pydantic models for finished span records handed over by the tracing SDK.

These models give a typed, validated view of a span after it has ended. They
are the source structure for the `mapper` module and are treated as read-only
by the conversion code.

Records are usually built from an OpenTelemetry SDK `ReadableSpan` through
`SpanRecord.from_readable_span`, or validated from JSON files by the CLI. In
the JSON form identifiers may be given as hex strings.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from ..mapping.time_utils import epoch_ns_to_dt

if TYPE_CHECKING:  # pragma: no cover - typing only
    from opentelemetry.sdk.trace import ReadableSpan

TRACE_ID_WIDTH = 16
SPAN_ID_WIDTH = 8
INVALID_SPAN_ID = bytes(SPAN_ID_WIDTH)

ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
# The SDK keeps None members of homogeneous sequences; they encode as null.
AttributeValue = Union[
    ScalarValue,
    List[Optional[StrictBool]],
    List[Optional[StrictInt]],
    List[Optional[StrictFloat]],
    List[Optional[StrictStr]],
]


class SpanKind(str, Enum):
    UNSPECIFIED = "UNSPECIFIED"
    INTERNAL = "INTERNAL"
    SERVER = "SERVER"
    CLIENT = "CLIENT"
    PRODUCER = "PRODUCER"
    CONSUMER = "CONSUMER"


class StatusCode(str, Enum):
    UNSET = "UNSET"
    OK = "OK"
    ERROR = "ERROR"


def _coerce_id(value: Any, width: int) -> bytes:
    """Normalize an identifier given as bytes, hex string or int to `width` bytes."""
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith(("0x", "0X")):
            text = text[2:]
        try:
            raw = bytes.fromhex(text.rjust(width * 2, "0"))
        except ValueError as e:
            raise ValueError(f"identifier {value!r} is not valid hex") from e
    elif isinstance(value, int) and not isinstance(value, bool):
        if value < 0 or value >= 1 << (width * 8):
            raise ValueError(f"identifier {value} does not fit in {width} bytes")
        raw = value.to_bytes(width, "big")
    else:
        raise ValueError(f"unsupported identifier type {type(value).__name__}")
    if len(raw) != width:
        raise ValueError(f"identifier must be {width} bytes, got {len(raw)}")
    return raw


class Attribute(BaseModel):
    """A single typed key/value pair. Keys may repeat within a sequence."""

    key: str
    value: AttributeValue


class Event(BaseModel):
    """A timestamped message event recorded on a span."""

    time: datetime
    name: str
    attributes: List[Attribute] = Field(default_factory=list)


class InstrumentationLibrary(BaseModel):
    name: str = ""
    version: str = ""


class SpanRecord(BaseModel):
    """A finished span as produced by the instrumentation pipeline.

    Attribute and event order is significant: the tag mapper resolves repeated
    keys last-write-wins and the remote endpoint resolver breaks rank ties in
    favour of the earliest attribute.
    """

    trace_id: bytes
    span_id: bytes
    parent_span_id: bytes = INVALID_SPAN_ID
    name: str
    span_kind: SpanKind = SpanKind.UNSPECIFIED
    start_time: datetime
    end_time: datetime
    attributes: List[Attribute] = Field(default_factory=list)
    message_events: List[Event] = Field(default_factory=list)
    status_code: StatusCode = StatusCode.UNSET
    status_message: str = ""
    instrumentation_library: InstrumentationLibrary = Field(
        default_factory=InstrumentationLibrary
    )

    @field_validator("trace_id", mode="before")
    @classmethod
    def _trace_id_bytes(cls, v: Any) -> bytes:
        return _coerce_id(v, TRACE_ID_WIDTH)

    @field_validator("span_id", mode="before")
    @classmethod
    def _span_id_bytes(cls, v: Any) -> bytes:
        return _coerce_id(v, SPAN_ID_WIDTH)

    @field_validator("parent_span_id", mode="before")
    @classmethod
    def _parent_span_id_bytes(cls, v: Any) -> bytes:
        if v is None or v == "":
            return INVALID_SPAN_ID
        return _coerce_id(v, SPAN_ID_WIDTH)

    @classmethod
    def from_readable_span(cls, span: "ReadableSpan") -> "SpanRecord":
        """Build a record from an OpenTelemetry SDK `ReadableSpan`.

        The SDK stores ids as ints and times as epoch nanoseconds; both are
        converted here so the mapping layer only ever sees this model. An
        unfinished span (no end time) is treated as zero-length.
        """
        ctx = span.context
        parent = span.parent
        scope = span.instrumentation_scope
        start_ns = span.start_time or 0
        end_ns = span.end_time if span.end_time is not None else start_ns
        status = span.status
        return cls(
            trace_id=ctx.trace_id,
            span_id=ctx.span_id,
            parent_span_id=parent.span_id if parent is not None else INVALID_SPAN_ID,
            name=span.name,
            span_kind=SpanKind(span.kind.name),
            start_time=epoch_ns_to_dt(start_ns),
            end_time=epoch_ns_to_dt(end_ns),
            attributes=_attributes_from_mapping(span.attributes),
            message_events=[
                Event(
                    time=epoch_ns_to_dt(ev.timestamp),
                    name=ev.name,
                    attributes=_attributes_from_mapping(ev.attributes),
                )
                for ev in span.events
            ],
            status_code=StatusCode(status.status_code.name),
            status_message=status.description or "",
            instrumentation_library=InstrumentationLibrary(
                name=(scope.name or "") if scope is not None else "",
                version=(scope.version or "") if scope is not None else "",
            ),
        )


def _attributes_from_mapping(attrs: Any) -> List[Attribute]:
    # SDK attribute containers keep insertion order; values may be tuples.
    out: List[Attribute] = []
    for key, value in (attrs or {}).items():
        if isinstance(value, tuple):
            value = list(value)
        out.append(Attribute(key=key, value=value))
    return out


__all__ = [
    "Attribute",
    "AttributeValue",
    "Event",
    "INVALID_SPAN_ID",
    "InstrumentationLibrary",
    "SpanKind",
    "SpanRecord",
    "StatusCode",
]
