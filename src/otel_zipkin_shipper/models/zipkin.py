"""Pydantic models for the Zipkin v2 span representation.

These models define the logical structure of a Zipkin span before it is
encoded to JSON by the `shipper`. They are the target data structure for the
`mapper` module.

Optional members (`parent_id`, `remote_endpoint`, `annotations`, `tags`) use
`None` for "absent" so that omission on the wire can be told apart from an
empty value.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ZipkinKind(str, Enum):
    """Zipkin span kinds. UNDETERMINED is omitted on the wire."""

    UNDETERMINED = ""
    CLIENT = "CLIENT"
    SERVER = "SERVER"
    PRODUCER = "PRODUCER"
    CONSUMER = "CONSUMER"


class TraceID(BaseModel):
    """128-bit trace id split into two unsigned 64-bit halves."""

    model_config = ConfigDict(frozen=True)

    high: int = 0
    low: int

    def __str__(self) -> str:
        if self.high == 0:
            return f"{self.low:016x}"
        return f"{self.high:016x}{self.low:016x}"


class SpanContext(BaseModel):
    trace_id: TraceID
    id: int
    parent_id: Optional[int] = None
    debug: bool = False
    sampled: Optional[bool] = None


class Endpoint(BaseModel):
    service_name: str = ""
    ipv4: Optional[IPv4Address] = None
    ipv6: Optional[IPv6Address] = None
    port: int = 0

    def is_empty(self) -> bool:
        return not (self.service_name or self.ipv4 or self.ipv6 or self.port)


class Annotation(BaseModel):
    timestamp: datetime
    value: str


class ZipkinSpanModel(BaseModel):
    """Represents a single Zipkin span.

    `local_endpoint` always carries the configured service name. The remote
    endpoint is only ever populated for producer and consumer spans.
    """

    span_context: SpanContext
    name: str
    kind: ZipkinKind = ZipkinKind.UNDETERMINED
    timestamp: datetime
    duration: timedelta
    shared: bool = False
    local_endpoint: Endpoint
    remote_endpoint: Optional[Endpoint] = None
    annotations: Optional[List[Annotation]] = None
    tags: Optional[Dict[str, str]] = None


__all__ = [
    "Annotation",
    "Endpoint",
    "SpanContext",
    "TraceID",
    "ZipkinKind",
    "ZipkinSpanModel",
]
