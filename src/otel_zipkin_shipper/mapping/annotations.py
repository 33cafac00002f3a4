"""Span event to Zipkin annotation conversion.

Each event becomes one annotation carrying the event timestamp. The value is
the event name, or ``"<name>: <json>"`` when the event has attributes, where
``<json>`` is the flat JSON object built by `values.attributes_to_json`.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from ..models.otel import Event
from ..models.zipkin import Annotation
from .values import attributes_to_json

__all__ = ["to_zipkin_annotations"]


def _annotation_value(event: Event) -> str:
    if not event.attributes:
        return event.name
    encoded = attributes_to_json(event.attributes)
    if not encoded:
        # encoding failed; keep the bare name rather than a dangling suffix
        return event.name
    return f"{event.name}: {encoded}"


def to_zipkin_annotations(events: Sequence[Event]) -> Optional[List[Annotation]]:
    """Convert events in order; an empty sequence yields None."""
    if not events:
        return None
    return [Annotation(timestamp=ev.time, value=_annotation_value(ev)) for ev in events]
