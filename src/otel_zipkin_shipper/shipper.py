"""Shipper: encodes Zipkin span models as v2 JSON and posts them to a collector.

This module is the transport side of the package. It takes the
ZipkinSpanModel objects produced by the otel_zipkin_shipper.mapper module,
encodes them in the Zipkin v2 JSON format and sends them to the configured
collector endpoint.

Key responsibilities include:
- Encoding ids as lowercase hex, times as epoch microseconds and omitting
  empty members the way Zipkin collectors expect.
- Posting batches over HTTP with retry and exponential backoff for transient
  failures (connection errors, 5xx responses).
- Chunking large batches and handling dry-run mode.
- Exposing a `ZipkinSpanExporter` that plugs into the OpenTelemetry SDK span
  processors.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Settings, get_settings
from .mapper import to_zipkin_span_model
from .mapping.time_utils import dt_to_epoch_us, duration_to_us
from .models.otel import SpanRecord
from .models.zipkin import Endpoint, ZipkinKind, ZipkinSpanModel

logger = logging.getLogger(__name__)
__all__ = [
    "ZipkinExportError",
    "ZipkinSpanExporter",
    "encode_batch",
    "post_spans",
    "ship_spans",
    "span_to_json",
]

_RETRY_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=8)


class ZipkinExportError(RuntimeError):
    """Raised when a batch could not be delivered to the collector."""


class _RetryableStatusError(Exception):
    def __init__(self, response: httpx.Response):
        super().__init__(f"collector returned status={response.status_code}")
        self.response = response


def _endpoint_to_json(endpoint: Optional[Endpoint]) -> Optional[Dict[str, Any]]:
    if endpoint is None or endpoint.is_empty():
        return None
    out: Dict[str, Any] = {}
    if endpoint.service_name:
        out["serviceName"] = endpoint.service_name.lower()
    if endpoint.ipv4 is not None:
        out["ipv4"] = str(endpoint.ipv4)
    if endpoint.ipv6 is not None:
        out["ipv6"] = str(endpoint.ipv6)
    if endpoint.port:
        out["port"] = endpoint.port
    return out


def span_to_json(span: ZipkinSpanModel) -> Dict[str, Any]:
    """Return the Zipkin v2 JSON object for a span.

    Absent members are omitted rather than serialized as null or empty.
    """
    ctx = span.span_context
    out: Dict[str, Any] = {
        "traceId": str(ctx.trace_id),
        "id": f"{ctx.id:016x}",
    }
    if ctx.parent_id is not None:
        out["parentId"] = f"{ctx.parent_id:016x}"
    if ctx.debug:
        out["debug"] = True
    out["name"] = span.name
    if span.kind != ZipkinKind.UNDETERMINED:
        out["kind"] = span.kind.value
    timestamp_us = dt_to_epoch_us(span.timestamp)
    if timestamp_us > 0:
        out["timestamp"] = timestamp_us
    duration_us = duration_to_us(span.duration)
    if duration_us > 0:
        out["duration"] = duration_us
    if span.shared:
        out["shared"] = True
    local = _endpoint_to_json(span.local_endpoint)
    if local is not None:
        out["localEndpoint"] = local
    remote = _endpoint_to_json(span.remote_endpoint)
    if remote is not None:
        out["remoteEndpoint"] = remote
    if span.annotations is not None:
        out["annotations"] = [
            {"timestamp": dt_to_epoch_us(a.timestamp), "value": a.value}
            for a in span.annotations
        ]
    if span.tags is not None:
        out["tags"] = dict(span.tags)
    return out


def encode_batch(spans: Sequence[ZipkinSpanModel]) -> bytes:
    return json.dumps(
        [span_to_json(s) for s in spans], separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def _post_once(
    client: httpx.Client, endpoint: str, body: bytes, headers: Dict[str, str]
) -> None:
    resp = client.post(endpoint, content=body, headers=headers)
    if resp.status_code >= 500:
        raise _RetryableStatusError(resp)
    if resp.status_code >= 400:
        raise ZipkinExportError(
            f"collector rejected spans status={resp.status_code} body={resp.text[:500]}"
        )


def post_spans(
    spans: Sequence[ZipkinSpanModel],
    settings: Settings,
    *,
    endpoint: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> None:
    """POST one batch of spans to the collector.

    Connection errors and 5xx responses are retried with exponential backoff
    up to `EXPORT_MAX_ATTEMPTS` attempts. 4xx responses fail immediately.

    Args:
        spans: Converted spans to send in a single request.
        settings: Application settings (endpoint, timeout, headers, attempts).
        endpoint: Optional override of the configured collector URL.
        client: Optional HTTP client to reuse; a short-lived one is created
            otherwise.

    Raises:
        ZipkinExportError: The batch could not be delivered.
    """
    url = endpoint or settings.OTEL_EXPORTER_ZIPKIN_ENDPOINT
    body = encode_batch(spans)
    headers = {"Content-Type": "application/json", **settings.ZIPKIN_HEADERS}
    owns_client = client is None
    http = client or httpx.Client(timeout=settings.OTEL_EXPORTER_ZIPKIN_TIMEOUT)
    retrying = Retrying(
        reraise=True,
        stop=stop_after_attempt(settings.EXPORT_MAX_ATTEMPTS),
        wait=_RETRY_WAIT,
        retry=retry_if_exception_type((httpx.TransportError, _RetryableStatusError)),
    )
    try:
        for attempt in retrying:
            with attempt:
                _post_once(http, url, body, headers)
    except _RetryableStatusError as e:
        raise ZipkinExportError(
            f"collector unavailable status={e.response.status_code} "
            f"body={e.response.text[:500]}"
        ) from e
    except httpx.HTTPError as e:
        raise ZipkinExportError(f"span export request failed: {e}") from e
    finally:
        if owns_client:
            http.close()
    logger.debug("Posted %d span(s) to %s", len(spans), url)


def ship_spans(
    spans: Sequence[ZipkinSpanModel],
    settings: Settings,
    dry_run: bool = True,
    *,
    endpoint: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> int:
    """Send spans in chunks of `EXPORT_BATCH_SIZE`.

    Returns:
        Number of spans delivered (0 in dry-run mode).
    """
    if dry_run:
        logger.info("Dry-run export: spans=%d", len(spans))
        return 0
    size = settings.EXPORT_BATCH_SIZE
    chunks: List[Sequence[ZipkinSpanModel]] = [
        spans[i : i + size] for i in range(0, len(spans), size)
    ]
    sent = 0
    for chunk in chunks:
        post_spans(chunk, settings, endpoint=endpoint, client=client)
        sent += len(chunk)
    logger.info("Exported %d span(s) in %d request(s)", sent, len(chunks))
    return sent


class ZipkinSpanExporter(SpanExporter):
    """OpenTelemetry SDK span exporter sending spans to a Zipkin collector.

    Use with a `BatchSpanProcessor`; every `export` call converts the batch
    and posts it in one request. A span that cannot be adapted is logged and
    left out; the rest of the batch is still sent and the call reports
    FAILURE.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        service_name: Optional[str] = None,
        endpoint: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._settings = settings or get_settings()
        self._service_name = service_name or self._settings.OTEL_SERVICE_NAME
        self._endpoint = endpoint or self._settings.OTEL_EXPORTER_ZIPKIN_ENDPOINT
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._settings.OTEL_EXPORTER_ZIPKIN_TIMEOUT
        )
        self._shutdown = False

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._shutdown:
            logger.warning("Exporter already shut down; dropping %d span(s)", len(spans))
            return SpanExportResult.FAILURE
        if not spans:
            return SpanExportResult.SUCCESS
        models = self._convert(spans)
        dropped = len(spans) - len(models)
        if models:
            try:
                post_spans(models, self._settings, endpoint=self._endpoint, client=self._client)
            except ZipkinExportError as e:
                logger.warning(
                    "Failed to export %d span(s) to %s: %s", len(models), self._endpoint, e
                )
                return SpanExportResult.FAILURE
        return SpanExportResult.FAILURE if dropped else SpanExportResult.SUCCESS

    def _convert(self, spans: Sequence[ReadableSpan]) -> List[ZipkinSpanModel]:
        """Convert spans one by one, dropping (and logging) any that fail to adapt."""
        models: List[ZipkinSpanModel] = []
        for span in spans:
            try:
                record = SpanRecord.from_readable_span(span)
            except ValueError as e:
                # pydantic ValidationError is a ValueError
                logger.warning("Dropping span %r that could not be converted: %s", span.name, e)
                continue
            models.append(to_zipkin_span_model(record, self._service_name))
        return models

    def shutdown(self) -> None:
        if self._shutdown:
            return
        self._shutdown = True
        if self._owns_client:
            self._client.close()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        # nothing is buffered between export calls
        return True
