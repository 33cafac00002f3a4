"""Main CLI entry point for the otel-zipkin-shipper.

This module provides a command-line interface using Typer for converting span
record files offline and shipping them to a Zipkin collector:
1.  Loading configuration (`.env` + environment).
2.  Reading and validating a JSON array of span records.
3.  Mapping the records to Zipkin spans (otel_zipkin_shipper.mapper).
4.  Writing the Zipkin v2 JSON (`convert`) or posting it (`ship`).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from pydantic import TypeAdapter, ValidationError

from .config import get_settings
from .mapper import to_zipkin_span_models
from .models.otel import SpanRecord
from .models.zipkin import ZipkinSpanModel
from .shipper import ZipkinExportError, encode_batch, ship_spans

# Load .env file if present (before any config access)
_env_file = find_dotenv(usecwd=True)
if _env_file:
    load_dotenv(_env_file)

app = typer.Typer(help="OpenTelemetry span records to Zipkin converter and shipper CLI")
logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(List[SpanRecord])


def _load_records(path: Path) -> List[SpanRecord]:
    """Read and validate a JSON array of span records, exiting with code 1 on failure."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1) from e
    try:
        return _RECORDS.validate_json(raw)
    except ValidationError as e:
        typer.echo(f"Invalid span records in {path}: {e.error_count()} error(s)", err=True)
        logger.debug("Validation errors: %s", e)
        raise typer.Exit(code=1) from e


def _convert(path: Path, service_name: Optional[str]) -> List[ZipkinSpanModel]:
    settings = get_settings()
    records = _load_records(path)
    effective_service = service_name or settings.OTEL_SERVICE_NAME
    spans = to_zipkin_span_models(records, effective_service)
    logger.debug("Converted %d span record(s) for service %s", len(spans), effective_service)
    return spans


@app.callback()
def main() -> None:
    """otel-zipkin-shipper CLI.

    Use a subcommand like 'convert' or 'ship'.
    """
    logging.basicConfig(level=get_settings().LOG_LEVEL)


@app.command(help="Convert a span record file to Zipkin v2 JSON.")
def convert(
    input_path: Path = typer.Argument(..., help="JSON file holding an array of span records"),
    service_name: Optional[str] = typer.Option(
        None, help="Local endpoint service name (defaults to OTEL_SERVICE_NAME)"
    ),
    output: Optional[Path] = typer.Option(
        None, help="Write the Zipkin JSON here instead of stdout"
    ),
) -> None:
    spans = _convert(input_path, service_name)
    payload = encode_batch(spans).decode("utf-8")
    if output is None:
        typer.echo(payload)
    else:
        output.write_text(payload, encoding="utf-8")
        typer.echo(f"Wrote {len(spans)} span(s) to {output}", err=True)


@app.command(help="Convert a span record file and post it to the Zipkin collector.")
def ship(
    input_path: Path = typer.Argument(..., help="JSON file holding an array of span records"),
    service_name: Optional[str] = typer.Option(
        None, help="Local endpoint service name (defaults to OTEL_SERVICE_NAME)"
    ),
    endpoint: Optional[str] = typer.Option(
        None, help="Collector URL (defaults to OTEL_EXPORTER_ZIPKIN_ENDPOINT)"
    ),
    dry_run: Optional[bool] = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        help="If true, do not send spans (mapping only). If not specified, uses DRY_RUN from config/env.",
    ),
) -> None:
    """Convert and export span records.

    When neither --dry-run nor --no-dry-run is given the DRY_RUN setting
    decides, so a `.env` file can keep the safe default.
    """
    settings = get_settings()
    effective_dry_run = settings.DRY_RUN if dry_run is None else dry_run

    spans = _convert(input_path, service_name)
    try:
        sent = ship_spans(spans, settings, dry_run=effective_dry_run, endpoint=endpoint)
    except ZipkinExportError as e:
        typer.echo(f"Export failed: {e}", err=True)
        raise typer.Exit(code=2) from e
    typer.echo(f"Processed {len(spans)} span(s). sent={sent} dry_run={effective_dry_run}")


if __name__ == "__main__":  # pragma: no cover
    app()
