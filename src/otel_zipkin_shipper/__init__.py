"""Package initialization for otel-zipkin-shipper.

Converts finished OpenTelemetry span records into Zipkin v2 spans and ships
them to a Zipkin collector. The CLI is available as
`python -m otel_zipkin_shipper`.
"""

__all__ = []
