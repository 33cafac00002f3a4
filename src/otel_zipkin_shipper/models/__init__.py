"""Input (OpenTelemetry span record) and output (Zipkin span) data models."""
