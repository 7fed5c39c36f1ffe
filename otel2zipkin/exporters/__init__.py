"""
otel2zipkin.exporters - OpenTelemetry SpanExporter implementations.

This subpackage provides a SpanExporter that converts finished OpenTelemetry
spans into Zipkin v2 spans.

Example:
    >>> from opentelemetry import trace
    >>> from opentelemetry.sdk.trace import TracerProvider
    >>> from opentelemetry.sdk.trace.export import BatchSpanProcessor
    >>> from otel2zipkin.exporters import ZipkinRecordExporter
    >>>
    >>> exporter = ZipkinRecordExporter(on_span_converted=handle_span)
    >>> provider = TracerProvider()
    >>> provider.add_span_processor(BatchSpanProcessor(exporter))
    >>> trace.set_tracer_provider(provider)
"""

from otel2zipkin.exporters.zipkin_exporter import (
    ZipkinRecordExporter,
    span_record_from_readable,
)

__all__ = ["ZipkinRecordExporter", "span_record_from_readable"]
