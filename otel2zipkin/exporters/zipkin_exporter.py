"""
ZipkinRecordExporter - OpenTelemetry SpanExporter that produces Zipkin v2 spans.

This exporter converts every finished span handed over by the OpenTelemetry
SDK into a ZipkinSpan. Delivery is left to the caller: converted spans are
passed to a callback and can be echoed to the console as Zipkin v2 JSON.
Nothing is sent over the network.

Example:
    >>> from opentelemetry import trace
    >>> from opentelemetry.sdk.trace import TracerProvider
    >>> from opentelemetry.sdk.trace.export import BatchSpanProcessor
    >>> from otel2zipkin.exporters import ZipkinRecordExporter
    >>>
    >>> exporter = ZipkinRecordExporter(
    ...     on_span_converted=lambda zipkin_span: queue.put(zipkin_span.to_dict()),
    ...     console_output=False,
    ... )
    >>> provider = TracerProvider()
    >>> provider.add_span_processor(BatchSpanProcessor(exporter))
    >>> trace.set_tracer_provider(provider)
"""

from __future__ import annotations

import json
import logging
from typing import Callable, List, Optional, Sequence

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from opentelemetry.trace import StatusCode, format_span_id, format_trace_id

from otel2zipkin.core.model import EventRecord, SpanRecord, StatusRecord, ZipkinSpan
from otel2zipkin.core.scope import EMPTY_SCOPE, InstrumentationScope
from otel2zipkin.core.transformer import IpAddressSupplier, ZipkinSpanTransformer
from otel2zipkin.utils.net import LocalIpAddressSupplier

logger = logging.getLogger(__name__)


def span_record_from_readable(span: ReadableSpan) -> SpanRecord:
    """Convert a finished SDK span into a SpanRecord.

    Attribute and event totals are rebuilt from what the span still holds
    plus the SDK's dropped counters. A span that has not ended is treated as
    zero-length. An empty scope version or schema URL is treated as absent,
    the same as in OTLP/JSON input.

    Args:
        span: The OpenTelemetry ReadableSpan to convert.

    Returns:
        SpanRecord carrying the same data.
    """
    context = span.context
    parent_span_id = format_span_id(span.parent.span_id) if span.parent else None

    attributes = dict(span.attributes or {})
    events = tuple(
        EventRecord(
            name=event.name,
            timestamp_unix_nano=event.timestamp,
            attributes=dict(event.attributes or {}),
        )
        for event in span.events
    )

    status = StatusRecord()
    if span.status is not None:
        status = StatusRecord(
            code=span.status.status_code or StatusCode.UNSET,
            description=span.status.description or "",
        )

    scope = EMPTY_SCOPE
    if span.instrumentation_scope is not None:
        scope = InstrumentationScope(
            name=span.instrumentation_scope.name or "",
            version=span.instrumentation_scope.version or None,
            schema_url=span.instrumentation_scope.schema_url or None,
        )

    resource = {}
    if span.resource is not None and span.resource.attributes:
        resource = dict(span.resource.attributes)

    start_time = span.start_time or 0
    end_time = span.end_time if span.end_time is not None else start_time

    return SpanRecord(
        trace_id=format_trace_id(context.trace_id),
        span_id=format_span_id(context.span_id),
        parent_span_id=parent_span_id,
        name=span.name,
        kind=span.kind,
        start_time_unix_nano=start_time,
        end_time_unix_nano=end_time,
        attributes=attributes,
        total_attribute_count=len(attributes) + span.dropped_attributes,
        events=events,
        total_recorded_events=len(events) + span.dropped_events,
        status=status,
        resource=resource,
        instrumentation_scope=scope,
    )


class ZipkinRecordExporter(SpanExporter):
    """OpenTelemetry SpanExporter that converts spans into Zipkin v2 spans.

    Attributes:
        console_output: Whether to print each converted batch as JSON
        indent: JSON indentation used for console output (None for compact)
        on_span_converted: Optional callback receiving each ZipkinSpan

    Example:
        >>> converted = []
        >>> exporter = ZipkinRecordExporter(
        ...     local_ip_supplier=lambda: "10.1.2.3",
        ...     on_span_converted=converted.append,
        ...     console_output=False,
        ... )
    """

    def __init__(
        self,
        local_ip_supplier: Optional[IpAddressSupplier] = None,
        console_output: bool = True,
        on_span_converted: Optional[Callable[[ZipkinSpan], None]] = None,
        indent: Optional[int] = None,
    ) -> None:
        """Initialize the ZipkinRecordExporter.

        Args:
            local_ip_supplier: Supplier of the local endpoint address.
                Defaults to LocalIpAddressSupplier.
            console_output: Whether to print converted batches to stdout.
            on_span_converted: Optional callback(zipkin_span) for every span.
            indent: JSON indentation for console output.
        """
        if local_ip_supplier is None:
            local_ip_supplier = LocalIpAddressSupplier()

        self.console_output = console_output
        self.on_span_converted = on_span_converted
        self.indent = indent

        self._transformer = ZipkinSpanTransformer(local_ip_supplier)
        self._shutdown = False

        logger.info(
            "ZipkinRecordExporter initialized: console_output=%s, callback=%s",
            self.console_output,
            self.on_span_converted is not None,
        )

    @property
    def transformer(self) -> ZipkinSpanTransformer:
        return self._transformer

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Export a batch of spans.

        This method is called automatically by the OpenTelemetry SDK when spans
        are ready to be exported. The whole batch is converted before anything
        is delivered, so a span that cannot be converted fails the batch.

        Args:
            spans: Sequence of completed spans to export.

        Returns:
            SpanExportResult.SUCCESS when every span was converted,
            SpanExportResult.FAILURE otherwise.
        """
        if self._shutdown:
            logger.warning("Exporter already shut down, ignoring batch of %d spans", len(spans))
            return SpanExportResult.FAILURE

        if not spans:
            return SpanExportResult.SUCCESS

        logger.debug("Exporting %d spans", len(spans))

        try:
            zipkin_spans = [
                self._transformer.transform(span_record_from_readable(span))
                for span in spans
            ]
            payload = self._render(zipkin_spans) if self.console_output else None
        except (TypeError, ValueError) as e:
            logger.error(
                "Failed to convert batch of %d spans: %s",
                len(spans),
                str(e),
                exc_info=True,
            )
            return SpanExportResult.FAILURE

        self._output_spans(zipkin_spans, payload)
        return SpanExportResult.SUCCESS

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Nothing is buffered, so flushing always succeeds."""
        return True

    def shutdown(self) -> None:
        """Shutdown the exporter. Later batches are rejected."""
        self._shutdown = True
        logger.info("ZipkinRecordExporter shutdown complete")

    def _render(self, zipkin_spans: List[ZipkinSpan]) -> str:
        return json.dumps([span.to_dict() for span in zipkin_spans], indent=self.indent)

    def _output_spans(
        self, zipkin_spans: List[ZipkinSpan], payload: Optional[str]
    ) -> None:
        """Deliver converted spans to the console and the callback.

        Args:
            zipkin_spans: Converted spans of one batch.
            payload: Rendered JSON for console output, None when disabled.
        """
        if payload is not None:
            print(payload)

        if self.on_span_converted:
            for zipkin_span in zipkin_spans:
                try:
                    self.on_span_converted(zipkin_span)
                except Exception as e:
                    logger.error("Callback failed for span %s: %s", zipkin_span.id, str(e))
