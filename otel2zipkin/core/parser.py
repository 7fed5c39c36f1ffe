"""
otel2zipkin.core.parser - OTLP/JSON trace parsing module.

This module reads OpenTelemetry traces exported as OTLP/JSON and turns every
span into a SpanRecord ready for transformation.

Classes:
    OTLPParser: Parser for OTLP/JSON export documents
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Tuple

from opentelemetry.trace import SpanKind, StatusCode

from otel2zipkin.core.attributes import AttributeValue, attribute_type
from otel2zipkin.core.model import EventRecord, SpanRecord, StatusRecord
from otel2zipkin.core.scope import (
    EMPTY_SCOPE,
    InstrumentationScope,
    LegacyInstrumentationScope,
    to_current,
)

logger = logging.getLogger(__name__)

# OTLP enumerations are offset from the API's SpanKind values
_OTLP_SPAN_KINDS: Dict[int, SpanKind] = {
    0: SpanKind.INTERNAL,
    1: SpanKind.INTERNAL,
    2: SpanKind.SERVER,
    3: SpanKind.CLIENT,
    4: SpanKind.PRODUCER,
    5: SpanKind.CONSUMER,
}

_OTLP_STATUS_CODES: Dict[int, StatusCode] = {
    0: StatusCode.UNSET,
    1: StatusCode.OK,
    2: StatusCode.ERROR,
}


class OTLPParser:
    """Parser for OpenTelemetry OTLP/JSON export documents.

    Both the current ``scopeSpans`` layout and the deprecated
    ``instrumentationLibrarySpans`` layout are understood.

    Example:
        >>> parser = OTLPParser()
        >>> records = parser.parse_json(json_string)
        >>> print(records[0].name)
    """

    def parse_json(self, json_str: str) -> List[SpanRecord]:
        """Parse span records from an OTLP/JSON string.

        Args:
            json_str: JSON string containing an OTLP trace export

        Returns:
            List of SpanRecord objects in document order

        Raises:
            json.JSONDecodeError: If JSON is invalid
            ValueError: If required fields are missing or malformed
        """
        data = json.loads(json_str)
        return self.parse_otlp(data)

    def parse_otlp(self, data: Dict[str, Any]) -> List[SpanRecord]:
        """Parse span records from a decoded OTLP/JSON document.

        Args:
            data: Dictionary with a top-level ``resourceSpans`` list

        Returns:
            List of SpanRecord objects in document order

        Raises:
            ValueError: If required fields are missing or malformed
        """
        if not isinstance(data, dict) or "resourceSpans" not in data:
            raise ValueError("Unsupported OTLP format: missing resourceSpans")

        records: List[SpanRecord] = []
        for resource_span in data["resourceSpans"]:
            resource = self._decode_attributes(
                resource_span.get("resource", {}).get("attributes", [])
            )
            for scope, raw_spans in self._extract_scope_spans(resource_span):
                for raw_span in raw_spans:
                    records.append(self._parse_single_span(raw_span, resource, scope))

        logger.debug("Parsed %d spans from OTLP document", len(records))
        return records

    def _extract_scope_spans(
        self, resource_span: Dict[str, Any]
    ) -> List[Tuple[InstrumentationScope, List[Dict[str, Any]]]]:
        """Pair each block of spans with the scope that produced it.

        Args:
            resource_span: One entry of ``resourceSpans``

        Returns:
            List of (scope, raw_spans) tuples
        """
        blocks: List[Tuple[InstrumentationScope, List[Dict[str, Any]]]] = []

        for scope_span in resource_span.get("scopeSpans", []):
            raw_scope = scope_span.get("scope")
            if raw_scope:
                scope = InstrumentationScope(
                    name=raw_scope.get("name", ""),
                    version=raw_scope.get("version") or None,
                    schema_url=scope_span.get("schemaUrl") or None,
                )
            else:
                scope = EMPTY_SCOPE
            blocks.append((scope, scope_span.get("spans", [])))

        # Exports from older SDKs
        for library_span in resource_span.get("instrumentationLibrarySpans", []):
            raw_library = library_span.get("instrumentationLibrary") or {}
            legacy = LegacyInstrumentationScope(
                name=raw_library.get("name", ""),
                version=raw_library.get("version") or None,
                schema_url=library_span.get("schemaUrl") or None,
            )
            blocks.append((to_current(legacy), library_span.get("spans", [])))

        return blocks

    def _parse_single_span(
        self,
        raw_span: Dict[str, Any],
        resource: Dict[str, AttributeValue],
        scope: InstrumentationScope,
    ) -> SpanRecord:
        """Parse a single OTLP span dictionary into a SpanRecord.

        Args:
            raw_span: Dictionary containing span data
            resource: Decoded attributes of the enclosing resource
            scope: Scope of the enclosing scope-spans block

        Returns:
            SpanRecord object
        """
        trace_id = raw_span.get("traceId")
        span_id = raw_span.get("spanId")
        if not trace_id or not span_id:
            raise ValueError("Span is missing traceId or spanId")

        # Treat empty string as no parent
        parent_span_id = raw_span.get("parentSpanId") or None

        attributes = self._decode_attributes(raw_span.get("attributes", []))
        events = tuple(self._parse_event(raw) for raw in raw_span.get("events", []))

        return SpanRecord(
            trace_id=trace_id.lower(),
            span_id=span_id.lower(),
            parent_span_id=parent_span_id.lower() if parent_span_id else None,
            name=raw_span.get("name", ""),
            kind=self._parse_kind(raw_span.get("kind")),
            start_time_unix_nano=self._to_int(raw_span.get("startTimeUnixNano", 0)),
            end_time_unix_nano=self._to_int(raw_span.get("endTimeUnixNano", 0)),
            attributes=attributes,
            total_attribute_count=len(attributes)
            + self._to_int(raw_span.get("droppedAttributesCount", 0)),
            events=events,
            total_recorded_events=len(events)
            + self._to_int(raw_span.get("droppedEventsCount", 0)),
            status=self._parse_status(raw_span.get("status") or {}),
            resource=resource,
            instrumentation_scope=scope,
        )

    def _parse_event(self, raw_event: Dict[str, Any]) -> EventRecord:
        return EventRecord(
            name=raw_event.get("name", ""),
            timestamp_unix_nano=self._to_int(raw_event.get("timeUnixNano", 0)),
            attributes=self._decode_attributes(raw_event.get("attributes", [])),
        )

    def _parse_kind(self, raw_kind: Any) -> SpanKind:
        """Parse an OTLP span kind given as an integer or an enum name.

        Args:
            raw_kind: e.g. ``2`` or ``"SPAN_KIND_SERVER"``; None for unspecified

        Returns:
            Matching SpanKind, INTERNAL when unspecified
        """
        if raw_kind is None:
            return SpanKind.INTERNAL
        if isinstance(raw_kind, str):
            name = raw_kind.upper()
            if name.startswith("SPAN_KIND_"):
                name = name[len("SPAN_KIND_"):]
            if name == "UNSPECIFIED":
                return SpanKind.INTERNAL
            try:
                return SpanKind[name]
            except KeyError:
                raise ValueError(f"Unknown span kind: {raw_kind}") from None
        if isinstance(raw_kind, int) and raw_kind in _OTLP_SPAN_KINDS:
            return _OTLP_SPAN_KINDS[raw_kind]
        raise ValueError(f"Unknown span kind: {raw_kind}")

    def _parse_status(self, raw_status: Dict[str, Any]) -> StatusRecord:
        """Parse an OTLP status object.

        Args:
            raw_status: Dictionary with optional ``code`` and ``message``

        Returns:
            StatusRecord, UNSET with empty description when absent
        """
        raw_code = raw_status.get("code", 0)
        if isinstance(raw_code, str):
            name = raw_code.upper()
            if name.startswith("STATUS_CODE_"):
                name = name[len("STATUS_CODE_"):]
            try:
                code = StatusCode[name]
            except KeyError:
                raise ValueError(f"Unknown status code: {raw_code}") from None
        elif isinstance(raw_code, int) and raw_code in _OTLP_STATUS_CODES:
            code = _OTLP_STATUS_CODES[raw_code]
        else:
            raise ValueError(f"Unknown status code: {raw_code}")

        return StatusRecord(code=code, description=raw_status.get("message") or "")

    def _decode_attributes(
        self, raw_attributes: List[Dict[str, Any]]
    ) -> Dict[str, AttributeValue]:
        """Decode an OTLP key/value list into an ordered attribute mapping.

        Args:
            raw_attributes: List of ``{"key": ..., "value": AnyValue}`` entries

        Returns:
            Dictionary of attribute key to typed value
        """
        attributes: Dict[str, AttributeValue] = {}
        for attr in raw_attributes:
            key = attr.get("key")
            if not key:
                raise ValueError("Attribute is missing its key")
            attributes[key] = self._decode_any_value(attr.get("value", {}))
        return attributes

    def _decode_any_value(self, value: Dict[str, Any]) -> AttributeValue:
        """Decode an OTLP AnyValue into a typed attribute value.

        Args:
            value: AnyValue dictionary

        Returns:
            str, bool, int, float or a homogeneous tuple of one of those

        Raises:
            ValueError: For unsupported value kinds or mixed arrays
        """
        if "stringValue" in value:
            return str(value["stringValue"])
        if "boolValue" in value:
            return bool(value["boolValue"])
        if "intValue" in value:
            return self._to_int(value["intValue"])
        if "doubleValue" in value:
            return float(value["doubleValue"])
        if "arrayValue" in value:
            elements = tuple(
                self._decode_any_value(element)
                for element in (value["arrayValue"] or {}).get("values", [])
            )
            try:
                attribute_type(elements)
            except TypeError as e:
                raise ValueError(f"Invalid array attribute: {e}") from e
            return elements
        raise ValueError(f"Unsupported attribute value: {sorted(value)}")

    def _to_int(self, raw: Any) -> int:
        """Convert OTLP 64-bit integers, which JSON encodes as strings."""
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid integer value: {raw!r}") from None
