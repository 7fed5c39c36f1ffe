"""
otel2zipkin.core.model - Input and output records of the span transformer.

This module provides the immutable value objects on both sides of the
transformation: the OpenTelemetry-side span record it reads and the
Zipkin v2 span it produces.

Classes:
    EventRecord: A timed event recorded on a span
    StatusRecord: Status code and description of a span
    SpanRecord: A finished OpenTelemetry span
    ZipkinKind: Zipkin v2 span kinds
    Endpoint: Zipkin service/host endpoint
    ZipkinSpan: A span in the Zipkin v2 model
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from opentelemetry.trace import SpanKind, StatusCode

from otel2zipkin.core.attributes import Attributes
from otel2zipkin.core.scope import EMPTY_SCOPE, InstrumentationScope


@dataclass(frozen=True)
class EventRecord:
    """A timed annotation recorded on a span.

    Attributes:
        name: Event name
        timestamp_unix_nano: When the event happened, nanoseconds since epoch
        attributes: Typed attributes of the event
    """
    name: str
    timestamp_unix_nano: int
    attributes: Attributes = field(default_factory=dict)


@dataclass(frozen=True)
class StatusRecord:
    """Status of a finished span.

    Attributes:
        code: UNSET, OK or ERROR
        description: Human-readable description, empty when none was given
    """
    code: StatusCode = StatusCode.UNSET
    description: str = ""


@dataclass(frozen=True)
class SpanRecord:
    """A finished OpenTelemetry span, as handed over by the tracing SDK.

    Attributes:
        trace_id: 32 character lowercase hex trace identifier
        span_id: 16 character lowercase hex span identifier
        parent_span_id: Hex identifier of the parent span, None for roots
        name: Span name
        kind: OpenTelemetry span kind
        start_time_unix_nano: Span start, nanoseconds since epoch
        end_time_unix_nano: Span end, nanoseconds since epoch
        attributes: Span attributes remaining after any limit was applied
        total_attribute_count: Number of attributes set before truncation
        events: Events remaining after any limit was applied
        total_recorded_events: Number of events recorded before truncation
        status: Span status
        resource: Attributes of the resource that produced the span
        instrumentation_scope: Scope that produced the span
    """
    trace_id: str
    span_id: str
    name: str
    start_time_unix_nano: int
    end_time_unix_nano: int
    parent_span_id: Optional[str] = None
    kind: SpanKind = SpanKind.INTERNAL
    attributes: Attributes = field(default_factory=dict)
    total_attribute_count: Optional[int] = None
    events: Tuple[EventRecord, ...] = ()
    total_recorded_events: Optional[int] = None
    status: StatusRecord = field(default_factory=StatusRecord)
    resource: Attributes = field(default_factory=dict)
    instrumentation_scope: InstrumentationScope = EMPTY_SCOPE

    def __post_init__(self) -> None:
        """Fill in default totals and validate span data after initialization."""
        # frozen dataclass: defaults are derived through object.__setattr__
        if self.total_attribute_count is None:
            object.__setattr__(self, "total_attribute_count", len(self.attributes))
        if self.total_recorded_events is None:
            object.__setattr__(self, "total_recorded_events", len(self.events))
        object.__setattr__(self, "events", tuple(self.events))

        if not self.span_id:
            raise ValueError("span_id cannot be empty")
        if not self.trace_id:
            raise ValueError("trace_id cannot be empty")
        if self.end_time_unix_nano < self.start_time_unix_nano:
            raise ValueError("end_time_unix_nano cannot precede start_time_unix_nano")
        if self.total_attribute_count < len(self.attributes):
            raise ValueError("total_attribute_count cannot be less than the attributes present")
        if self.total_recorded_events < len(self.events):
            raise ValueError("total_recorded_events cannot be less than the events present")

    @property
    def dropped_attributes_count(self) -> int:
        """Number of attributes elided by the span's attribute limit."""
        return self.total_attribute_count - len(self.attributes)

    @property
    def dropped_events_count(self) -> int:
        """Number of events elided by the span's event limit."""
        return self.total_recorded_events - len(self.events)


class ZipkinKind(Enum):
    """Span kinds of the Zipkin v2 model."""

    CLIENT = "CLIENT"
    SERVER = "SERVER"
    PRODUCER = "PRODUCER"
    CONSUMER = "CONSUMER"


@dataclass(frozen=True)
class Endpoint:
    """Service and host that recorded a span.

    Attributes:
        service_name: Logical service name
        ip: Textual IPv4 or IPv6 address, None when unknown
    """
    service_name: str
    ip: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Zipkin v2 JSON endpoint shape."""
        result: Dict[str, Any] = {"serviceName": self.service_name}
        if self.ip:
            address = ipaddress.ip_address(self.ip)
            key = "ipv4" if address.version == 4 else "ipv6"
            result[key] = str(address)
        return result


@dataclass(frozen=True)
class ZipkinSpan:
    """A span in the Zipkin v2 model.

    Attributes:
        trace_id: Hex trace identifier
        id: Hex span identifier
        parent_id: Hex parent span identifier, None for roots
        name: Span name
        kind: Zipkin kind, None when the span has no Zipkin equivalent
        timestamp: Span start, microseconds since epoch
        duration: Span duration in microseconds
        local_endpoint: Endpoint that recorded the span
        tags: Flat string annotations
        debug: Debug flag, unused
        shared: Shared flag, unused
    """
    trace_id: str
    id: str
    name: str
    timestamp: int
    duration: int
    local_endpoint: Endpoint
    parent_id: Optional[str] = None
    kind: Optional[ZipkinKind] = None
    tags: Mapping[str, str] = field(default_factory=dict)
    debug: Optional[bool] = None
    shared: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Zipkin v2 JSON object shape.

        Absent optional fields are omitted rather than emitted as null.

        Returns:
            Dictionary ready for JSON encoding
        """
        result: Dict[str, Any] = {"traceId": self.trace_id}
        if self.parent_id:
            result["parentId"] = self.parent_id
        result["id"] = self.id
        if self.kind is not None:
            result["kind"] = self.kind.value
        result["name"] = self.name
        result["timestamp"] = self.timestamp
        result["duration"] = self.duration
        result["localEndpoint"] = self.local_endpoint.to_dict()
        if self.tags:
            result["tags"] = dict(self.tags)
        if self.debug is not None:
            result["debug"] = self.debug
        if self.shared is not None:
            result["shared"] = self.shared
        return result
