"""
otel2zipkin.core.transformer - OpenTelemetry span to Zipkin span transformation.

Example:
    >>> transformer = ZipkinSpanTransformer(lambda: "10.0.0.7")
    >>> zipkin_span = transformer.transform(span_record)
    >>> zipkin_span.local_endpoint.service_name
    'checkout'
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Callable, Dict, Optional

from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.trace import SpanKind

from otel2zipkin.core.attributes import Attributes, stringify_attribute
from otel2zipkin.core.model import Endpoint, SpanRecord, ZipkinKind, ZipkinSpan
from otel2zipkin.core.tags import (
    apply_drop_count_tags,
    apply_scope_tags,
    apply_status_tags,
)
from otel2zipkin.core.timing import compute_timing

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "unknown_service"

IpAddressSupplier = Callable[[], Optional[str]]

_KIND_MAP: Dict[SpanKind, Optional[ZipkinKind]] = {
    SpanKind.INTERNAL: None,
    SpanKind.SERVER: ZipkinKind.SERVER,
    SpanKind.CLIENT: ZipkinKind.CLIENT,
    SpanKind.PRODUCER: ZipkinKind.PRODUCER,
    SpanKind.CONSUMER: ZipkinKind.CONSUMER,
}


def map_span_kind(kind: SpanKind) -> Optional[ZipkinKind]:
    """Map an OpenTelemetry span kind to its Zipkin kind.

    INTERNAL has no Zipkin equivalent and maps to None.
    """
    return _KIND_MAP[kind]


def resolve_service_name(resource: Attributes) -> str:
    """Return the resource's ``service.name``, or the default when unset or empty."""
    service_name = resource.get(SERVICE_NAME)
    if service_name:
        return stringify_attribute(service_name)
    return DEFAULT_SERVICE_NAME


def build_attribute_tags(attributes: Attributes) -> Dict[str, str]:
    """Stringify span attributes into Zipkin tags, preserving their order."""
    tags: Dict[str, str] = {}
    for key, value in attributes.items():
        tags[key] = stringify_attribute(value)
    return tags


class ZipkinSpanTransformer:
    """Converts finished OpenTelemetry spans into Zipkin v2 spans.

    The transformer holds nothing but the IP address supplier, so one
    instance can be shared freely between threads. The supplier is called
    once per transformed span.

    Attributes:
        ip_address_supplier: Zero-argument callable returning the local IP
            address, or None when it is unknown
    """

    def __init__(self, ip_address_supplier: IpAddressSupplier) -> None:
        self._ip_address_supplier = ip_address_supplier

    @property
    def ip_address_supplier(self) -> IpAddressSupplier:
        return self._ip_address_supplier

    def transform(self, span: SpanRecord) -> ZipkinSpan:
        """Convert one span record into a Zipkin span.

        Tags are built in a fixed order: span attributes, instrumentation
        scope, status and finally drop counts.

        Args:
            span: The finished span to convert

        Returns:
            A newly built ZipkinSpan
        """
        timestamp, duration = compute_timing(
            span.start_time_unix_nano, span.end_time_unix_nano
        )

        tags = build_attribute_tags(span.attributes)
        apply_scope_tags(tags, span.instrumentation_scope)
        apply_status_tags(tags, span.status)
        apply_drop_count_tags(
            tags, span.dropped_attributes_count, span.dropped_events_count
        )

        logger.debug(
            "Converted span %s (trace %s) with %d tags",
            span.span_id,
            span.trace_id[:8],
            len(tags),
        )

        return ZipkinSpan(
            trace_id=span.trace_id,
            id=span.span_id,
            parent_id=span.parent_span_id,
            name=span.name,
            kind=map_span_kind(span.kind),
            timestamp=timestamp,
            duration=duration,
            local_endpoint=self._local_endpoint(span.resource),
            tags=tags,
        )

    def _local_endpoint(self, resource: Attributes) -> Endpoint:
        return Endpoint(
            service_name=resolve_service_name(resource),
            ip=self._local_ip(),
        )

    def _local_ip(self) -> Optional[str]:
        """Call the supplier, discarding anything that is not an IP address."""
        address = self._ip_address_supplier()
        if address is None:
            return None
        try:
            return str(ipaddress.ip_address(address))
        except ValueError:
            logger.warning("Ignoring invalid local IP address %r", address)
            return None
