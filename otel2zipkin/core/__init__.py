"""
otel2zipkin.core - Span records, Zipkin model and the transformation between them.

This subpackage contains the main functionality:
- attributes: canonical string form of typed attribute values
- scope: InstrumentationScope and its deprecated instrumentation-library alias
- timing: nanosecond to Zipkin microsecond conversion
- model: SpanRecord input and ZipkinSpan output records
- tags: status, error, scope and drop-count tags
- transformer: ZipkinSpanTransformer orchestrating the above
- parser: OTLPParser for OTLP/JSON export documents
"""

from otel2zipkin.core.attributes import AttributeType, attribute_type, stringify_attribute
from otel2zipkin.core.model import (
    Endpoint,
    EventRecord,
    SpanRecord,
    StatusRecord,
    ZipkinKind,
    ZipkinSpan,
)
from otel2zipkin.core.parser import OTLPParser
from otel2zipkin.core.scope import (
    EMPTY_SCOPE,
    InstrumentationScope,
    LegacyInstrumentationScope,
    to_current,
    to_legacy,
)
from otel2zipkin.core.timing import compute_timing
from otel2zipkin.core.transformer import (
    DEFAULT_SERVICE_NAME,
    ZipkinSpanTransformer,
    map_span_kind,
)

__all__ = [
    "AttributeType",
    "attribute_type",
    "stringify_attribute",
    "Endpoint",
    "EventRecord",
    "SpanRecord",
    "StatusRecord",
    "ZipkinKind",
    "ZipkinSpan",
    "OTLPParser",
    "EMPTY_SCOPE",
    "InstrumentationScope",
    "LegacyInstrumentationScope",
    "to_current",
    "to_legacy",
    "compute_timing",
    "DEFAULT_SERVICE_NAME",
    "ZipkinSpanTransformer",
    "map_span_kind",
]
