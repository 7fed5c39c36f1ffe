"""
otel2zipkin - Convert OpenTelemetry spans into Zipkin v2 spans.

This package provides a stateless transformer from finished OpenTelemetry
spans to the Zipkin v2 span model, an OpenTelemetry SDK exporter built on it,
and a command-line tool converting OTLP/JSON exports.

Example:
    >>> from otel2zipkin import OTLPParser, ZipkinSpanTransformer
    >>> records = OTLPParser().parse_json(json_str)
    >>> transformer = ZipkinSpanTransformer(lambda: "10.0.0.7")
    >>> zipkin_spans = [transformer.transform(record) for record in records]
"""

__version__ = "0.1.0"
__author__ = "KR"
__email__ = "Karthickrajam18@gmail.com"

from otel2zipkin.core.model import SpanRecord, StatusRecord, EventRecord, ZipkinSpan, Endpoint, ZipkinKind
from otel2zipkin.core.scope import InstrumentationScope, LegacyInstrumentationScope, to_current, to_legacy
from otel2zipkin.core.parser import OTLPParser
from otel2zipkin.core.transformer import ZipkinSpanTransformer, DEFAULT_SERVICE_NAME
from otel2zipkin.exporters import ZipkinRecordExporter
from otel2zipkin.utils import LocalIpAddressSupplier

__all__ = [
    "SpanRecord",
    "StatusRecord",
    "EventRecord",
    "ZipkinSpan",
    "Endpoint",
    "ZipkinKind",
    "InstrumentationScope",
    "LegacyInstrumentationScope",
    "to_current",
    "to_legacy",
    "OTLPParser",
    "ZipkinSpanTransformer",
    "DEFAULT_SERVICE_NAME",
    "ZipkinRecordExporter",
    "LocalIpAddressSupplier",
]
