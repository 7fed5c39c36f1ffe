"""
Unit tests for otel2zipkin.core.model module.

Tests cover SpanRecord validation and defaults, and the Zipkin v2 JSON
shape produced by ZipkinSpan and Endpoint.
"""

import dataclasses

import pytest
from opentelemetry.trace import SpanKind, StatusCode

from otel2zipkin.core.model import (
    Endpoint,
    EventRecord,
    SpanRecord,
    StatusRecord,
    ZipkinKind,
    ZipkinSpan,
)
from otel2zipkin.core.scope import EMPTY_SCOPE

TRACE_ID = "d4cda95b652f4a1592b449d5929fda1b"
SPAN_ID = "6e0c63257de34c92"


def make_record(**overrides) -> SpanRecord:
    """Build a SpanRecord with sensible defaults."""
    fields = dict(
        trace_id=TRACE_ID,
        span_id=SPAN_ID,
        name="op",
        start_time_unix_nano=1_000_000,
        end_time_unix_nano=2_000_000,
    )
    fields.update(overrides)
    return SpanRecord(**fields)


class TestSpanRecord:
    """Tests for SpanRecord defaults and validation."""

    def test_defaults(self) -> None:
        """Test optional fields have neutral defaults."""
        record = make_record()
        assert record.parent_span_id is None
        assert record.kind == SpanKind.INTERNAL
        assert record.attributes == {}
        assert record.events == ()
        assert record.status == StatusRecord(StatusCode.UNSET, "")
        assert record.resource == {}
        assert record.instrumentation_scope == EMPTY_SCOPE

    def test_totals_default_to_present_counts(self) -> None:
        """Test missing totals mean nothing was dropped."""
        record = make_record(
            attributes={"a": 1, "b": 2},
            events=[EventRecord("evt", 1_500_000)],
        )
        assert record.total_attribute_count == 2
        assert record.total_recorded_events == 1
        assert record.dropped_attributes_count == 0
        assert record.dropped_events_count == 0

    def test_dropped_counts(self) -> None:
        """Test drop counts are totals minus present counts."""
        record = make_record(
            attributes={"a": 1},
            total_attribute_count=28,
            events=[EventRecord("evt", 1_500_000)],
            total_recorded_events=3,
        )
        assert record.dropped_attributes_count == 27
        assert record.dropped_events_count == 2

    def test_events_are_stored_as_tuple(self) -> None:
        """Test event lists are frozen into tuples."""
        record = make_record(events=[EventRecord("evt", 1)])
        assert isinstance(record.events, tuple)

    def test_record_is_immutable(self) -> None:
        """Test records cannot be modified after construction."""
        record = make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.name = "other"

    def test_empty_span_id_raises_error(self) -> None:
        """Test that empty span_id raises ValueError."""
        with pytest.raises(ValueError, match="span_id cannot be empty"):
            make_record(span_id="")

    def test_empty_trace_id_raises_error(self) -> None:
        """Test that empty trace_id raises ValueError."""
        with pytest.raises(ValueError, match="trace_id cannot be empty"):
            make_record(trace_id="")

    def test_end_before_start_raises_error(self) -> None:
        """Test that an end before the start raises ValueError."""
        with pytest.raises(ValueError, match="cannot precede"):
            make_record(start_time_unix_nano=10, end_time_unix_nano=5)

    def test_total_attributes_below_present_raises_error(self) -> None:
        """Test that a total smaller than the attributes present raises ValueError."""
        with pytest.raises(ValueError, match="total_attribute_count"):
            make_record(attributes={"a": 1, "b": 2}, total_attribute_count=1)

    def test_total_events_below_present_raises_error(self) -> None:
        """Test that a total smaller than the events present raises ValueError."""
        with pytest.raises(ValueError, match="total_recorded_events"):
            make_record(events=[EventRecord("e", 1)], total_recorded_events=0)


class TestEndpoint:
    """Tests for Endpoint.to_dict."""

    def test_ipv4(self) -> None:
        """Test IPv4 addresses are emitted under ipv4."""
        endpoint = Endpoint("orders", "10.0.0.7")
        assert endpoint.to_dict() == {"serviceName": "orders", "ipv4": "10.0.0.7"}

    def test_ipv6(self) -> None:
        """Test IPv6 addresses are emitted under ipv6 in compressed form."""
        endpoint = Endpoint("orders", "2001:db8:0:0:0:0:0:1")
        assert endpoint.to_dict() == {"serviceName": "orders", "ipv6": "2001:db8::1"}

    def test_no_address(self) -> None:
        """Test a missing address is omitted."""
        assert Endpoint("orders").to_dict() == {"serviceName": "orders"}


class TestZipkinSpan:
    """Tests for ZipkinSpan.to_dict."""

    def test_full_span(self) -> None:
        """Test every populated field appears in Zipkin v2 naming."""
        span = ZipkinSpan(
            trace_id=TRACE_ID,
            id=SPAN_ID,
            parent_id="8b03ab423da481c5",
            name="get /orders",
            kind=ZipkinKind.SERVER,
            timestamp=1505855794194009,
            duration=1,
            local_endpoint=Endpoint("orders", "10.0.0.7"),
            tags={"otel.status_code": "OK"},
        )

        assert span.to_dict() == {
            "traceId": TRACE_ID,
            "parentId": "8b03ab423da481c5",
            "id": SPAN_ID,
            "kind": "SERVER",
            "name": "get /orders",
            "timestamp": 1505855794194009,
            "duration": 1,
            "localEndpoint": {"serviceName": "orders", "ipv4": "10.0.0.7"},
            "tags": {"otel.status_code": "OK"},
        }

    def test_optional_fields_are_omitted(self) -> None:
        """Test absent parent, kind, tags and flags are left out."""
        span = ZipkinSpan(
            trace_id=TRACE_ID,
            id=SPAN_ID,
            name="op",
            timestamp=1,
            duration=0,
            local_endpoint=Endpoint("svc"),
        )
        result = span.to_dict()

        assert "parentId" not in result
        assert "kind" not in result
        assert "tags" not in result
        assert "debug" not in result
        assert "shared" not in result

    def test_flags_are_emitted_when_set(self) -> None:
        """Test debug and shared appear once set."""
        span = ZipkinSpan(
            trace_id=TRACE_ID,
            id=SPAN_ID,
            name="op",
            timestamp=1,
            duration=0,
            local_endpoint=Endpoint("svc"),
            debug=True,
            shared=False,
        )
        result = span.to_dict()

        assert result["debug"] is True
        assert result["shared"] is False
