"""
otel2zipkin.core.timing - Nanosecond to Zipkin microsecond conversion.
"""

from __future__ import annotations

from typing import Tuple

NANOS_PER_MICRO = 1000


def to_epoch_micros(epoch_nanos: int) -> int:
    """Truncate a nanosecond epoch timestamp to microseconds."""
    return epoch_nanos // NANOS_PER_MICRO


def compute_timing(start_nanos: int, end_nanos: int) -> Tuple[int, int]:
    """Compute the Zipkin timestamp and duration of a span.

    Both values are in microseconds and truncated. A span that took time but
    less than one microsecond is reported with a duration of 1 rather than 0;
    only a span whose end equals its start keeps a zero duration.

    Args:
        start_nanos: Span start, nanoseconds since epoch
        end_nanos: Span end, nanoseconds since epoch (not before start)

    Returns:
        Tuple of (timestamp, duration) in microseconds
    """
    timestamp = to_epoch_micros(start_nanos)
    duration = (end_nanos - start_nanos) // NANOS_PER_MICRO
    if duration == 0 and end_nanos > start_nanos:
        duration = 1
    return timestamp, duration
