"""
otel2zipkin.core.tags - Derived Zipkin tags.

Tag keys in this module are part of the compatibility contract with Zipkin
consumers. The helpers write into a plain dict of tags already populated from
span attributes, so a later write at the same key replaces an earlier one.
"""

from __future__ import annotations

from typing import Dict

from opentelemetry.trace import StatusCode

from otel2zipkin.core.model import StatusRecord
from otel2zipkin.core.scope import InstrumentationScope, to_legacy

OTEL_STATUS_CODE = "otel.status_code"
STATUS_ERROR = "error"
OTEL_DROPPED_ATTRIBUTES_COUNT = "otel.dropped_attributes_count"
OTEL_DROPPED_EVENTS_COUNT = "otel.dropped_events_count"
OTEL_SCOPE_NAME = "otel.scope.name"
OTEL_SCOPE_VERSION = "otel.scope.version"
OTEL_LIBRARY_NAME = "otel.library.name"
OTEL_LIBRARY_VERSION = "otel.library.version"


def apply_scope_tags(tags: Dict[str, str], scope: InstrumentationScope) -> None:
    """Tag the instrumentation scope under both its current and legacy keys.

    Name tags are written only for a named scope and version tags only when a
    version is present.

    Args:
        tags: Tag mapping to update in place
        scope: Scope that produced the span
    """
    if scope.name:
        tags[OTEL_SCOPE_NAME] = scope.name
    if scope.version is not None:
        tags[OTEL_SCOPE_VERSION] = scope.version

    legacy = to_legacy(scope)
    if legacy.name:
        tags[OTEL_LIBRARY_NAME] = legacy.name
    if legacy.version is not None:
        tags[OTEL_LIBRARY_VERSION] = legacy.version


def apply_status_tags(tags: Dict[str, str], status: StatusRecord) -> None:
    """Tag the span status and, for failed spans, the error.

    OK and ERROR are recorded under ``otel.status_code``; UNSET records
    nothing. An ERROR status with a description always sets ``error`` to
    that description. Without a description, ``error`` is set to the empty
    string only if the span's own attributes did not already provide one.

    Args:
        tags: Tag mapping already populated from span attributes
        status: Status of the span
    """
    if status.code == StatusCode.UNSET:
        return

    tags[OTEL_STATUS_CODE] = status.code.name

    if status.code != StatusCode.ERROR:
        return

    if status.description:
        tags[STATUS_ERROR] = status.description
    elif STATUS_ERROR not in tags:
        tags[STATUS_ERROR] = ""


def apply_drop_count_tags(
    tags: Dict[str, str], dropped_attributes: int, dropped_events: int
) -> None:
    """Tag how many attributes and events were dropped by span limits.

    Args:
        tags: Tag mapping to update in place
        dropped_attributes: Attributes elided from the span
        dropped_events: Events elided from the span
    """
    if dropped_attributes > 0:
        tags[OTEL_DROPPED_ATTRIBUTES_COUNT] = str(dropped_attributes)
    if dropped_events > 0:
        tags[OTEL_DROPPED_EVENTS_COUNT] = str(dropped_events)
