"""
otel2zipkin.core.scope - Instrumentation scope and its deprecated alias.

OpenTelemetry renamed "instrumentation library" to "instrumentation scope".
Both records carry the same three fields, and Zipkin consumers may key on
either generation of tag names, so both views are kept side by side with a
pair of lossless conversion functions between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InstrumentationScope:
    """Identifies the library or module that produced a span.

    Attributes:
        name: Scope name (empty for the default scope)
        version: Optional scope version
        schema_url: Optional schema URL of the scope's telemetry
    """
    name: str
    version: Optional[str] = None
    schema_url: Optional[str] = None


@dataclass(frozen=True)
class LegacyInstrumentationScope:
    """Deprecated "instrumentation library" form of InstrumentationScope."""
    name: str
    version: Optional[str] = None
    schema_url: Optional[str] = None


EMPTY_SCOPE = InstrumentationScope(name="")


def to_legacy(scope: InstrumentationScope) -> LegacyInstrumentationScope:
    """Convert a scope to its deprecated instrumentation-library form."""
    return LegacyInstrumentationScope(
        name=scope.name,
        version=scope.version,
        schema_url=scope.schema_url,
    )


def to_current(legacy: LegacyInstrumentationScope) -> InstrumentationScope:
    """Convert a deprecated instrumentation-library record to a scope."""
    return InstrumentationScope(
        name=legacy.name,
        version=legacy.version,
        schema_url=legacy.schema_url,
    )
