"""Tests for the otel2zipkin package."""
