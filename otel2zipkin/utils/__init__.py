"""
otel2zipkin.utils - Helpers for the transformer's external collaborators.

This subpackage contains:
- net: LocalIpAddressSupplier for the Zipkin local endpoint address
"""

from otel2zipkin.utils.net import LocalIpAddressSupplier

__all__ = ["LocalIpAddressSupplier"]
