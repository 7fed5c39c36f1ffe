"""
otel2zipkin.utils.net - Local network address lookup.

Provides the default IP address supplier for the Zipkin local endpoint. The
address is resolved once, on first use, and cached for the life of the
supplier.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class LocalIpAddressSupplier:
    """Callable returning this host's first non-loopback IP address.

    IPv4 addresses are preferred over IPv6. When the host name does not
    resolve to any usable address the supplier returns None.

    Example:
        >>> supplier = LocalIpAddressSupplier()
        >>> transformer = ZipkinSpanTransformer(supplier)
    """

    def __init__(self, hostname: Optional[str] = None) -> None:
        """Initialize the supplier.

        Args:
            hostname: Host name to resolve, defaults to socket.gethostname()
        """
        self._hostname = hostname
        self._lock = threading.Lock()
        self._resolved = False
        self._address: Optional[str] = None

    def __call__(self) -> Optional[str]:
        with self._lock:
            if not self._resolved:
                self._address = self._resolve()
                self._resolved = True
            return self._address

    def _resolve(self) -> Optional[str]:
        hostname = self._hostname or socket.gethostname()
        try:
            infos = socket.getaddrinfo(hostname, None)
        except OSError as e:
            logger.debug("Could not resolve local address for %s: %s", hostname, e)
            return None

        candidates: List[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]] = []
        for family, _, _, _, sockaddr in infos:
            if family not in (socket.AF_INET, socket.AF_INET6):
                continue
            # strip any IPv6 zone index
            address = ipaddress.ip_address(str(sockaddr[0]).split("%", 1)[0])
            if address.is_loopback or address.is_unspecified or address.is_link_local:
                continue
            if address not in candidates:
                candidates.append(address)

        if not candidates:
            logger.debug("No non-loopback address found for %s", hostname)
            return None

        candidates.sort(key=lambda address: address.version)
        return str(candidates[0])
