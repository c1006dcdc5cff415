"""Socket address parsing and hostname resolution."""
from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..errors import ConfigError

LOGGER = logging.getLogger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

# Maps ``(host, port)`` to the addresses the host resolves to, in resolver order.
Resolver = Callable[[str, int], Sequence[IPAddress]]

MAX_PORT = 65535


class AddressResolutionError(ConfigError):
    """Raised when a socket address cannot be parsed or resolved."""


@dataclass(frozen=True)
class SocketAddress:
    """A concrete IP address and port."""

    host: IPAddress
    port: int

    @property
    def ip(self) -> str:
        """Return the textual IP address without the port."""
        return str(self.host)

    def __str__(self) -> str:
        if self.host.version == 6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def system_resolver(host: str, port: int) -> list[IPAddress]:
    """Resolve *host* through the operating system resolver."""
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        raise AddressResolutionError(f"Failed to resolve host '{host}': {exc}") from exc
    addresses: list[IPAddress] = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        addresses.append(ipaddress.ip_address(sockaddr[0]))
    return addresses


def split_host_port(text: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts."""
    value = text.strip()
    if value.startswith("["):
        closing = value.find("]")
        if closing == -1 or value[closing + 1 : closing + 2] != ":":
            raise AddressResolutionError(f"Invalid socket address: {text!r}.")
        host = value[1:closing]
        port_text = value[closing + 2 :]
    else:
        host, separator, port_text = value.rpartition(":")
        if not separator or ":" in host:
            raise AddressResolutionError(f"Invalid socket address: {text!r}.")
    if not host:
        raise AddressResolutionError(f"Socket address {text!r} is missing a host.")
    if not port_text.isascii() or not port_text.isdigit():
        raise AddressResolutionError(f"Invalid port in socket address {text!r}.")
    port = int(port_text)
    if port > MAX_PORT:
        raise AddressResolutionError(f"Port out of range in socket address {text!r}.")
    return host, port


def parse_socket_address(text: str, *, resolver: Resolver | None = None) -> SocketAddress:
    """Turn ``host:port`` text into a resolved :class:`SocketAddress`.

    Literal IPv4/IPv6 hosts are used as-is. Anything else is looked up with
    *resolver* (the system resolver by default) and the first returned address
    wins. Lookups block and have no timeout.
    """
    host, port = split_host_port(text)
    try:
        return SocketAddress(host=ipaddress.ip_address(host), port=port)
    except ValueError:
        pass

    lookup = resolver or system_resolver
    LOGGER.debug("Resolving hostname %s", host)
    try:
        addresses = list(lookup(host, port))
    except AddressResolutionError:
        raise
    except (OSError, ValueError) as exc:
        raise AddressResolutionError(f"Failed to resolve host '{host}': {exc}") from exc
    if not addresses:
        raise AddressResolutionError(f"Host '{host}' did not resolve to any address.")
    return SocketAddress(host=addresses[0], port=port)


__all__ = [
    "AddressResolutionError",
    "IPAddress",
    "Resolver",
    "SocketAddress",
    "parse_socket_address",
    "split_host_port",
    "system_resolver",
]
