"""Tests for socket address parsing and resolution."""
from __future__ import annotations

import ipaddress
import socket

import pytest

from lazymc.config.addresses import (
    AddressResolutionError,
    Resolver,
    SocketAddress,
    parse_socket_address,
    split_host_port,
    system_resolver,
)


def test_literal_ipv4_address_parses_exactly() -> None:
    """The default server address parses without any lookup."""

    def _fail(host: str, port: int) -> list[ipaddress.IPv4Address]:
        raise AssertionError("literal addresses must not be resolved")

    address = parse_socket_address("127.0.0.1:25566", resolver=_fail)

    assert address == SocketAddress(ipaddress.ip_address("127.0.0.1"), 25566)
    assert address.ip == "127.0.0.1"
    assert str(address) == "127.0.0.1:25566"


def test_bracketed_ipv6_address() -> None:
    """IPv6 literals use bracket notation."""
    address = parse_socket_address("[::1]:25565")

    assert address.host == ipaddress.ip_address("::1")
    assert address.port == 25565
    assert str(address) == "[::1]:25565"


def test_hostname_uses_first_resolved_address(fake_resolver: Resolver) -> None:
    """The first address returned by the resolver wins."""
    address = parse_socket_address("mc.example.test:25565", resolver=fake_resolver)

    assert address.ip == "203.0.113.7"
    assert address.port == 25565


def test_hostname_resolving_to_ipv6(fake_resolver: Resolver) -> None:
    """IPv6 results are formatted with brackets."""
    address = parse_socket_address("v6.example.test:1", resolver=fake_resolver)

    assert str(address) == "[2001:db8::7]:1"


def test_unresolvable_hostname_raises(fake_resolver: Resolver) -> None:
    """Lookup failures surface as AddressResolutionError."""
    with pytest.raises(AddressResolutionError):
        parse_socket_address("nowhere.example.test:25565", resolver=fake_resolver)


def test_resolver_returning_nothing_raises() -> None:
    """An empty lookup result is a resolution failure."""
    with pytest.raises(AddressResolutionError, match="did not resolve"):
        parse_socket_address("empty.test:25565", resolver=lambda host, port: [])


def test_resolver_oserror_is_wrapped() -> None:
    """Resolver OSErrors are converted into AddressResolutionError."""

    def _broken(host: str, port: int) -> list[ipaddress.IPv4Address]:
        raise OSError("resolver down")

    with pytest.raises(AddressResolutionError, match="resolver down"):
        parse_socket_address("mc.example.test:25565", resolver=_broken)


@pytest.mark.parametrize(
    "text",
    ["", "25565", "localhost", ":25565", "host:", "host:port", "::1:25565", "[::1]25565",
     "127.0.0.1:65536", "127.0.0.1:-1"],
)
def test_split_host_port_rejects_malformed(text: str) -> None:
    """Malformed host:port text is rejected before any lookup."""
    with pytest.raises(AddressResolutionError):
        split_host_port(text)


def test_split_host_port_keeps_hostname() -> None:
    """Host and port are split on the last colon."""
    assert split_host_port("mc.example.test:25565") == ("mc.example.test", 25565)


def test_system_resolver_resolves_localhost(monkeypatch: pytest.MonkeyPatch) -> None:
    """The system resolver maps getaddrinfo results to IP addresses."""

    def _getaddrinfo(host: str, port: int, **kwargs: object) -> list[tuple[object, ...]]:
        assert host == "localhost"
        return [
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", port)),
            (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", port, 0, 0)),
        ]

    monkeypatch.setattr(socket, "getaddrinfo", _getaddrinfo)

    address = parse_socket_address("localhost:25565")

    assert address == SocketAddress(ipaddress.ip_address("127.0.0.1"), 25565)


def test_system_resolver_wraps_gaierror(monkeypatch: pytest.MonkeyPatch) -> None:
    """getaddrinfo failures become AddressResolutionError."""

    def _getaddrinfo(host: str, port: int, **kwargs: object) -> list[tuple[object, ...]]:
        raise socket.gaierror(-2, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", _getaddrinfo)

    with pytest.raises(AddressResolutionError, match="Name or service not known"):
        system_resolver("nowhere.invalid", 25565)


def test_real_localhost_lookup_yields_concrete_ip() -> None:
    """A hostname resolves to some concrete IP with the requested port."""
    address = parse_socket_address("localhost:25565")

    assert address.host.is_loopback
    assert address.port == 25565
