"""Pytest configuration helpers for the test suite."""

from __future__ import annotations

import ipaddress
from collections.abc import Sequence

import pytest

from lazymc.config.addresses import AddressResolutionError, IPAddress, Resolver

SERVER_COMMAND = "java -jar server.jar"

# Hostnames the fake resolver knows about; anything else fails to resolve.
FAKE_HOSTS: dict[str, tuple[str, ...]] = {
    "mc.example.test": ("203.0.113.7", "203.0.113.8"),
    "v6.example.test": ("2001:db8::7",),
}


def _fake_resolver(host: str, port: int) -> Sequence[IPAddress]:
    try:
        addresses = FAKE_HOSTS[host]
    except KeyError:
        raise AddressResolutionError(f"Failed to resolve host '{host}'") from None
    return [ipaddress.ip_address(address) for address in addresses]


@pytest.fixture
def fake_resolver() -> Resolver:
    """Resolver that answers from ``FAKE_HOSTS`` without touching the network."""
    return _fake_resolver


@pytest.fixture
def base_env() -> dict[str, str]:
    """Environment containing only the required server command."""
    return {"LAZYMC_SERVER_COMMAND": SERVER_COMMAND}
