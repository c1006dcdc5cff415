"""Typed accessors for ``LAZYMC_`` environment variables.

Every accessor takes the variable name and a default, and never raises: an
absent variable or one that fails to parse yields the default. Text values
have backslash escape sequences decoded since shells make it awkward to embed
control characters directly.
"""
from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from .addresses import AddressResolutionError, Resolver, SocketAddress, parse_socket_address

ENV_PREFIX = "LAZYMC_"

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

U16_MAX = 0xFFFF
U32_MAX = 0xFFFF_FFFF

_UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")

# Backslashes are unescaped last so their output is never decoded again.
_ESCAPES = (
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ("\\\\", "\\"),
)


def decode_escapes(value: str) -> str:
    """Replace literal ``\\n``, ``\\r``, ``\\t`` and ``\\\\`` sequences."""
    for escaped, replacement in _ESCAPES:
        value = value.replace(escaped, replacement)
    return value


def parse_bool(value: str) -> bool | None:
    """Return the boolean for a recognised synonym, or ``None``."""
    normalized = value.lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return None


def parse_unsigned(value: str, maximum: int) -> int | None:
    """Return *value* as an unsigned integer no larger than *maximum*."""
    if not _UNSIGNED_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if number > maximum:
        return None
    return number


@dataclass(frozen=True)
class EnvReader:
    """Read typed values from an injectable environment mapping."""

    env: Mapping[str, str] = field(default_factory=lambda: os.environ)
    resolver: Resolver | None = None

    def raw(self, key: str) -> str | None:
        """Return the undecoded value of *key*, if set."""
        return self.env.get(key)

    def string(self, key: str, default: str) -> str:
        """Return the decoded text in *key*, or the decoded *default*."""
        value = self.env.get(key)
        return decode_escapes(default if value is None else value)

    def optional_string(self, key: str, default: str | None = None) -> str | None:
        value = self.env.get(key, default)
        if value is None:
            return None
        return decode_escapes(value)

    def boolean(self, key: str, default: bool) -> bool:
        """Return a boolean synonym from *key*, or *default* when unrecognised."""
        value = self.env.get(key)
        if value is None:
            return default
        parsed = parse_bool(value)
        return default if parsed is None else parsed

    def u16(self, key: str, default: int) -> int:
        return self._unsigned(key, default, U16_MAX)

    def u32(self, key: str, default: int) -> int:
        return self._unsigned(key, default, U32_MAX)

    def socket_address(self, key: str, default: str) -> SocketAddress:
        """Return the address in *key*, falling back to the *default* text.

        Unparsable or unresolvable values are ignored without logging.
        """
        value = self.env.get(key)
        if value is not None:
            try:
                return parse_socket_address(value, resolver=self.resolver)
            except AddressResolutionError:
                pass
        return parse_socket_address(default, resolver=self.resolver)

    def string_list(self, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
        """Return the comma separated items in *key* with whitespace trimmed."""
        value = self.env.get(key)
        if value is None:
            return default
        return tuple(item.strip() for item in value.split(","))

    def _unsigned(self, key: str, default: int, maximum: int) -> int:
        value = self.env.get(key)
        if value is None:
            return default
        parsed = parse_unsigned(value, maximum)
        return default if parsed is None else parsed


def env_key(*parts: str) -> str:
    """Build a prefixed variable name, e.g. ``env_key("server", "command")``."""
    return ENV_PREFIX + "_".join(part.upper() for part in parts)


__all__ = [
    "ENV_PREFIX",
    "EnvReader",
    "FALSE_VALUES",
    "TRUE_VALUES",
    "U16_MAX",
    "U32_MAX",
    "decode_escapes",
    "env_key",
    "parse_bool",
    "parse_unsigned",
]
