"""Tests for the typed environment accessors and escape decoding."""
from __future__ import annotations

import ipaddress

import pytest

from lazymc.config.addresses import Resolver
from lazymc.config.env import EnvReader, decode_escapes, env_key, parse_unsigned


def test_decode_escapes_replaces_control_sequences() -> None:
    """Literal \\n and \\t sequences become real control characters."""
    decoded = decode_escapes("a\\nb\\tc")

    assert decoded == "a\nb\tc"
    assert decoded.split("\n") == ["a", "b\tc"]


def test_decode_escapes_carriage_return() -> None:
    """\\r becomes a carriage return."""
    assert decode_escapes("line\\r") == "line\r"


def test_decode_escapes_double_backslash_is_single() -> None:
    """A doubled backslash decodes to exactly one backslash."""
    assert decode_escapes("C:\\\\data") == "C:\\data"
    assert decode_escapes("\\\\\\\\") == "\\\\"


def test_decode_escapes_leaves_plain_text_alone() -> None:
    """Text without escape sequences is unchanged."""
    assert decode_escapes("§2☻ Join to start it up") == "§2☻ Join to start it up"


def test_env_key_builds_prefixed_upper_snake_case() -> None:
    """Section and field names map onto LAZYMC_ variables."""
    assert env_key("server", "command") == "LAZYMC_SERVER_COMMAND"
    assert env_key("join", "lobby", "ready_sound") == "LAZYMC_JOIN_LOBBY_READY_SOUND"


def test_string_decodes_value_and_default() -> None:
    """Escape decoding applies to both set values and defaults."""
    reader = EnvReader({"KEY": "one\\ntwo"})

    assert reader.string("KEY", "unused") == "one\ntwo"
    assert reader.string("MISSING", "x\\ty") == "x\ty"


def test_string_keeps_empty_value() -> None:
    """An empty variable is a value, not an absence."""
    assert EnvReader({"KEY": ""}).string("KEY", "default") == ""


def test_optional_string_without_default_is_none() -> None:
    """Unset optional strings without a default resolve to None."""
    assert EnvReader({}).optional_string("KEY") is None


@pytest.mark.parametrize("value", ["true", "TRUE", "True", "1", "yes", "YES", "on", "On"])
def test_boolean_true_synonyms(value: str) -> None:
    """Accepted true synonyms are case-insensitive."""
    assert EnvReader({"FLAG": value}).boolean("FLAG", False) is True


@pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "No", "off", "OFF"])
def test_boolean_false_synonyms(value: str) -> None:
    """Accepted false synonyms are case-insensitive."""
    assert EnvReader({"FLAG": value}).boolean("FLAG", True) is False


@pytest.mark.parametrize("value", ["", "maybe", "2", "y", " true", "enabled"])
@pytest.mark.parametrize("default", [True, False])
def test_boolean_unrecognised_value_uses_default(value: str, default: bool) -> None:
    """Anything outside the synonym sets yields the default."""
    assert EnvReader({"FLAG": value}).boolean("FLAG", default) is default


@pytest.mark.parametrize(
    ("value", "expected"),
    [("0", 0), ("42", 42), ("+7", 7), ("65535", 65535)],
)
def test_u16_parses_valid_values(value: str, expected: int) -> None:
    """Unsigned decimal text within range parses."""
    assert EnvReader({"PORT": value}).u16("PORT", 1) == expected


@pytest.mark.parametrize("value", ["65536", "-1", "abc", "", "1.5", "0x10", " 5", "1_000"])
def test_u16_invalid_values_use_default(value: str) -> None:
    """Out-of-range or malformed numbers yield the default."""
    assert EnvReader({"PORT": value}).u16("PORT", 25575) == 25575


def test_u32_accepts_full_range() -> None:
    """u32 accepts values up to 2**32 - 1 and rejects beyond."""
    assert EnvReader({"N": "4294967295"}).u32("N", 1) == 4294967295
    assert EnvReader({"N": "4294967296"}).u32("N", 1) == 1


def test_parse_unsigned_rejects_non_ascii_digits() -> None:
    """Only ASCII decimal digits are accepted."""
    assert parse_unsigned("١٢", 100) is None


def test_string_list_splits_and_trims() -> None:
    """Comma separated lists are trimmed per element."""
    reader = EnvReader({"LIST": " hold , kick,forward "})

    assert reader.string_list("LIST", ()) == ("hold", "kick", "forward")
    assert reader.string_list("MISSING", ("a", "b")) == ("a", "b")


def test_socket_address_uses_default_when_unset() -> None:
    """The string default is parsed when the variable is absent."""
    address = EnvReader({}).socket_address("ADDR", "127.0.0.1:25566")

    assert address.host == ipaddress.ip_address("127.0.0.1")
    assert address.port == 25566


def test_socket_address_malformed_falls_back(fake_resolver: Resolver) -> None:
    """Malformed or unresolvable addresses silently use the default."""
    for value in ("nonsense", "127.0.0.1:99999", "unknown.example.test:25565", ""):
        reader = EnvReader({"ADDR": value}, resolver=fake_resolver)
        assert str(reader.socket_address("ADDR", "0.0.0.0:25565")) == "0.0.0.0:25565"


def test_socket_address_resolves_hostname(fake_resolver: Resolver) -> None:
    """Hostnames are resolved through the injected resolver."""
    reader = EnvReader({"ADDR": "mc.example.test:25570"}, resolver=fake_resolver)

    address = reader.socket_address("ADDR", "0.0.0.0:25565")

    assert str(address) == "203.0.113.7:25570"
