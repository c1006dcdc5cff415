"""Section builders for file and environment sources.

Each section has two independent builders producing the same frozen type:

* ``<section>_from_file`` takes the decoded mapping for that section. Values
  must already have the right type; anything else raises :class:`ConfigError`.
* ``<section>_from_env`` reads ``LAZYMC_<SECTION>_<FIELD>`` variables through
  an :class:`EnvReader` and never raises.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from ..errors import ConfigError
from .addresses import Resolver, SocketAddress, parse_socket_address
from .env import U16_MAX, U32_MAX, EnvReader, env_key
from .models import (
    DEFAULT_FORWARD_ADDRESS,
    DEFAULT_JOIN_METHODS,
    DEFAULT_PUBLIC_ADDRESS,
    DEFAULT_SERVER_ADDRESS,
    DEFAULT_SERVER_DIRECTORY,
    AdvancedConfig,
    ConfigMeta,
    JoinConfig,
    JoinForwardConfig,
    JoinHoldConfig,
    JoinKickConfig,
    JoinLobbyConfig,
    JoinMethod,
    LockoutConfig,
    MotdConfig,
    PublicConfig,
    RconConfig,
    ServerConfig,
    TimeConfig,
)

SERVER_COMMAND_ENV = env_key("server", "command")


# ----------------------------------------------------------------------
# Public
# ----------------------------------------------------------------------


def public_from_file(
    raw: Mapping[str, object], *, resolver: Resolver | None = None
) -> PublicConfig:
    """Build :class:`PublicConfig` from the ``[public]`` table."""
    defaults = PublicConfig()
    return PublicConfig(
        address=_expect_address(
            raw.get("address"), "public.address", defaults.address, resolver=resolver
        ),
        version=_expect_str(raw.get("version"), "public.version", default=defaults.version),
        protocol=_expect_u32(raw.get("protocol"), "public.protocol", default=defaults.protocol),
    )


def public_from_env(env: EnvReader) -> PublicConfig:
    """Build :class:`PublicConfig` from ``LAZYMC_PUBLIC_*`` variables."""
    defaults = PublicConfig()
    return PublicConfig(
        address=env.socket_address(env_key("public", "address"), DEFAULT_PUBLIC_ADDRESS),
        version=env.string(env_key("public", "version"), defaults.version),
        protocol=env.u32(env_key("public", "protocol"), defaults.protocol),
    )


# ----------------------------------------------------------------------
# Server
# ----------------------------------------------------------------------


def server_from_file(
    raw: Mapping[str, object], *, resolver: Resolver | None = None
) -> ServerConfig:
    """Build :class:`ServerConfig` from the ``[server]`` table.

    ``command`` is required; every other field has a default.
    """
    command = raw.get("command")
    if command is None:
        raise ConfigError("Missing required field 'server.command'.")
    command = _expect_str(command, "server.command", default="")
    if not command.strip():
        raise ConfigError("Field 'server.command' must not be empty.")

    defaults = ServerConfig(command=command)
    directory = _expect_str(
        raw.get("directory"), "server.directory", default=DEFAULT_SERVER_DIRECTORY
    )
    return ServerConfig(
        command=command,
        directory=Path(directory),
        address=_expect_address(
            raw.get("address"), "server.address", defaults.address, resolver=resolver
        ),
        freeze_process=_expect_bool(
            raw.get("freeze_process"), "server.freeze_process", default=defaults.freeze_process
        ),
        wake_on_start=_expect_bool(
            raw.get("wake_on_start"), "server.wake_on_start", default=defaults.wake_on_start
        ),
        wake_on_crash=_expect_bool(
            raw.get("wake_on_crash"), "server.wake_on_crash", default=defaults.wake_on_crash
        ),
        probe_on_start=_expect_bool(
            raw.get("probe_on_start"), "server.probe_on_start", default=defaults.probe_on_start
        ),
        forge=_expect_bool(raw.get("forge"), "server.forge", default=defaults.forge),
        start_timeout=_expect_u32(
            raw.get("start_timeout"), "server.start_timeout", default=defaults.start_timeout
        ),
        stop_timeout=_expect_u32(
            raw.get("stop_timeout"), "server.stop_timeout", default=defaults.stop_timeout
        ),
        wake_whitelist=_expect_bool(
            raw.get("wake_whitelist"), "server.wake_whitelist", default=defaults.wake_whitelist
        ),
        block_banned_ips=_expect_bool(
            raw.get("block_banned_ips"),
            "server.block_banned_ips",
            default=defaults.block_banned_ips,
        ),
        drop_banned_ips=_expect_bool(
            raw.get("drop_banned_ips"), "server.drop_banned_ips", default=defaults.drop_banned_ips
        ),
        send_proxy_v2=_expect_bool(
            raw.get("send_proxy_v2"), "server.send_proxy_v2", default=defaults.send_proxy_v2
        ),
    )


def server_from_env(env: EnvReader, command: str) -> ServerConfig:
    """Build :class:`ServerConfig` from ``LAZYMC_SERVER_*`` variables.

    *command* has already been validated by the caller.
    """
    defaults = ServerConfig(command=command)

    def key(name: str) -> str:
        return env_key("server", name)

    return ServerConfig(
        command=command,
        directory=Path(env.string(key("directory"), DEFAULT_SERVER_DIRECTORY)),
        address=env.socket_address(key("address"), DEFAULT_SERVER_ADDRESS),
        freeze_process=env.boolean(key("freeze_process"), defaults.freeze_process),
        wake_on_start=env.boolean(key("wake_on_start"), defaults.wake_on_start),
        wake_on_crash=env.boolean(key("wake_on_crash"), defaults.wake_on_crash),
        probe_on_start=env.boolean(key("probe_on_start"), defaults.probe_on_start),
        forge=env.boolean(key("forge"), defaults.forge),
        start_timeout=env.u32(key("start_timeout"), defaults.start_timeout),
        stop_timeout=env.u32(key("stop_timeout"), defaults.stop_timeout),
        wake_whitelist=env.boolean(key("wake_whitelist"), defaults.wake_whitelist),
        block_banned_ips=env.boolean(key("block_banned_ips"), defaults.block_banned_ips),
        drop_banned_ips=env.boolean(key("drop_banned_ips"), defaults.drop_banned_ips),
        send_proxy_v2=env.boolean(key("send_proxy_v2"), defaults.send_proxy_v2),
    )


def server_command_from_env(env: EnvReader) -> str:
    """Return the required server start command.

    Raises :class:`ConfigError` when the variable is unset or blank. Escape
    sequences are decoded like every other environment value, so a Windows
    path such as ``C:\\new\\run.bat`` gains a newline. Use forward slashes
    (``C:/new/run.bat``) instead.
    """
    value = env.raw(SERVER_COMMAND_ENV)
    if value is None or not value.strip():
        raise ConfigError(f"Missing required environment variable: {SERVER_COMMAND_ENV}")
    return env.string(SERVER_COMMAND_ENV, value)


# ----------------------------------------------------------------------
# Time
# ----------------------------------------------------------------------


def time_from_file(raw: Mapping[str, object]) -> TimeConfig:
    """Build :class:`TimeConfig` from the ``[time]`` table."""
    defaults = TimeConfig()
    if "min_online_time" in raw and "minimum_online_time" in raw:
        raise ConfigError(
            "Duplicate field 'time.min_online_time' (also set as 'minimum_online_time')."
        )
    min_online = raw.get("min_online_time", raw.get("minimum_online_time"))
    return TimeConfig(
        sleep_after=_expect_u32(
            raw.get("sleep_after"), "time.sleep_after", default=defaults.sleep_after
        ),
        min_online_time=_expect_u32(
            min_online, "time.min_online_time", default=defaults.min_online_time
        ),
    )


def time_from_env(env: EnvReader) -> TimeConfig:
    """Build :class:`TimeConfig` from ``LAZYMC_TIME_*`` variables."""
    defaults = TimeConfig()
    return TimeConfig(
        sleep_after=env.u32(env_key("time", "sleep_after"), defaults.sleep_after),
        min_online_time=env.u32(env_key("time", "min_online_time"), defaults.min_online_time),
    )


# ----------------------------------------------------------------------
# MOTD
# ----------------------------------------------------------------------


def motd_from_file(raw: Mapping[str, object]) -> MotdConfig:
    """Build :class:`MotdConfig` from the ``[motd]`` table."""
    defaults = MotdConfig()
    return MotdConfig(
        sleeping=_expect_str(raw.get("sleeping"), "motd.sleeping", default=defaults.sleeping),
        starting=_expect_str(raw.get("starting"), "motd.starting", default=defaults.starting),
        stopping=_expect_str(raw.get("stopping"), "motd.stopping", default=defaults.stopping),
        from_server=_expect_bool(
            raw.get("from_server"), "motd.from_server", default=defaults.from_server
        ),
    )


def motd_from_env(env: EnvReader) -> MotdConfig:
    """Build :class:`MotdConfig` from ``LAZYMC_MOTD_*`` variables."""
    defaults = MotdConfig()
    return MotdConfig(
        sleeping=env.string(env_key("motd", "sleeping"), defaults.sleeping),
        starting=env.string(env_key("motd", "starting"), defaults.starting),
        stopping=env.string(env_key("motd", "stopping"), defaults.stopping),
        from_server=env.boolean(env_key("motd", "from_server"), defaults.from_server),
    )


# ----------------------------------------------------------------------
# Join
# ----------------------------------------------------------------------


def join_from_file(
    raw: Mapping[str, object], *, resolver: Resolver | None = None
) -> JoinConfig:
    """Build :class:`JoinConfig` from ``[join]`` and its sub-tables."""
    methods_raw = raw.get("methods")
    if methods_raw is None:
        methods = DEFAULT_JOIN_METHODS
    else:
        methods_list: list[JoinMethod] = []
        for index, entry in enumerate(_as_sequence(methods_raw, "join.methods")):
            if not isinstance(entry, str):
                raise ConfigError(f"Expected join.methods[{index}] to be a string.")
            try:
                methods_list.append(JoinMethod(entry))
            except ValueError as exc:
                allowed = ", ".join(method.value for method in JoinMethod)
                raise ConfigError(
                    f"Unknown join method '{entry}' in join.methods. Allowed: {allowed}."
                ) from exc
        methods = tuple(methods_list)

    return JoinConfig(
        methods=methods,
        kick=join_kick_from_file(as_table(raw.get("kick"), "join.kick")),
        hold=join_hold_from_file(as_table(raw.get("hold"), "join.hold")),
        forward=join_forward_from_file(
            as_table(raw.get("forward"), "join.forward"), resolver=resolver
        ),
        lobby=join_lobby_from_file(as_table(raw.get("lobby"), "join.lobby")),
    )


def join_from_env(env: EnvReader) -> JoinConfig:
    """Build :class:`JoinConfig` from ``LAZYMC_JOIN_*`` variables.

    Unknown method names are dropped, so the result may hold no methods.
    """
    names = env.string_list(
        env_key("join", "methods"), tuple(method.value for method in DEFAULT_JOIN_METHODS)
    )
    methods: list[JoinMethod] = []
    for name in names:
        try:
            methods.append(JoinMethod.from_str(name))
        except ValueError:
            continue
    return JoinConfig(
        methods=tuple(methods),
        kick=join_kick_from_env(env),
        hold=join_hold_from_env(env),
        forward=join_forward_from_env(env),
        lobby=join_lobby_from_env(env),
    )


def join_kick_from_file(raw: Mapping[str, object]) -> JoinKickConfig:
    """Build :class:`JoinKickConfig` from ``[join.kick]``."""
    defaults = JoinKickConfig()
    return JoinKickConfig(
        starting=_expect_str(raw.get("starting"), "join.kick.starting", default=defaults.starting),
        stopping=_expect_str(raw.get("stopping"), "join.kick.stopping", default=defaults.stopping),
    )


def join_kick_from_env(env: EnvReader) -> JoinKickConfig:
    """Build :class:`JoinKickConfig` from ``LAZYMC_JOIN_KICK_*`` variables."""
    defaults = JoinKickConfig()
    return JoinKickConfig(
        starting=env.string(env_key("join", "kick", "starting"), defaults.starting),
        stopping=env.string(env_key("join", "kick", "stopping"), defaults.stopping),
    )


def join_hold_from_file(raw: Mapping[str, object]) -> JoinHoldConfig:
    """Build :class:`JoinHoldConfig` from ``[join.hold]``."""
    default = JoinHoldConfig().timeout
    return JoinHoldConfig(
        timeout=_expect_u32(raw.get("timeout"), "join.hold.timeout", default=default)
    )


def join_hold_from_env(env: EnvReader) -> JoinHoldConfig:
    """Build :class:`JoinHoldConfig` from ``LAZYMC_JOIN_HOLD_*`` variables."""
    return JoinHoldConfig(
        timeout=env.u32(env_key("join", "hold", "timeout"), JoinHoldConfig().timeout)
    )


def join_forward_from_file(
    raw: Mapping[str, object], *, resolver: Resolver | None = None
) -> JoinForwardConfig:
    """Build :class:`JoinForwardConfig` from ``[join.forward]``."""
    defaults = JoinForwardConfig()
    return JoinForwardConfig(
        address=_expect_address(
            raw.get("address"), "join.forward.address", defaults.address, resolver=resolver
        ),
        send_proxy_v2=_expect_bool(
            raw.get("send_proxy_v2"), "join.forward.send_proxy_v2", default=defaults.send_proxy_v2
        ),
    )


def join_forward_from_env(env: EnvReader) -> JoinForwardConfig:
    """Build :class:`JoinForwardConfig` from ``LAZYMC_JOIN_FORWARD_*`` variables."""
    return JoinForwardConfig(
        address=env.socket_address(
            env_key("join", "forward", "address"), DEFAULT_FORWARD_ADDRESS
        ),
        send_proxy_v2=env.boolean(
            env_key("join", "forward", "send_proxy_v2"), JoinForwardConfig().send_proxy_v2
        ),
    )


def join_lobby_from_file(raw: Mapping[str, object]) -> JoinLobbyConfig:
    """Build :class:`JoinLobbyConfig` from ``[join.lobby]``.

    An empty ``ready_sound`` (or ``null`` in YAML) disables the sound.
    """
    defaults = JoinLobbyConfig()
    if "ready_sound" in raw and raw["ready_sound"] is None:
        ready_sound: str | None = None
    else:
        ready_sound = _expect_str(
            raw.get("ready_sound"), "join.lobby.ready_sound", default=defaults.ready_sound or ""
        )
    return JoinLobbyConfig(
        timeout=_expect_u32(raw.get("timeout"), "join.lobby.timeout", default=defaults.timeout),
        message=_expect_str(raw.get("message"), "join.lobby.message", default=defaults.message),
        ready_sound=ready_sound or None,
    )


def join_lobby_from_env(env: EnvReader) -> JoinLobbyConfig:
    """Build :class:`JoinLobbyConfig` from ``LAZYMC_JOIN_LOBBY_*`` variables."""
    defaults = JoinLobbyConfig()
    ready_sound = env.optional_string(
        env_key("join", "lobby", "ready_sound"), defaults.ready_sound
    )
    return JoinLobbyConfig(
        timeout=env.u32(env_key("join", "lobby", "timeout"), defaults.timeout),
        message=env.string(env_key("join", "lobby", "message"), defaults.message),
        ready_sound=ready_sound or None,
    )


# ----------------------------------------------------------------------
# Lockout, RCON, advanced, config metadata
# ----------------------------------------------------------------------


def lockout_from_file(raw: Mapping[str, object]) -> LockoutConfig:
    """Build :class:`LockoutConfig` from the ``[lockout]`` table."""
    defaults = LockoutConfig()
    return LockoutConfig(
        enabled=_expect_bool(raw.get("enabled"), "lockout.enabled", default=defaults.enabled),
        message=_expect_str(raw.get("message"), "lockout.message", default=defaults.message),
    )


def lockout_from_env(env: EnvReader) -> LockoutConfig:
    """Build :class:`LockoutConfig` from ``LAZYMC_LOCKOUT_*`` variables."""
    defaults = LockoutConfig()
    return LockoutConfig(
        enabled=env.boolean(env_key("lockout", "enabled"), defaults.enabled),
        message=env.string(env_key("lockout", "message"), defaults.message),
    )


def rcon_from_file(raw: Mapping[str, object]) -> RconConfig:
    """Build :class:`RconConfig` from the ``[rcon]`` table."""
    defaults = RconConfig()
    return RconConfig(
        enabled=_expect_bool(raw.get("enabled"), "rcon.enabled", default=defaults.enabled),
        port=_expect_u16(raw.get("port"), "rcon.port", default=defaults.port),
        password=_expect_str(raw.get("password"), "rcon.password", default=defaults.password),
        randomize_password=_expect_bool(
            raw.get("randomize_password"),
            "rcon.randomize_password",
            default=defaults.randomize_password,
        ),
        send_proxy_v2=_expect_bool(
            raw.get("send_proxy_v2"), "rcon.send_proxy_v2", default=defaults.send_proxy_v2
        ),
    )


def rcon_from_env(env: EnvReader) -> RconConfig:
    """Build :class:`RconConfig` from ``LAZYMC_RCON_*`` variables."""
    defaults = RconConfig()
    return RconConfig(
        enabled=env.boolean(env_key("rcon", "enabled"), defaults.enabled),
        port=env.u16(env_key("rcon", "port"), defaults.port),
        password=env.string(env_key("rcon", "password"), defaults.password),
        randomize_password=env.boolean(
            env_key("rcon", "randomize_password"), defaults.randomize_password
        ),
        send_proxy_v2=env.boolean(env_key("rcon", "send_proxy_v2"), defaults.send_proxy_v2),
    )


def advanced_from_file(raw: Mapping[str, object]) -> AdvancedConfig:
    """Build :class:`AdvancedConfig` from the ``[advanced]`` table."""
    return AdvancedConfig(
        rewrite_server_properties=_expect_bool(
            raw.get("rewrite_server_properties"),
            "advanced.rewrite_server_properties",
            default=AdvancedConfig().rewrite_server_properties,
        )
    )


def advanced_from_env(env: EnvReader) -> AdvancedConfig:
    """Build :class:`AdvancedConfig` from ``LAZYMC_ADVANCED_*`` variables."""
    return AdvancedConfig(
        rewrite_server_properties=env.boolean(
            env_key("advanced", "rewrite_server_properties"),
            AdvancedConfig().rewrite_server_properties,
        )
    )


def meta_from_file(raw: Mapping[str, object]) -> ConfigMeta:
    """Build :class:`ConfigMeta` from the ``[config]`` table."""
    version = raw.get("version")
    if version is None:
        return ConfigMeta()
    return ConfigMeta(version=_expect_str(version, "config.version", default=""))


def meta_from_env(env: EnvReader) -> ConfigMeta:
    """Build :class:`ConfigMeta` from ``LAZYMC_CONFIG_VERSION``."""
    return ConfigMeta(version=env.optional_string(env_key("config", "version")))


# ----------------------------------------------------------------------
# File value helpers
# ----------------------------------------------------------------------


def as_table(value: object | None, label: str) -> dict[str, object]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected {label} to be a table. Got {type(value).__name__}.")
    result: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ConfigError(f"Table {label} must use string keys. Got {key!r}.")
        result[key] = item
    return result


def _as_sequence(value: object, label: str) -> Sequence[object]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ConfigError(f"Expected {label} to be an array. Got {type(value).__name__}.")
    return value


def _expect_str(value: object | None, label: str, *, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    raise ConfigError(f"Expected {label} to be a string. Got {type(value).__name__}.")


def _expect_bool(value: object | None, label: str, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ConfigError(f"Expected {label} to be a boolean. Got {type(value).__name__}.")


def _expect_unsigned(value: object | None, label: str, *, default: int, maximum: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Expected {label} to be an integer. Got {type(value).__name__}.")
    if value < 0 or value > maximum:
        raise ConfigError(f"{label} must be between 0 and {maximum}. Got {value}.")
    return value


def _expect_u16(value: object | None, label: str, *, default: int) -> int:
    return _expect_unsigned(value, label, default=default, maximum=U16_MAX)


def _expect_u32(value: object | None, label: str, *, default: int) -> int:
    return _expect_unsigned(value, label, default=default, maximum=U32_MAX)


def _expect_address(
    value: object | None,
    label: str,
    default: SocketAddress,
    *,
    resolver: Resolver | None,
) -> SocketAddress:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(
            f"Expected {label} to be an address string. Got {type(value).__name__}."
        )
    try:
        return parse_socket_address(value, resolver=resolver)
    except ConfigError as exc:
        raise ConfigError(f"Invalid {label}: {exc}") from exc


__all__ = [
    "SERVER_COMMAND_ENV",
    "advanced_from_env",
    "as_table",
    "advanced_from_file",
    "join_forward_from_env",
    "join_forward_from_file",
    "join_from_env",
    "join_from_file",
    "join_hold_from_env",
    "join_hold_from_file",
    "join_kick_from_env",
    "join_kick_from_file",
    "join_lobby_from_env",
    "join_lobby_from_file",
    "lockout_from_env",
    "lockout_from_file",
    "meta_from_env",
    "meta_from_file",
    "motd_from_env",
    "motd_from_file",
    "public_from_env",
    "public_from_file",
    "rcon_from_env",
    "rcon_from_file",
    "server_command_from_env",
    "server_from_env",
    "server_from_file",
    "time_from_env",
    "time_from_file",
]
