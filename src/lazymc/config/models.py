"""Immutable configuration section types and their defaults."""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..proto import PROTO_DEFAULT_PROTOCOL, PROTO_DEFAULT_VERSION
from .addresses import SocketAddress, parse_socket_address

DEFAULT_PUBLIC_ADDRESS = "0.0.0.0:25565"
DEFAULT_SERVER_ADDRESS = "127.0.0.1:25566"
DEFAULT_FORWARD_ADDRESS = "127.0.0.1:25565"
DEFAULT_SERVER_DIRECTORY = "."

DEFAULT_MOTD_SLEEPING = "☠ Server is sleeping\n§2☻ Join to start it up"
DEFAULT_MOTD_STARTING = "§2☻ Server is starting...\n§7⌛ Please wait..."
DEFAULT_MOTD_STOPPING = "☠ Server going to sleep...\n⌛ Please wait..."

DEFAULT_KICK_STARTING = (
    "Server is starting... §c♥§r\n\nThis may take some time.\n\n"
    "Please try to reconnect in a minute."
)
DEFAULT_KICK_STOPPING = (
    "Server is going to sleep... §7☠§r\n\n"
    "Please try to reconnect in a minute to wake it again."
)
DEFAULT_LOBBY_MESSAGE = "§2Server is starting\n§7⌛ Please wait..."
DEFAULT_LOBBY_READY_SOUND = "block.note_block.chime"
DEFAULT_LOCKOUT_MESSAGE = "Server is closed §7☠§r\n\nPlease come back another time."

# RCON is the only way to stop the server gracefully on Windows.
DEFAULT_RCON_ENABLED = sys.platform == "win32"


class JoinMethod(str, Enum):
    """Ways to occupy a client while the server is not ready."""

    KICK = "kick"
    HOLD = "hold"
    FORWARD = "forward"
    LOBBY = "lobby"

    @classmethod
    def from_str(cls, value: str) -> JoinMethod:
        """Parse *value* case-insensitively."""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown join method: {value}") from None


DEFAULT_JOIN_METHODS: tuple[JoinMethod, ...] = (JoinMethod.HOLD, JoinMethod.KICK)


@dataclass(frozen=True)
class PublicConfig:
    """Public listen address and protocol hints sent before the server is known."""

    address: SocketAddress = parse_socket_address(DEFAULT_PUBLIC_ADDRESS)
    version: str = PROTO_DEFAULT_VERSION
    protocol: int = PROTO_DEFAULT_PROTOCOL

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "address": str(self.address),
            "version": self.version,
            "protocol": self.protocol,
        }


@dataclass(frozen=True)
class ServerConfig:
    """Backend server process settings.

    ``directory`` is relative to the configuration file when loaded from one;
    use :meth:`Config.server_directory` for the effective location.
    """

    command: str
    directory: Path = Path(DEFAULT_SERVER_DIRECTORY)
    address: SocketAddress = parse_socket_address(DEFAULT_SERVER_ADDRESS)
    freeze_process: bool = True
    wake_on_start: bool = False
    wake_on_crash: bool = False
    probe_on_start: bool = False
    forge: bool = False
    start_timeout: int = 300
    stop_timeout: int = 150
    wake_whitelist: bool = True
    block_banned_ips: bool = True
    drop_banned_ips: bool = False
    send_proxy_v2: bool = False

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "directory": str(self.directory),
            "command": self.command,
            "address": str(self.address),
            "freeze_process": self.freeze_process,
            "wake_on_start": self.wake_on_start,
            "wake_on_crash": self.wake_on_crash,
            "probe_on_start": self.probe_on_start,
            "forge": self.forge,
            "start_timeout": self.start_timeout,
            "stop_timeout": self.stop_timeout,
            "wake_whitelist": self.wake_whitelist,
            "block_banned_ips": self.block_banned_ips,
            "drop_banned_ips": self.drop_banned_ips,
            "send_proxy_v2": self.send_proxy_v2,
        }


@dataclass(frozen=True)
class TimeConfig:
    """Sleep timing, in seconds."""

    sleep_after: int = 60
    min_online_time: int = 60

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"sleep_after": self.sleep_after, "min_online_time": self.min_online_time}


@dataclass(frozen=True)
class MotdConfig:
    """Server browser MOTD per server state."""

    sleeping: str = DEFAULT_MOTD_SLEEPING
    starting: str = DEFAULT_MOTD_STARTING
    stopping: str = DEFAULT_MOTD_STOPPING
    from_server: bool = False

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "sleeping": self.sleeping,
            "starting": self.starting,
            "stopping": self.stopping,
            "from_server": self.from_server,
        }


@dataclass(frozen=True)
class JoinKickConfig:
    """Kick messages shown while the server is starting or stopping."""

    starting: str = DEFAULT_KICK_STARTING
    stopping: str = DEFAULT_KICK_STOPPING

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"starting": self.starting, "stopping": self.stopping}


@dataclass(frozen=True)
class JoinHoldConfig:
    """Hold a joining client for ``timeout`` seconds while the server starts."""

    timeout: int = 25

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"timeout": self.timeout}


@dataclass(frozen=True)
class JoinForwardConfig:
    """Forward joining clients to another address."""

    address: SocketAddress = parse_socket_address(DEFAULT_FORWARD_ADDRESS)
    send_proxy_v2: bool = False

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"address": str(self.address), "send_proxy_v2": self.send_proxy_v2}


@dataclass(frozen=True)
class JoinLobbyConfig:
    """Temporary lobby settings."""

    timeout: int = 10 * 60
    message: str = DEFAULT_LOBBY_MESSAGE
    ready_sound: str | None = DEFAULT_LOBBY_READY_SOUND

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "timeout": self.timeout,
            "message": self.message,
            "ready_sound": self.ready_sound,
        }


@dataclass(frozen=True)
class JoinConfig:
    """Join methods, tried in order, and their settings."""

    methods: tuple[JoinMethod, ...] = DEFAULT_JOIN_METHODS
    kick: JoinKickConfig = JoinKickConfig()
    hold: JoinHoldConfig = JoinHoldConfig()
    forward: JoinForwardConfig = JoinForwardConfig()
    lobby: JoinLobbyConfig = JoinLobbyConfig()

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "methods": [method.value for method in self.methods],
            "kick": self.kick.to_dict(),
            "hold": self.hold.to_dict(),
            "forward": self.forward.to_dict(),
            "lobby": self.lobby.to_dict(),
        }


@dataclass(frozen=True)
class LockoutConfig:
    """Refuse every connection with ``message`` when enabled."""

    enabled: bool = False
    message: str = DEFAULT_LOCKOUT_MESSAGE

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"enabled": self.enabled, "message": self.message}


@dataclass(frozen=True)
class RconConfig:
    """Remote console access used to put the server to sleep."""

    enabled: bool = DEFAULT_RCON_ENABLED
    port: int = 25575
    password: str = field(default="", repr=False)
    randomize_password: bool = True
    send_proxy_v2: bool = False

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {
            "enabled": self.enabled,
            "port": self.port,
            "password": self.password,
            "randomize_password": self.randomize_password,
            "send_proxy_v2": self.send_proxy_v2,
        }


@dataclass(frozen=True)
class AdvancedConfig:
    """Advanced toggles."""

    rewrite_server_properties: bool = True

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"rewrite_server_properties": self.rewrite_server_properties}


@dataclass(frozen=True)
class ConfigMeta:
    """The ``[config]`` section describing the file itself."""

    version: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a serialisable representation."""
        return {"version": self.version}


@dataclass(frozen=True)
class Config:
    """Resolved lazymc configuration.

    ``path`` is the canonical location of the file the configuration was
    loaded from, or ``None`` when it came from environment variables.
    """

    server: ServerConfig
    public: PublicConfig = PublicConfig()
    time: TimeConfig = TimeConfig()
    motd: MotdConfig = MotdConfig()
    join: JoinConfig = JoinConfig()
    lockout: LockoutConfig = LockoutConfig()
    rcon: RconConfig = RconConfig()
    advanced: AdvancedConfig = AdvancedConfig()
    config: ConfigMeta = ConfigMeta()
    path: Path | None = field(default=None, compare=False)

    def server_directory(self) -> Path:
        """Return the server directory, relative to the config file if known.

        This does not check whether the directory exists.
        """
        if self.path is None:
            return self.server.directory
        return self.path.parent / self.server.directory

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation of the config."""
        return {
            "path": str(self.path) if self.path is not None else None,
            "public": self.public.to_dict(),
            "server": self.server.to_dict(),
            "time": self.time.to_dict(),
            "motd": self.motd.to_dict(),
            "join": self.join.to_dict(),
            "lockout": self.lockout.to_dict(),
            "rcon": self.rcon.to_dict(),
            "advanced": self.advanced.to_dict(),
            "config": self.config.to_dict(),
        }


__all__ = [
    "AdvancedConfig",
    "Config",
    "ConfigMeta",
    "DEFAULT_FORWARD_ADDRESS",
    "DEFAULT_JOIN_METHODS",
    "DEFAULT_PUBLIC_ADDRESS",
    "DEFAULT_SERVER_ADDRESS",
    "JoinConfig",
    "JoinForwardConfig",
    "JoinHoldConfig",
    "JoinKickConfig",
    "JoinLobbyConfig",
    "JoinMethod",
    "LockoutConfig",
    "MotdConfig",
    "PublicConfig",
    "RconConfig",
    "ServerConfig",
    "TimeConfig",
]
