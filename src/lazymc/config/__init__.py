"""Configuration resolution for lazymc.

The configuration comes from exactly one source: ``lazymc.toml`` (or another
file path) when it exists, otherwise ``LAZYMC_`` environment variables. See
:func:`load`.
"""

from __future__ import annotations

from ..errors import ConfigError, ErrorHints
from .addresses import AddressResolutionError, SocketAddress, parse_socket_address
from .env import EnvReader, decode_escapes
from .loader import DEFAULT_CONFIG_FILE, load, load_from_env, load_from_file, load_or_exit
from .models import (
    AdvancedConfig,
    Config,
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
from .version import CONFIG_VERSION, VersionStatus, check_version, warn_config_version

__all__ = [
    "AddressResolutionError",
    "AdvancedConfig",
    "CONFIG_VERSION",
    "Config",
    "ConfigError",
    "ConfigMeta",
    "DEFAULT_CONFIG_FILE",
    "EnvReader",
    "ErrorHints",
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
    "SocketAddress",
    "TimeConfig",
    "VersionStatus",
    "check_version",
    "decode_escapes",
    "load",
    "load_from_env",
    "load_from_file",
    "load_or_exit",
    "parse_socket_address",
    "warn_config_version",
]
