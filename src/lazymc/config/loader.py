"""Load the lazymc configuration from a file or from the environment.

Exactly one source is used per load. When the configuration file exists it is
the only source; environment variables are ignored. Otherwise every section is
read from ``LAZYMC_`` variables::

    export LAZYMC_SERVER_COMMAND="java -jar server.jar"
    export LAZYMC_JOIN_METHODS=hold,kick
    export LAZYMC_MOTD_SLEEPING="Sleeping\\nJoin to wake"

TOML is the native file format. Files ending in ``.yml``/``.yaml`` are parsed
with PyYAML and must use the same section layout.
"""
from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import NoReturn

import yaml

from ..errors import ConfigError, ErrorHints, quit_error
from . import sections
from .addresses import Resolver
from .env import EnvReader
from .models import Config
from .version import warn_config_version

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "lazymc.toml"
YAML_SUFFIXES = frozenset({".yml", ".yaml"})

FILE_ERROR_HINTS = ErrorHints(config=True, config_test=True)


def load(
    config_file: str | os.PathLike[str] = DEFAULT_CONFIG_FILE,
    *,
    env: Mapping[str, str] | None = None,
    resolver: Resolver | None = None,
) -> Config:
    """Load configuration from *config_file*, or the environment if it is absent.

    Raises :class:`ConfigError` on fatal problems; the error carries hints for
    the user.
    """
    path = Path(config_file)
    try:
        path = path.resolve(strict=True)
    except (OSError, RuntimeError):
        # Missing paths and symlink loops are treated as "no file".
        pass

    if path.is_file():
        return load_from_file(path, resolver=resolver)

    LOGGER.info(
        "Config file not found at %s, using environment variables and defaults", path
    )
    return load_from_env(env, resolver=resolver)


def load_or_exit(
    config_file: str | os.PathLike[str] = DEFAULT_CONFIG_FILE,
    *,
    env: Mapping[str, str] | None = None,
    resolver: Resolver | None = None,
) -> Config:
    """Like :func:`load` but report fatal errors and exit the process."""
    try:
        return load(config_file, env=env, resolver=resolver)
    except ConfigError as exc:
        _fatal(exc)


def load_from_file(path: Path, *, resolver: Resolver | None = None) -> Config:
    """Parse the configuration file at *path*.

    Schema version problems are logged as warnings; everything else that goes
    wrong is a :class:`ConfigError`.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"Failed to load config: cannot read {path}", hints=FILE_ERROR_HINTS
        ) from exc

    try:
        raw = parse_document(text, path)
        config = build_from_mapping(raw, resolver=resolver, path=path)
    except ConfigError as exc:
        raise ConfigError(f"Failed to load config: {exc}", hints=FILE_ERROR_HINTS) from exc

    warn_config_version(config.config.version)
    return config


def load_from_env(
    env: Mapping[str, str] | None = None,
    *,
    resolver: Resolver | None = None,
) -> Config:
    """Build the configuration from ``LAZYMC_`` environment variables.

    Only ``LAZYMC_SERVER_COMMAND`` is required. Malformed values fall back to
    their defaults silently.
    """
    reader = EnvReader(os.environ if env is None else env, resolver=resolver)
    command = sections.server_command_from_env(reader)

    return Config(
        public=sections.public_from_env(reader),
        server=sections.server_from_env(reader, command),
        time=sections.time_from_env(reader),
        motd=sections.motd_from_env(reader),
        join=sections.join_from_env(reader),
        lockout=sections.lockout_from_env(reader),
        rcon=sections.rcon_from_env(reader),
        advanced=sections.advanced_from_env(reader),
        config=sections.meta_from_env(reader),
        path=None,
    )


def parse_document(text: str, path: Path) -> dict[str, object]:
    """Decode *text* as TOML, or YAML for ``.yml``/``.yaml`` paths."""
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid syntax in {path}: {exc}") from exc
    else:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid syntax in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")
    return sections.as_table(data, f"file:{path}")


def build_from_mapping(
    raw: Mapping[str, object],
    *,
    resolver: Resolver | None = None,
    path: Path | None = None,
) -> Config:
    """Build a :class:`Config` from decoded file contents.

    Unknown sections and keys are ignored. ``[server]`` with a ``command`` is
    the only required part.
    """
    if raw.get("server") is None:
        raise ConfigError("Missing required section [server].")

    def section(name: str) -> dict[str, object]:
        return sections.as_table(raw.get(name), name)

    return Config(
        public=sections.public_from_file(section("public"), resolver=resolver),
        server=sections.server_from_file(section("server"), resolver=resolver),
        time=sections.time_from_file(section("time")),
        motd=sections.motd_from_file(section("motd")),
        join=sections.join_from_file(section("join"), resolver=resolver),
        lockout=sections.lockout_from_file(section("lockout")),
        rcon=sections.rcon_from_file(section("rcon")),
        advanced=sections.advanced_from_file(section("advanced")),
        config=sections.meta_from_file(section("config")),
        path=path,
    )


def _fatal(error: ConfigError) -> NoReturn:
    LOGGER.debug("Fatal configuration error", exc_info=error)
    quit_error(error)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "build_from_mapping",
    "load",
    "load_from_env",
    "load_from_file",
    "load_or_exit",
    "parse_document",
]
