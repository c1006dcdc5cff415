"""Configuration schema version compatibility checks."""
from __future__ import annotations

import logging
import re
from enum import Enum

from packaging.version import Version

LOGGER = logging.getLogger(__name__)

# Configuration version users should be on, or a warning is shown.
CONFIG_VERSION = "0.2.8"

# Dotted release number, optionally followed by a `-` or `+` suffix such as
# `0.2.11-pterodactyl`. Only the release number is compared.
_VERSION_PATTERN = re.compile(r"v?(?P<release>[0-9]+(?:\.[0-9]+)*)(?:[-+][0-9A-Za-z.+-]*)?")


class VersionStatus(str, Enum):
    """Outcome of comparing a declared config version to the minimum."""

    OK = "ok"
    UNKNOWN = "unknown"
    OUTDATED = "outdated"
    INVALID = "invalid"

    @property
    def message(self) -> str | None:
        """Return the warning shown for this status, if any."""
        return _MESSAGES.get(self)


_MESSAGES = {
    VersionStatus.UNKNOWN: "Config version unknown, it may be outdated",
    VersionStatus.OUTDATED: "Config is for older lazymc version, you may need to update it",
    VersionStatus.INVALID: "Config version is invalid, you may need to update it",
}


def check_version(declared: str | None, minimum: str = CONFIG_VERSION) -> VersionStatus:
    """Classify *declared* against *minimum*.

    Versions compare numerically component by component, so ``0.2.10`` is
    newer than ``0.2.9``. Suffixes after the release number (``0.2.8-custom``)
    are ignored.
    """
    if declared is None:
        return VersionStatus.UNKNOWN
    match = _VERSION_PATTERN.fullmatch(declared.strip())
    if match is None:
        return VersionStatus.INVALID
    if Version(match.group("release")) < Version(minimum):
        return VersionStatus.OUTDATED
    return VersionStatus.OK


def warn_config_version(declared: str | None, minimum: str = CONFIG_VERSION) -> VersionStatus:
    """Log a warning when *declared* is missing, outdated or invalid."""
    status = check_version(declared, minimum)
    if status.message is not None:
        LOGGER.warning(status.message)
    return status


__all__ = ["CONFIG_VERSION", "VersionStatus", "check_version", "warn_config_version"]
