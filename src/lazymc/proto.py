"""Protocol hints advertised to clients before the real server is known."""
from __future__ import annotations

# Minecraft version name and protocol number shown while the server sleeps.
PROTO_DEFAULT_VERSION = "1.20.3"
PROTO_DEFAULT_PROTOCOL = 765

__all__ = ["PROTO_DEFAULT_PROTOCOL", "PROTO_DEFAULT_VERSION"]
