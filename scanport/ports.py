from __future__ import annotations

from .errors import InvalidPort

MAX_PORT = 65535


def parse_port(spec: str) -> int:
    """
    Parses a single destination port: decimal digits only, 0-65535.
    """
    if not spec.isascii() or not spec.isdigit():
        raise InvalidPort(f"Invalid integer '{spec}'")
    port = int(spec)
    if port > MAX_PORT:
        raise InvalidPort(f"Invalid integer '{spec}'")
    return port
