"""Utility functions for nesbridge."""
import logging
import time
from pathlib import Path
from typing import Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


def is_safe_rom_name(rom: str) -> bool:
    """
    Check that a ROM identifier is a plain file name.

    ROM identifiers end up both in a filesystem path and in the entry URL's
    query string, so anything with a path component is refused.

    Args:
        rom: ROM identifier as chosen by the user (e.g. "mario.nes")

    Returns:
        True if the name can be used as-is

    Example:
        >>> is_safe_rom_name("mario.nes")
        True
        >>> is_safe_rom_name("../etc/passwd")
        False
    """
    if not rom or rom in (".", ".."):
        return False
    if "/" in rom or "\\" in rom or "\x00" in rom:
        return False
    return Path(rom).name == rom


def resolve_within(root: Path, relative: str) -> Optional[Path]:
    """
    Resolve a request path against a root directory.

    Args:
        root: Directory that must contain the result
        relative: URL path with the leading slash removed

    Returns:
        The resolved path, or None if it escapes the root
    """
    root = root.resolve()
    candidate = (root / relative).resolve()
    if candidate != root and root not in candidate.parents:
        logger.debug(f"Path {relative!r} escapes root {root}")
        return None
    return candidate


def entry_url(host: str, port: int, rom: str, cache_bust: bool = False) -> str:
    """
    Build the URL the hosted content loads for a ROM.

    Args:
        host: Loopback address the server is bound to
        port: Server port
        rom: ROM file name, passed as the ``rom`` query parameter
        cache_bust: Append a millisecond timestamp so nothing cached is reused

    Returns:
        URL such as ``http://127.0.0.1:8080/index.html?rom=mario.nes``
    """
    url = f"http://{host}:{port}/index.html?rom={quote(rom)}"
    if cache_bust:
        url += f"&t={int(time.time() * 1000)}"
    return url
