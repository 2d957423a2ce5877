"""Error types for nesbridge."""
from typing import Optional


class NesbridgeError(Exception):
    """Base class for all nesbridge errors."""


class SessionError(NesbridgeError):
    """A session lifecycle step failed."""


class BindError(SessionError):
    """The file server could not bind its listener."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Cannot bind {host}:{port}: {reason}")


class StartupVerificationFailed(SessionError):
    """The health probe after a start did not return success."""

    def __init__(self, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        detail = f"status {status_code}" if status_code is not None else "no response"
        super().__init__(f"Startup probe of {url} failed ({detail})")


class RomNotFound(SessionError):
    """The selected ROM is not present in the library."""

    def __init__(self, rom: str):
        self.rom = rom
        super().__init__(f"ROM not found: {rom}")


class ForbiddenSource(NesbridgeError):
    """A request arrived from a non-loopback peer."""

    def __init__(self, address: Optional[str]):
        self.address = address
        super().__init__(f"Rejected connection from: {address or 'Unknown Address'}")


class RecoveryExhausted(NesbridgeError):
    """Automatic recovery gave up after the retry budget was spent."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"The emulator failed to load after {attempts} attempts. "
            "Please restart the application."
        )
