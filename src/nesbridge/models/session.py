"""Server session model for nesbridge."""
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from ..utils import entry_url


class SessionState(str, Enum):
    """Lifecycle state of the local file server."""

    NOT_RUNNING = "not-running"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class ServerSession(BaseModel):
    """One instance of the file server serving one ROM."""

    rom: str = Field(..., description="ROM file name being served")
    root_dir: Path = Field(..., description="Directory the server is rooted at")
    host: str = Field("127.0.0.1", description="Loopback address")
    port: int = Field(..., description="Bound port")
    state: SessionState = Field(SessionState.NOT_RUNNING, description="Lifecycle state")

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def entry_url(self, cache_bust: bool = False) -> str:
        """URL the hosted content loads to run this session's ROM."""
        return entry_url(self.host, self.port, self.rom, cache_bust=cache_bust)
