"""Data models for nesbridge."""
from .input import InputEvent, InputSource, Phase
from .session import ServerSession, SessionState

__all__ = ["InputEvent", "InputSource", "Phase", "ServerSession", "SessionState"]
