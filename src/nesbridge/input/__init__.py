"""Input translation into the hosted content."""
from .adapters import GamepadAdapter, GamepadSnapshot, TouchButton, TouchOverlay, VirtualGamepadAdapter
from .bridge import AutoSprint, InputBridge
from .channel import CommandChannel, ScriptCommandChannel, key_event_script
from .keys import Key
from .keyset import ActiveKeySet

__all__ = [
    "ActiveKeySet",
    "AutoSprint",
    "CommandChannel",
    "GamepadAdapter",
    "GamepadSnapshot",
    "InputBridge",
    "Key",
    "ScriptCommandChannel",
    "TouchButton",
    "TouchOverlay",
    "VirtualGamepadAdapter",
    "key_event_script",
]
