"""Key codes understood by the hosted emulator."""
from enum import IntEnum
from typing import Dict, Optional, Tuple


class Key(IntEnum):
    START = 32
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40
    A = 65
    B = 66
    RESET = 82
    SELECT = 83


# key_code -> (KeyboardEvent.code, KeyboardEvent.key)
KEY_EVENT_PROPERTIES: Dict[Key, Tuple[str, str]] = {
    Key.LEFT: ("ArrowLeft", "ArrowLeft"),
    Key.UP: ("ArrowUp", "ArrowUp"),
    Key.RIGHT: ("ArrowRight", "ArrowRight"),
    Key.DOWN: ("ArrowDown", "ArrowDown"),
    Key.START: ("Space", " "),
    Key.A: ("KeyA", "a"),
    Key.B: ("KeyB", "b"),
    Key.RESET: ("KeyR", "r"),
    Key.SELECT: ("KeyS", "s"),
}

HORIZONTAL_KEYS = frozenset({Key.LEFT, Key.RIGHT})

# Held on the player's behalf while running left/right
SPRINT_KEY = Key.B


def lookup(key_code: int) -> Optional[Key]:
    """Return the mapped key for a raw key code, or None if it has no mapping."""
    try:
        return Key(key_code)
    except ValueError:
        return None
