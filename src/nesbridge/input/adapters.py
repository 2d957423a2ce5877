"""Input sources feeding the bridge."""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set

from ..models.input import InputEvent, InputSource
from .bridge import InputBridge
from .keys import Key

logger = logging.getLogger(__name__)

DPAD_THRESHOLD = 0.5


@dataclass
class GamepadSnapshot:
    """Level state of a gamepad at one sample."""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    a: bool = False
    b: bool = False
    left_shoulder: bool = False
    right_shoulder: bool = False

    @classmethod
    def from_axes(cls, x: float, y: float, **buttons: bool) -> "GamepadSnapshot":
        """Build a snapshot from direction pad axes (x right, y up, both in [-1, 1]).

        Each axis yields at most one direction, so a diagonal is two
        independent events.
        """
        return cls(
            up=y >= DPAD_THRESHOLD,
            down=y <= -DPAD_THRESHOLD,
            left=x <= -DPAD_THRESHOLD,
            right=x >= DPAD_THRESHOLD,
            **buttons,
        )


DPAD_KEYS = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
}

BUTTON_KEYS = {
    "a": Key.A,
    "b": Key.B,
    "right_shoulder": Key.START,
    "left_shoulder": Key.SELECT,
}


class GamepadAdapter:
    """Edge-detects gamepad samples and forwards the transitions.

    Samples arrive on every value change, so a button that is still down
    shows up as "pressed" again and again; only changes are reported.
    """

    def __init__(self, bridge: InputBridge, source: InputSource = InputSource.PHYSICAL):
        self.bridge = bridge
        self.source = source
        self._levels: Dict[Key, bool] = {}
        bridge.register(self)

    def update(self, snapshot: GamepadSnapshot) -> List[InputEvent]:
        """Feed one sample; returns the events that were forwarded."""
        events = []
        for key, pressed in self._mapped_levels(snapshot).items():
            if self._levels.get(key, False) == pressed:
                continue
            self._levels[key] = pressed
            if pressed:
                event = self.bridge.press(key, self.source)
            else:
                event = self.bridge.release(key, self.source)
            if event is not None:
                events.append(event)
        return events

    def disconnect(self) -> List[InputEvent]:
        """Release everything this gamepad holds."""
        events = []
        for key, pressed in list(self._levels.items()):
            if pressed:
                event = self.bridge.release(key, self.source)
                if event is not None:
                    events.append(event)
        self._levels.clear()
        logger.debug(f"{self.source.value} gamepad disconnected")
        return events

    def reset(self) -> None:
        self._levels.clear()

    def _mapped_levels(self, snapshot: GamepadSnapshot) -> Dict[Key, bool]:
        levels = {key: getattr(snapshot, name) for name, key in DPAD_KEYS.items()}
        for name, key in BUTTON_KEYS.items():
            pressed = getattr(snapshot, name)
            # Auto sprint owns B while it is on; only a B held from before still reports its release
            if key is Key.B and self.bridge.auto_sprint:
                if pressed or not self._levels.get(key, False):
                    continue
            levels[key] = pressed
        return levels


class VirtualGamepadAdapter(GamepadAdapter):
    """The on-screen gamepad; same mapping as a physical one."""

    def __init__(self, bridge: InputBridge):
        super().__init__(bridge, source=InputSource.VIRTUAL)


@dataclass
class TouchButton:
    label: str
    key_code: int


DEFAULT_TOUCH_BUTTONS = (
    TouchButton("Up", Key.UP),
    TouchButton("Down", Key.DOWN),
    TouchButton("Left", Key.LEFT),
    TouchButton("Right", Key.RIGHT),
    TouchButton("A", Key.A),
    TouchButton("B", Key.B),
    TouchButton("Start", Key.START),
    TouchButton("Select", Key.SELECT),
    TouchButton("Reset", Key.RESET),
)


class TouchOverlay:
    """Draggable touch buttons laid over the content."""

    def __init__(self, bridge: InputBridge, buttons: Sequence[TouchButton] = DEFAULT_TOUCH_BUTTONS):
        self.bridge = bridge
        self.buttons = list(buttons)
        self._held: Set[int] = set()
        bridge.register(self)

    def button(self, label: str) -> Optional[TouchButton]:
        for button in self.buttons:
            if button.label == label:
                return button
        return None

    def touch_down(self, key_code: int) -> Optional[InputEvent]:
        # Drag updates repeat while the finger stays down
        if key_code <= 0 or key_code in self._held:
            return None
        self._held.add(key_code)
        return self.bridge.press(key_code, InputSource.TOUCH)

    def touch_up(self, key_code: int) -> Optional[InputEvent]:
        if key_code <= 0 or key_code not in self._held:
            return None
        self._held.discard(key_code)
        return self.bridge.release(key_code, InputSource.TOUCH)

    def reset(self) -> None:
        self._held.clear()
