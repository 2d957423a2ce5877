"""Edge-triggered input forwarding."""
import asyncio
import logging
from typing import Callable, List, Optional, Protocol

from ..models.input import InputEvent, InputSource, Phase
from .channel import CommandChannel
from .keys import HORIZONTAL_KEYS, SPRINT_KEY, Key, lookup
from .keyset import ActiveKeySet

logger = logging.getLogger(__name__)


class Resettable(Protocol):
    def reset(self) -> None: ...


class InputBridge:
    """Turns raw press/release notifications into a de-duplicated event stream.

    All adapters share one ActiveKeySet: a press for a held key and a release
    for a key that is not held are dropped, whichever source they come from.
    Accepted events go out through the command channel without waiting.
    """

    def __init__(self, channel: CommandChannel, keys: Optional[ActiveKeySet] = None,
                 haptics: Optional[Callable[[], None]] = None, haptics_enabled: bool = True,
                 sprint_interval: float = 0.1):
        self.channel = channel
        self.keys = keys or ActiveKeySet()
        self.haptics = haptics
        self.haptics_enabled = haptics_enabled
        self.sprint = AutoSprint(self, interval=sprint_interval)
        self._adapters: List[Resettable] = []

    def register(self, adapter: Resettable) -> Resettable:
        """Track an adapter so its edge state is reset with the key set."""
        self._adapters.append(adapter)
        return adapter

    def press(self, key_code: int, source: InputSource) -> Optional[InputEvent]:
        """Handle a "became pressed" notification."""
        return self._transition(key_code, Phase.PRESS, source)

    def release(self, key_code: int, source: InputSource) -> Optional[InputEvent]:
        """Handle a "became released" notification."""
        return self._transition(key_code, Phase.RELEASE, source)

    def reset(self) -> None:
        """Forget every held key, e.g. because the session restarted."""
        self.keys.clear()
        self.sprint.reset()
        for adapter in self._adapters:
            adapter.reset()
        logger.debug("Input state reset")

    @property
    def auto_sprint(self) -> bool:
        return self.sprint.enabled

    def set_auto_sprint(self, enabled: bool) -> None:
        if enabled:
            self.sprint.enable()
        else:
            self.sprint.disable()

    def horizontal_held(self) -> bool:
        held = self.keys.snapshot()
        return any(key in held for key in HORIZONTAL_KEYS)

    def close(self) -> None:
        """Stop background activity."""
        self.sprint.disable()

    def _transition(self, key_code: int, phase: Phase, source: InputSource) -> Optional[InputEvent]:
        key = lookup(key_code)
        if key is None:
            logger.debug(f"No mapping for key code {key_code}, dropped")
            return None

        if phase is Phase.PRESS:
            accepted = self.keys.try_press(key)
        else:
            accepted = self.keys.try_release(key)
        if not accepted:
            return None

        event = InputEvent(key_code=int(key), phase=phase, source=source)
        self.channel.send_key(event.key_code, event.phase)
        self._pulse()

        if key in HORIZONTAL_KEYS:
            self.sprint.sync()
        return event

    def _pulse(self):
        if not self.haptics_enabled or self.haptics is None:
            return
        try:
            self.haptics()
        except Exception as e:
            logger.debug(f"Haptic feedback failed: {e}")


class AutoSprint:
    """Holds the sprint key while a horizontal direction is held.

    A ticker re-asserts the desired state every ``interval`` seconds; the
    shared key set keeps the re-assertions from producing duplicate events.
    The sprint key is only released if auto-sprint pressed it.
    """

    def __init__(self, bridge: InputBridge, interval: float = 0.1, key: Key = SPRINT_KEY):
        self.bridge = bridge
        self.interval = interval
        self.key = key
        self._enabled = False
        self._holding = False
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Auto sprint enabled")
        self.sync()

    def disable(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        was_enabled = self._enabled
        self._enabled = False
        self._let_go()
        if was_enabled:
            logger.debug("Auto sprint disabled")

    def reset(self) -> None:
        self._holding = False

    def sync(self) -> None:
        if not self._enabled:
            return
        if self.bridge.horizontal_held():
            if self.bridge.press(self.key, InputSource.VIRTUAL) is not None:
                self._holding = True
        else:
            self._let_go()

    def _let_go(self):
        if self._holding:
            self._holding = False
            self.bridge.release(self.key, InputSource.VIRTUAL)

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            self.sync()
