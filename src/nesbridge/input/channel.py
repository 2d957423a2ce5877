"""One-way command channel into the hosted content."""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Set

from ..content import HostedContent
from ..models.input import Phase
from .keys import KEY_EVENT_PROPERTIES, lookup

logger = logging.getLogger(__name__)

KEY_EVENT_SCRIPT = """\
(function() {{
    var event = new KeyboardEvent('{event_type}', {{
        bubbles: true,
        cancelable: true,
        code: '{code}',
        key: '{key}',
        keyCode: {key_code},
        which: {key_code}
    }});
    document.dispatchEvent(event);
}})();"""


def key_event_script(key_code: int, phase: Phase) -> str:
    """Build the script that dispatches a synthetic keyboard event."""
    key = lookup(key_code)
    code, key_value = KEY_EVENT_PROPERTIES.get(key, ("", "")) if key is not None else ("", "")
    return KEY_EVENT_SCRIPT.format(
        event_type=phase.dom_event,
        code=code,
        key=key_value,
        key_code=int(key_code),
    )


class CommandChannel(ABC):
    """Fire-and-forget delivery of key transitions."""

    @abstractmethod
    def send_key(self, key_code: int, phase: Phase) -> None:
        """Deliver one transition. Must not block and must not raise."""


class ScriptCommandChannel(CommandChannel):
    """Delivers key transitions by evaluating a script in the hosted content."""

    def __init__(self, content: Optional[HostedContent] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        """Initialize channel.

        Args:
            content: Page to deliver into; may be attached later
            loop: Loop to schedule on when called from another thread
        """
        self.content = content
        self.loop = loop
        self._pending: Set[asyncio.Future] = set()

    def attach(self, content: Optional[HostedContent],
               loop: Optional[asyncio.AbstractEventLoop] = None):
        self.content = content
        if loop is not None:
            self.loop = loop

    def send_key(self, key_code: int, phase: Phase) -> None:
        if self.content is None:
            logger.error(f"Content not ready, dropping {phase.value} for {key_code}")
            return

        script = key_event_script(key_code, phase)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        try:
            if running is not None:
                future = running.create_task(self.content.evaluate(script))
                self._pending.add(future)
                future.add_done_callback(self._on_delivered)
            elif self.loop is not None:
                future = asyncio.run_coroutine_threadsafe(self.content.evaluate(script), self.loop)
                future.add_done_callback(self._on_delivered)
            else:
                logger.error(f"No event loop to deliver {phase.value} for {key_code}")
        except Exception as e:
            logger.error(f"Failed to deliver {phase.value} for {key_code}: {e}")

    def _on_delivered(self, future):
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning(f"Key event delivery failed: {exc}")
