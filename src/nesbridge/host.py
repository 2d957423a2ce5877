"""Wires the session, input bridge and recovery together for the UI."""
import asyncio
import logging
from typing import Callable, Optional

from .config import Config, get_config
from .content import HostedContent
from .errors import RecoveryExhausted, SessionError
from .input import GamepadAdapter, InputBridge, ScriptCommandChannel, TouchOverlay, VirtualGamepadAdapter
from .recovery import RecoveryMonitor
from .session import SessionSupervisor

logger = logging.getLogger(__name__)


def _current_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class EmulatorHost:
    """UI-facing entry point: launch a ROM, force a reload, quit.

    Session failures are logged and reported as ``False``; the only error a
    user ever sees is ``RecoveryExhausted``, delivered to ``on_failure``.
    """

    def __init__(self, content: HostedContent, config: Optional[Config] = None,
                 supervisor: Optional[SessionSupervisor] = None,
                 on_failure: Optional[Callable[[RecoveryExhausted], None]] = None,
                 haptics: Optional[Callable[[], None]] = None):
        self.config = config or get_config()
        self.content = content
        self.supervisor = supervisor or SessionSupervisor.from_config(self.config)
        self.on_failure = on_failure

        self.channel = ScriptCommandChannel(content, loop=_current_loop())
        self.bridge = InputBridge(
            self.channel,
            haptics=haptics,
            haptics_enabled=self.config.input.haptics,
            sprint_interval=self.config.input.sprint_interval,
        )
        self.gamepad = GamepadAdapter(self.bridge)
        self.virtual_gamepad = VirtualGamepadAdapter(self.bridge)
        self.touch = TouchOverlay(self.bridge)

        # Phantom held keys must not survive into a new session
        self.supervisor.add_restart_hook(self.bridge.reset)

        recovery = self.config.recovery
        self.monitor = RecoveryMonitor(
            reload=self._forced_reload,
            probe=self.content_alive,
            on_exhausted=self._report_failure,
            delay=recovery.delay,
            timeout=recovery.probe_timeout,
            max_attempts=recovery.max_attempts,
        )

    async def launch(self, rom: str) -> bool:
        """Start (or switch to) a session for ``rom`` and load it in the content."""
        # Input callbacks from other threads are delivered on this loop
        self.channel.attach(self.content, loop=asyncio.get_running_loop())

        try:
            session = await self.supervisor.launch(rom)
        except SessionError as e:
            logger.error(f"Failed to launch {rom}: {e}")
            return False

        if session is None:
            return False

        try:
            await self.content.load(session.entry_url())
            logger.info(f"Loaded game: {rom}")
        except Exception as e:
            # Recovery will notice the blank page and reload
            logger.error(f"Content failed to load {rom}: {e}")

        if self.config.input.auto_sprint and not self.bridge.auto_sprint:
            self.bridge.set_auto_sprint(True)

        self.monitor.reset()
        self.monitor.watch()
        return True

    async def force_reload(self) -> None:
        """The user's explicit "Force Reload" action."""
        await self.monitor.force_reload()

    def set_auto_sprint(self, enabled: bool) -> None:
        """Toggle auto sprint; safe to call from any thread."""
        loop = self.channel.loop
        if loop is not None and _current_loop() is not loop:
            loop.call_soon_threadsafe(self.bridge.set_auto_sprint, enabled)
            return
        self.bridge.set_auto_sprint(enabled)

    async def quit(self) -> None:
        """Tear everything down, e.g. on app termination."""
        await self.monitor.cancel()
        self.bridge.close()
        await self.supervisor.stop()
        logger.info("Session closed")

    async def content_alive(self) -> bool:
        """Liveness: the content rendered a non-trivial amount of markup."""
        size = await self.content.rendered_size()
        logger.debug(f"Rendered content size: {size}")
        return size >= self.config.recovery.min_content_size

    async def _forced_reload(self) -> None:
        try:
            session = await self.supervisor.restart(force=True, clear_cache=True)
        except SessionError as e:
            logger.error(f"Forced reload failed: {e}")
            return

        if session is None:
            return

        await self.content.load(session.entry_url(cache_bust=True))
        logger.info(f"Reloaded content for {session.rom}")

    def _report_failure(self, error: RecoveryExhausted):
        if self.on_failure is None:
            logger.error(f"No failure handler registered: {error}")
            return
        self.on_failure(error)
