"""White-screen detection and automatic recovery."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .errors import RecoveryExhausted

logger = logging.getLogger(__name__)


class RecoveryMonitor:
    """Probes the hosted content after each reload and reloads again on failure.

    A cycle waits ``delay`` seconds, then runs the liveness probe with a
    ``timeout``. A failed probe counts one attempt and triggers a forced
    reload, until ``max_attempts`` consecutive failures have been seen. At
    that point the counter is reset, ``on_exhausted`` is called, and no more
    automatic recovery happens until ``force_reload`` is called.
    """

    def __init__(self, reload: Callable[[], Awaitable[None]], probe: Callable[[], Awaitable[bool]],
                 on_exhausted: Optional[Callable[[RecoveryExhausted], None]] = None,
                 delay: float = 5.0, timeout: float = 5.0, max_attempts: int = 3):
        """Initialize monitor.

        Args:
            reload: Forced reload of the whole session (server and content)
            probe: Liveness check; True means the content is alive
            on_exhausted: Called once the retry budget is spent
            delay: Seconds to wait after a reload before probing
            timeout: Seconds before a probe counts as failed
            max_attempts: Consecutive failures before giving up
        """
        self._reload = reload
        self._probe = probe
        self.on_exhausted = on_exhausted
        self.delay = delay
        self.timeout = timeout
        self.max_attempts = max_attempts

        self._attempts = 0
        self._halted = False
        self._task: Optional[asyncio.Task] = None

    @property
    def attempts(self) -> int:
        """Consecutive failed probes since the last success."""
        return self._attempts

    @property
    def halted(self) -> bool:
        """True after the retry budget ran out, until a manual reload."""
        return self._halted

    @property
    def cycle(self) -> Optional[asyncio.Task]:
        """The pending probe cycle, if any."""
        return self._task

    def watch(self) -> Optional[asyncio.Task]:
        """Schedule a probe cycle, replacing any pending one."""
        if self._halted:
            logger.info("Automatic recovery is halted until a manual reload")
            return None
        self._cancel_pending()
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def reset(self) -> None:
        """Drop any pending cycle and start counting from zero."""
        self._cancel_pending()
        self._attempts = 0
        self._halted = False

    async def force_reload(self) -> Optional[asyncio.Task]:
        """Manual reload: supersede any cycle, reset the counter, reload and watch."""
        logger.info("Force reload requested")
        self.reset()
        await self._reload_session()
        return self.watch()

    async def cancel(self) -> None:
        """Stop the pending cycle and wait for it to wind down."""
        task = self._task
        self._cancel_pending()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _cancel_pending(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self):
        while True:
            await asyncio.sleep(self.delay)

            if await self._check():
                if self._attempts:
                    logger.info(f"Content recovered after {self._attempts} failed probe(s)")
                self._attempts = 0
                return

            self._attempts += 1
            logger.warning(f"Liveness probe failed ({self._attempts}/{self.max_attempts})")

            if self._attempts >= self.max_attempts:
                self._give_up()
                return

            # A superseding reload waits for this one rather than interrupting it
            await asyncio.shield(self._reload_session())

    async def _check(self) -> bool:
        try:
            return bool(await asyncio.wait_for(self._probe(), self.timeout))
        except asyncio.TimeoutError:
            logger.warning(f"Liveness probe timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"Liveness probe errored: {e}")
        return False

    async def _reload_session(self):
        try:
            await self._reload()
        except Exception:
            logger.exception("Forced reload failed")

    def _give_up(self):
        error = RecoveryExhausted(self._attempts)
        self._attempts = 0
        self._halted = True
        logger.error(str(error))
        if self.on_exhausted is not None:
            try:
                self.on_exhausted(error)
            except Exception:
                logger.exception("Failure notice handler raised")
