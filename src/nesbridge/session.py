"""Session lifecycle for the local file server."""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .config import Config
from .errors import SessionError, StartupVerificationFailed
from .health import probe_status
from .models.session import ServerSession, SessionState
from .server.main import FileServer
from .server.state import LOOPBACK_ADDRESS, SERVER_PORT
from .workspace import Workspace

logger = logging.getLogger(__name__)

Probe = Callable[[str, float], Awaitable[Optional[int]]]


class SessionSupervisor:
    """Owns the file server and moves it through its lifecycle.

    States are ``not-running``, ``starting``, ``running`` and ``stopping``.
    Callers only issue intents (launch, restart, stop); every transition
    happens under a single lock, so two sessions never overlap. A start is
    reported as running only after a probe of ``/`` returned 200.
    """

    def __init__(self, workspace: Workspace, server: Optional[FileServer] = None,
                 host: str = LOOPBACK_ADDRESS, port: int = SERVER_PORT,
                 probe_timeout: float = 5.0, probe: Probe = probe_status):
        self.workspace = workspace
        self.server = server or FileServer(host)
        self.host = host
        self.port = port
        self.probe_timeout = probe_timeout
        self._probe = probe

        self._lock = asyncio.Lock()
        self._state = SessionState.NOT_RUNNING
        self._session: Optional[ServerSession] = None
        self._rom: Optional[str] = None
        self._restart_hooks: List[Callable[[], None]] = []

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "SessionSupervisor":
        workspace = Workspace(
            bundle_dir=config.paths.bundle_dir,
            library_dir=config.paths.library_dir,
            work_dir=config.paths.work_dir,
        )
        kwargs.setdefault("server", FileServer(config.server.host))
        return cls(
            workspace,
            host=config.server.host,
            port=config.server.port,
            probe_timeout=config.server.probe_timeout,
            **kwargs,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[ServerSession]:
        """The current session, or the last one if the server is down."""
        return self._session

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    def add_restart_hook(self, hook: Callable[[], None]):
        """Register a callback run whenever a new session starts."""
        self._restart_hooks.append(hook)

    async def launch(self, rom: str, force: bool = False) -> Optional[ServerSession]:
        """Ensure a running session for ``rom``.

        A different ROM than the running one always goes through a full
        stop and start; files are never swapped under a live server.

        Returns:
            The running session, or None if the request was rejected because
            a transition is already in progress.

        Raises:
            SessionError: The start failed; the state is back to not-running
        """
        if self._reject("launch", force):
            return None

        async with self._lock:
            if self.is_running and self._rom == rom and not force:
                logger.debug(f"Session for {rom} already running")
                return self._session

            await self._stop_locked()
            return await self._start_locked(rom)

    async def restart(self, force: bool = False, clear_cache: bool = False) -> Optional[ServerSession]:
        """Stop and start the session for the current ROM as one transaction.

        Args:
            force: Proceed even if a transition is in progress (queued behind it)
            clear_cache: Wipe the work directory before repopulating it
        """
        if self._reject("restart", force):
            return None

        async with self._lock:
            if self._rom is None:
                logger.warning("Restart requested before any ROM was launched")
                return None

            logger.info(f"Restarting session for {self._rom}")
            await self._stop_locked()
            return await self._start_locked(self._rom, clear_cache=clear_cache)

    async def stop(self) -> None:
        """Stop the server if it is up."""
        async with self._lock:
            await self._stop_locked()

    def _reject(self, action: str, force: bool) -> bool:
        if force or self._state not in (SessionState.STARTING, SessionState.STOPPING):
            return False
        logger.warning(f"Ignoring {action} request while session is {self._state.value}")
        return True

    def _set_state(self, state: SessionState):
        if state is not self._state:
            logger.debug(f"Session state {self._state.value} -> {state.value}")
        self._state = state
        if self._session is not None:
            self._session.state = state

    def _run_restart_hooks(self):
        for hook in self._restart_hooks:
            try:
                hook()
            except Exception:
                logger.exception(f"Restart hook {hook!r} failed")

    async def _start_locked(self, rom: str, clear_cache: bool = False) -> ServerSession:
        self._rom = rom
        self._session = None
        self._set_state(SessionState.STARTING)
        self._run_restart_hooks()

        try:
            root_dir = await asyncio.to_thread(self.workspace.populate, rom, clear_cache)
        except OSError as e:
            self._set_state(SessionState.NOT_RUNNING)
            raise SessionError(f"Failed to prepare {self.workspace.work_dir}: {e}") from e
        except BaseException:
            self._set_state(SessionState.NOT_RUNNING)
            raise

        session = ServerSession(rom=rom, root_dir=root_dir, host=self.host, port=self.port,
                                state=SessionState.STARTING)
        try:
            await self.server.start(root_dir, self.port)
            status = await self._verify(session.base_url)
        except BaseException:
            # Whatever went wrong, the session must not stay in starting
            try:
                await self.server.stop()
            finally:
                self._set_state(SessionState.NOT_RUNNING)
            raise

        if status != 200:
            await self.server.stop()
            self._set_state(SessionState.NOT_RUNNING)
            raise StartupVerificationFailed(session.base_url, status)

        self._session = session
        self._set_state(SessionState.RUNNING)
        logger.info(f"Session running: {session.entry_url()}")
        return session

    async def _verify(self, url: str) -> Optional[int]:
        try:
            return await asyncio.wait_for(self._probe(url, self.probe_timeout), self.probe_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Startup probe of {url} timed out after {self.probe_timeout}s")
            return None

    async def _stop_locked(self):
        if self._state is SessionState.NOT_RUNNING and not self.server.is_running:
            return

        self._set_state(SessionState.STOPPING)
        try:
            await self.server.stop()
        finally:
            self._set_state(SessionState.NOT_RUNNING)
