"""Loopback file server lifecycle."""
import asyncio
import logging
import os
import socket
from pathlib import Path
from typing import Optional

import uvicorn

from ..errors import BindError
from .app import create_app
from .state import LOOPBACK_ADDRESS

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None):
    """Configure logging for the application."""
    # Get log level from argument, environment or default to INFO
    log_level = (level or os.getenv('NESBRIDGE_LOG_LEVEL', 'INFO')).upper()

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),  # Console output
        ]
    )

    # Set specific loggers to appropriate levels
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)  # Reduce HTTP noise
    logging.getLogger('uvicorn.error').setLevel(logging.INFO)

    # Our application loggers
    logging.getLogger('nesbridge').setLevel(getattr(logging, log_level, logging.INFO))


class FileServer:
    """Serves one root directory over HTTP on the loopback interface."""

    def __init__(self, host: str = LOOPBACK_ADDRESS):
        self.host = host
        self.root_dir: Optional[Path] = None
        self.port: Optional[int] = None
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None
        self._sock: Optional[socket.socket] = None

    @property
    def is_running(self) -> bool:
        """Check if the accept loop is alive."""
        return self._task is not None and not self._task.done()

    def _bind(self, port: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Allows rebinding over TIME_WAIT after a restart; a live listener still conflicts
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, port))
            sock.listen(128)
        except OSError as e:
            sock.close()
            raise BindError(self.host, port, e.strerror or str(e)) from e
        sock.setblocking(False)
        return sock

    async def start(self, root_dir: Path, port: int) -> None:
        """Bind the listener and begin accepting connections.

        Args:
            root_dir: Directory to serve
            port: Port on the loopback address

        Raises:
            BindError: The port is in use or the root directory is missing
        """
        root_dir = Path(root_dir)
        if self.is_running:
            raise BindError(self.host, port, f"server already running on port {self.port}")
        if not root_dir.is_dir():
            raise BindError(self.host, port, f"root directory does not exist: {root_dir}")

        sock = self._bind(port)
        self._sock = sock

        config = uvicorn.Config(
            create_app(root_dir, allowed_address=self.host),
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[sock]))
        self._task.add_done_callback(self._on_serve_done)

        self.root_dir = root_dir
        self.port = port
        logger.info(f"Server started at http://{self.host}:{port} serving {root_dir}")

        # Let uvicorn attach to the socket; connections queue on the listener meanwhile
        await asyncio.sleep(0)

    async def stop(self) -> None:
        """Close the listener and drop in-flight connections. No-op if not running."""
        if self._server is None or self._task is None:
            return

        server, task = self._server, self._task
        server.should_exit = True
        server.force_exit = True

        try:
            await task
        except Exception as e:
            logger.warning(f"Server task ended with error: {e}")

        # A stop that lands before startup finished leaves the listener to us
        for listener in getattr(server, "servers", []):
            listener.close()
        if self._sock is not None:
            self._sock.close()

        # Abort whatever is still mid-response
        for connection in list(server.server_state.connections):
            transport = getattr(connection, "transport", None)
            if transport is not None:
                transport.close()

        logger.info(f"Server stopped (port {self.port})")
        self._server = None
        self._task = None
        self._sock = None
        self.root_dir = None
        self.port = None

    def _on_serve_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Server accept loop failed: {exc}")
