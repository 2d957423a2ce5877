"""FastAPI app that serves the emulator bundle and ROM to loopback clients."""
import logging
import mimetypes
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse, Response

from ..errors import ForbiddenSource
from ..utils import resolve_within
from .state import ENTRY_DOCUMENT, LOOPBACK_ADDRESS, NO_CACHE_HEADERS, REJECTION_MESSAGE

logger = logging.getLogger(__name__)

mimetypes.add_type("application/wasm", ".wasm")
mimetypes.add_type("text/javascript", ".js")
mimetypes.add_type("application/octet-stream", ".nes")


def create_app(root_dir: Path, allowed_address: str = LOOPBACK_ADDRESS) -> FastAPI:
    """Build the file server app rooted at ``root_dir``.

    Every request passes the access check before routing. Only a peer whose
    address equals ``allowed_address`` exactly gets through.
    """
    root_dir = Path(root_dir)
    app = FastAPI(title="nesbridge file server", docs_url=None, redoc_url=None, openapi_url=None)

    @app.middleware("http")
    async def loopback_only(request: Request, call_next):
        address = request.client.host if request.client else None
        if address != allowed_address:
            logger.warning(str(ForbiddenSource(address)))
            # Bare text/plain, no charset parameter
            return Response(REJECTION_MESSAGE, status_code=403,
                            headers={"Content-Type": "text/plain", "Connection": "close"})
        return await call_next(request)

    def entry_document() -> Response:
        index_path = root_dir / ENTRY_DOCUMENT
        try:
            html = index_path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read entry document {index_path}: {e}")
            return PlainTextResponse("Internal Server Error", status_code=500)

        return Response(
            content=html,
            media_type="text/html; charset=utf-8",
            headers=NO_CACHE_HEADERS,
        )

    @app.get("/")
    async def root():
        """Entry document, never cached."""
        return entry_document()

    @app.get(f"/{ENTRY_DOCUMENT}")
    async def index():
        return entry_document()

    @app.get("/{path:path}")
    async def share_file(path: str):
        """Stream a file from the root directory."""
        target = resolve_within(root_dir, path)
        if target is None or not target.is_file():
            return PlainTextResponse("Not Found", status_code=404)

        try:
            # FileResponse opens lazily while streaming, so check readability here
            with open(target, "rb"):
                pass
        except OSError as e:
            logger.error(f"Failed to read {target}: {e}")
            return PlainTextResponse("Internal Server Error", status_code=500)

        media_type, _ = mimetypes.guess_type(target.name)
        return FileResponse(target, media_type=media_type or "application/octet-stream")

    return app
