"""Hosted content adapter interface."""
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

RENDERED_SIZE_SCRIPT = "document.body ? document.body.innerHTML.length : 0"


class HostedContent(ABC):
    """The embedded surface running the emulator bundle.

    Concrete embeddings (a platform web view, a headless browser) implement
    ``load`` and ``evaluate``; nothing else in nesbridge talks to the page.
    """

    @abstractmethod
    async def load(self, url: str) -> None:
        """Navigate to ``url``, replacing whatever page is loaded."""

    @abstractmethod
    async def evaluate(self, script: str) -> Any:
        """Run ``script`` in the page and return its result."""

    async def rendered_size(self) -> int:
        """Size of the rendered document body, used as a liveness signal."""
        result = await self.evaluate(RENDERED_SIZE_SCRIPT)
        try:
            return int(result)
        except (TypeError, ValueError):
            logger.debug(f"Unexpected rendered size result: {result!r}")
            return 0
