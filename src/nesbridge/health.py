"""Health probes for the local server."""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


async def probe_status(url: str, timeout: float = 5.0) -> Optional[int]:
    """GET ``url`` and return the status code, or None if nothing answered in time."""
    # Loopback requests must not go through a proxy from the environment
    transport = httpx.AsyncHTTPTransport()
    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout, trust_env=False) as client:
            response = await client.get(url, headers={"Cache-Control": "no-cache"})
    except httpx.HTTPError as e:
        logger.debug(f"Probe of {url} failed: {e!r}")
        return None

    logger.debug(f"Probe of {url} returned {response.status_code}")
    return response.status_code


async def probe_server(url: str, timeout: float = 5.0) -> bool:
    """Check that the server root answers 200 within ``timeout``."""
    return await probe_status(url, timeout) == 200
