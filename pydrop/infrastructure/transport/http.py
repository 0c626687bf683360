"""
aiohttp-backed HTTP transport.

The transport owns one ClientSession, created lazily on first use or by
start(), and closed by stop().
"""

import asyncio
import time
from typing import Any, Dict, Optional, Union

import aiohttp
from loguru import logger

from ...core.exceptions import TransportError
from ...core.interfaces.transport import IHttpTransport, HttpResponse


class AiohttpTransport(IHttpTransport):
    """HTTP transport built on aiohttp.ClientSession."""

    def __init__(
        self,
        timeout: float = 300.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the transport.

        Args:
            timeout: Total per-request timeout in seconds
            session: Externally managed session (not closed by stop)
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._requests = 0
        self._failures = 0
        self._last_error: Optional[str] = None
        self._started_at: Optional[float] = None

    async def start(self) -> None:
        """Create the underlying client session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        if self._started_at is None:
            self._started_at = time.time()
        logger.debug("HTTP transport started")

    async def stop(self) -> None:
        """Close the client session if this transport created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP transport stopped")
        self._session = None
        self._started_at = None

    async def check_health(self) -> Dict[str, Any]:
        """Report transport health."""
        running = self._session is not None and not self._session.closed
        return {
            'healthy': running,
            'status': 'running' if running else 'stopped',
            'details': {
                'requests': self._requests,
                'failures': self._failures,
                'last_error': self._last_error,
                'uptime': time.time() - self._started_at if self._started_at else 0.0
            }
        }

    async def post(
        self,
        url: str,
        headers: Dict[str, str],
        data: Union[bytes, str, None] = None
    ) -> HttpResponse:
        """Send a POST request and read the whole response body."""
        if self._session is None or self._session.closed:
            await self.start()
        assert self._session is not None

        self._requests += 1
        try:
            async with self._session.post(url, headers=headers, data=data) as response:
                body = await response.read()
                return HttpResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._failures += 1
            self._last_error = str(e) or type(e).__name__
            logger.error(f"POST {url} failed: {self._last_error}")
            raise TransportError(f"Request to {url} failed: {self._last_error}") from e

    async def __aenter__(self) -> 'AiohttpTransport':
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
