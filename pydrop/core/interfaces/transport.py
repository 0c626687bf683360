"""
HTTP transport interface.

The API client only ever issues POST requests, so the transport contract
is a single coroutine returning a fully-read response.
"""

import json
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .lifecycle import IStartable, IStoppable, IHealthCheckable


@dataclass
class HttpResponse:
    """A fully-read HTTP response."""
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON."""
        if not self.body:
            return None
        return json.loads(self.body)

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class IHttpTransport(IStartable, IStoppable, IHealthCheckable):
    """Interface for the HTTP transport used by the API client."""

    @abstractmethod
    async def post(
        self,
        url: str,
        headers: Dict[str, str],
        data: Union[bytes, str, None] = None
    ) -> HttpResponse:
        """
        Send a POST request.

        Args:
            url: Absolute endpoint URL
            headers: Request headers
            data: Request body

        Returns:
            The response, whatever its status

        Raises:
            TransportError: If no response was received
        """
        pass
