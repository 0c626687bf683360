"""
Low-level Dropbox HTTP API client.

Shapes every request the remote API expects: bearer token, optional
path-root header, JSON bodies for RPC routes and the Dropbox-API-Arg
header for content routes. Non-success responses are turned into typed
RemoteApiError exceptions.
"""

import json
import time
from typing import Any, Dict, Optional, Tuple, Union

from loguru import logger

from ...core.exceptions import (
    AuthenticationError, DropboxError, PathNotFoundError, RemoteApiError
)
from ...core.interfaces.credentials import ICredentialProvider
from ...core.interfaces.transport import IHttpTransport, HttpResponse
from ..auth.credentials import PathRoot
from .base import ClientMetrics


DEFAULT_API_URL = "https://api.dropboxapi.com/2"
DEFAULT_CONTENT_URL = "https://content.dropboxapi.com/2"


def encode_api_arg(arg: Dict[str, Any]) -> str:
    """Serialise an argument for the Dropbox-API-Arg header.

    HTTP headers must be ASCII, so non-ASCII characters and DEL are escaped.
    """
    return json.dumps(arg, ensure_ascii=True).replace("\x7f", "\\u007f")


class DropboxApi:
    """Request shaping and response checking for the remote API."""

    def __init__(
        self,
        transport: IHttpTransport,
        credentials: ICredentialProvider,
        api_url: str = DEFAULT_API_URL,
        content_url: str = DEFAULT_CONTENT_URL,
        path_root: Optional[PathRoot] = None
    ):
        self._transport = transport
        self._credentials = credentials
        self._api_url = api_url.rstrip("/")
        self._content_url = content_url.rstrip("/")
        self._path_root = path_root
        self._metrics = ClientMetrics()

    @property
    def path_root(self) -> Optional[PathRoot]:
        return self._path_root

    @path_root.setter
    def path_root(self, value: Optional[PathRoot]) -> None:
        self._path_root = value

    def get_metrics(self) -> ClientMetrics:
        """Get client metrics."""
        return self._metrics

    async def rpc(self, route: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """
        Call an RPC-style route with a JSON body.

        Args:
            route: Route below the API base URL, e.g. 'files/get_metadata'
            args: JSON arguments, or None for routes without arguments

        Returns:
            Decoded JSON response
        """
        headers = await self._headers()
        body: Optional[str] = None
        if args is not None:
            headers["Content-Type"] = "application/json"
            body = json.dumps(args)

        response = await self._send(route, f"{self._api_url}/{route}", headers, body)
        return response.json()

    async def upload(self, route: str, arg: Dict[str, Any], data: bytes = b"") -> Any:
        """
        Call a content-upload route.

        Args:
            route: Route below the content base URL
            arg: Argument serialised into the Dropbox-API-Arg header
            data: Binary request body

        Returns:
            Decoded JSON response
        """
        headers = await self._headers()
        headers["Dropbox-API-Arg"] = encode_api_arg(arg)
        headers["Content-Type"] = "application/octet-stream"

        response = await self._send(route, f"{self._content_url}/{route}", headers, data)
        return response.json()

    async def download(self, route: str, arg: Dict[str, Any]) -> Tuple[Dict[str, Any], bytes]:
        """
        Call a content-download route.

        Returns:
            The metadata from the Dropbox-API-Result header and the body
        """
        headers = await self._headers()
        headers["Dropbox-API-Arg"] = encode_api_arg(arg)

        response = await self._send(route, f"{self._content_url}/{route}", headers, None)
        result_header = response.header("Dropbox-API-Result")
        metadata = json.loads(result_header) if result_header else {}
        return metadata, response.body

    async def _headers(self) -> Dict[str, str]:
        token = await self._credentials.get_token()
        headers = {"Authorization": f"Bearer {token}"}
        if self._path_root is not None:
            headers.update(self._path_root.headers())
        return headers

    async def _send(
        self,
        route: str,
        url: str,
        headers: Dict[str, str],
        data: Union[bytes, str, None]
    ) -> HttpResponse:
        start_time = time.time()
        size = len(data) if data else 0
        logger.debug(f"POST {route} ({size} bytes)")

        try:
            response = await self._transport.post(url, headers, data)
        except DropboxError as e:
            self._metrics.record_request(route, False, time.time() - start_time, size)
            self._metrics.record_error(str(e))
            raise

        success = response.ok
        self._metrics.record_request(route, success, time.time() - start_time, size)

        if not success:
            error = self._build_error(route, response)
            self._metrics.record_error(str(error))
            logger.warning(f"{route} rejected: {error}")
            raise error

        return response

    def _build_error(self, route: str, response: HttpResponse) -> RemoteApiError:
        """Translate a non-success response into a typed exception."""
        error_summary = ""
        error: Dict[str, Any] = {}
        body = response.text

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            error_summary = payload.get("error_summary", "")
            error = payload.get("error") or {}
            if not isinstance(error, dict):
                error = {"error": error}

        kwargs = dict(
            status=response.status,
            endpoint=route,
            error_summary=error_summary,
            error=error,
            body=body
        )

        if response.status == 401:
            return AuthenticationError(**kwargs)
        parts = error_summary.split("/")
        # lookup_failed/not_found/ names an upload session, not a path
        if response.status == 409 and "not_found" in parts and parts[0] != "lookup_failed":
            return PathNotFoundError(**kwargs)
        return RemoteApiError(**kwargs)
