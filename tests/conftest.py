"""
Shared fixtures and fakes for the pydrop test suite.

FakeDropboxTransport answers requests the way the remote API does for the
routes the client uses, keeping sessions and files in memory.
"""

import json
import posixpath
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from pydrop.core.interfaces.transport import HttpResponse, IHttpTransport
from pydrop.core.interfaces.upload import IChunkReader
from pydrop.infrastructure.auth.credentials import StaticTokenProvider
from pydrop.infrastructure.clients.dropbox import DropboxApi


def json_response(payload: Any, status: int = 200, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
    return HttpResponse(
        status=status,
        headers=headers or {"Content-Type": "application/json"},
        body=json.dumps(payload).encode("utf-8")
    )


def error_response(summary: str, error: Dict[str, Any], status: int = 409) -> HttpResponse:
    return json_response({"error_summary": summary, "error": error}, status=status)


class StubChunk:
    """Stands in for a chunk of the given size without allocating it."""

    def __init__(self, size: int):
        self.size = size

    def __len__(self) -> int:
        return self.size


class StubChunkReader(IChunkReader):
    """Chunk reader over a virtual file of total_size bytes."""

    def __init__(self, total_size: int, fail_on_read: Optional[int] = None):
        self.total_size = total_size
        self.fail_on_read = fail_on_read
        self.position = 0
        self.reads: List[int] = []
        self.open_calls = 0
        self.close_calls = 0
        self.is_open = False

    async def open(self) -> None:
        self.open_calls += 1
        self.is_open = True

    async def read(self, size: int) -> Any:
        if self.fail_on_read is not None and len(self.reads) == self.fail_on_read:
            raise OSError("Simulated read failure")
        n = min(size, self.total_size - self.position)
        self.position += n
        self.reads.append(n)
        return StubChunk(n) if n else b""

    async def close(self) -> None:
        self.close_calls += 1
        self.is_open = False


class FakeDropboxTransport(IHttpTransport):
    """In-memory stand-in for the remote API."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.sessions: Dict[str, int] = {}
        self.session_data: Dict[str, bytes] = {}
        self.files: Dict[str, Dict[str, Any]] = {}
        self.contents: Dict[str, bytes] = {}
        self.commits: List[Dict[str, Any]] = []
        self.started = False
        self.stop_calls = 0
        self._scripted: Dict[str, List[HttpResponse]] = {}
        self._failures: Dict[Tuple[str, int], HttpResponse] = {}
        self._handlers = {
            "files/upload": self._upload,
            "files/upload_session/start": self._session_start,
            "files/upload_session/append_v2": self._session_append,
            "files/upload_session/finish": self._session_finish,
            "files/get_metadata": self._get_metadata,
            "files/download": self._download,
        }

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.started = False
        self.stop_calls += 1

    async def check_health(self) -> Dict[str, Any]:
        return {'healthy': self.started, 'status': 'running' if self.started else 'stopped'}

    def script(self, route: str, payload: Any = None, status: int = 200,
               response: Optional[HttpResponse] = None) -> None:
        """Queue a canned response for the next call to route."""
        if response is None:
            response = json_response(payload, status=status)
        self._scripted.setdefault(route, []).append(response)

    def fail(self, route: str, call: int = 1, status: int = 500,
             response: Optional[HttpResponse] = None) -> None:
        """Fail the call-th request to route."""
        if response is None:
            response = HttpResponse(status=status, body=b"Internal Server Error")
        self._failures[(route, call)] = response

    def calls(self, route: str) -> List[Dict[str, Any]]:
        return [r for r in self.requests if r["route"] == route]

    @property
    def routes(self) -> List[str]:
        return [r["route"] for r in self.requests]

    async def post(
        self,
        url: str,
        headers: Dict[str, str],
        data: Union[bytes, str, None] = None
    ) -> HttpResponse:
        route = url.split("/2/", 1)[1]
        if "Dropbox-API-Arg" in headers:
            arg = json.loads(headers["Dropbox-API-Arg"])
        elif isinstance(data, str):
            arg = json.loads(data)
        else:
            arg = None

        self.requests.append({
            "url": url,
            "route": route,
            "headers": dict(headers),
            "arg": arg,
            "data": data,
            "size": len(data) if data else 0,
        })

        failure = self._failures.get((route, len(self.calls(route))))
        if failure is not None:
            return failure
        if self._scripted.get(route):
            return self._scripted[route].pop(0)

        handler = self._handlers.get(route)
        if handler is None:
            return HttpResponse(status=400, body=f"Unknown route {route}".encode())
        return handler(arg or {}, data)

    def add_file(self, path: str, content: bytes = b"") -> Dict[str, Any]:
        metadata = {
            ".tag": "file",
            "name": posixpath.basename(path),
            "path_lower": path.lower(),
            "path_display": path,
            "id": f"id:{len(self.files) + 1}",
            "client_modified": "2026-01-01T00:00:00Z",
            "server_modified": "2026-01-01T00:00:00Z",
            "rev": f"{len(self.files) + 1:09x}",
            "size": len(content),
        }
        self.files[path.lower()] = metadata
        self.contents[path.lower()] = content
        return metadata

    def _commit(self, commit: Dict[str, Any], content: Any) -> HttpResponse:
        self.commits.append(commit)
        metadata = self.add_file(commit["path"], content if isinstance(content, bytes) else b"")
        metadata["size"] = len(content) if content else 0
        return json_response(metadata)

    def _upload(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        return self._commit(arg, data)

    def _session_start(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        session_id = f"session-{len(self.sessions) + 1}"
        self.sessions[session_id] = len(data) if data else 0
        self.session_data[session_id] = data if isinstance(data, bytes) else b""
        return json_response({"session_id": session_id})

    def _check_cursor(self, cursor: Dict[str, Any]) -> Optional[HttpResponse]:
        session_id = cursor["session_id"]
        if session_id not in self.sessions:
            return error_response(
                "lookup_failed/not_found/",
                {".tag": "lookup_failed", "lookup_failed": {".tag": "not_found"}})
        received = self.sessions[session_id]
        if cursor["offset"] != received:
            return error_response(
                "lookup_failed/incorrect_offset/",
                {".tag": "lookup_failed",
                 "lookup_failed": {".tag": "incorrect_offset", "correct_offset": received}})
        return None

    def _session_append(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        cursor = arg["cursor"]
        error = self._check_cursor(cursor)
        if error is not None:
            return error
        session_id = cursor["session_id"]
        self.sessions[session_id] += len(data) if data else 0
        if isinstance(data, bytes):
            self.session_data[session_id] += data
        return HttpResponse(status=200, headers={}, body=b"null")

    def _session_finish(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        cursor = arg["cursor"]
        error = self._check_cursor(cursor)
        if error is not None:
            return error
        session_id = cursor["session_id"]
        self.commits.append(arg["commit"])
        metadata = self.add_file(arg["commit"]["path"], self.session_data.pop(session_id))
        metadata["size"] = self.sessions.pop(session_id)
        return json_response(metadata)

    def _get_metadata(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        metadata = self.files.get(arg["path"].lower())
        if metadata is None:
            return error_response(
                "path/not_found/", {".tag": "path", "path": {".tag": "not_found"}})
        return json_response(metadata)

    def _download(self, arg: Dict[str, Any], data: Any) -> HttpResponse:
        key = arg["path"].lower()
        if key not in self.files:
            return error_response(
                "path/not_found/", {".tag": "path", "path": {".tag": "not_found"}})
        return HttpResponse(
            status=200,
            headers={"Dropbox-API-Result": json.dumps(self.files[key])},
            body=self.contents[key]
        )


@pytest.fixture
def transport() -> FakeDropboxTransport:
    """In-memory remote API."""
    return FakeDropboxTransport()


@pytest.fixture
def credentials() -> StaticTokenProvider:
    return StaticTokenProvider("test-token")


@pytest.fixture
def api(transport: FakeDropboxTransport, credentials: StaticTokenProvider) -> DropboxApi:
    """API client wired to the in-memory remote."""
    return DropboxApi(transport, credentials)


@pytest.fixture
def stub_reader_factory():
    """Build StubChunkReader instances sized independently of any real file."""
    return StubChunkReader
