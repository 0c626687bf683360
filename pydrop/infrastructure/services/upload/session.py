"""
Chunked upload session.

Drives the three-phase remote protocol (start, append, finish) for a single
local file. Chunks are read and sent strictly one at a time: the offset of
the next append is only known once the previous chunk is acknowledged.

A session that fails between start and finish leaves an uncommitted
session on the remote side. Nothing is cleaned up remotely; the service
expires abandoned sessions on its own.
"""

from typing import Any, Dict, Optional

from loguru import logger

from ....core.domain.metadata import Metadata
from ....core.domain.upload import CommitInfo, UploadSessionCursor
from ....core.exceptions import (
    DropboxError, OffsetMismatchError, PreconditionError, RemoteApiError, SessionStateError
)
from ....core.interfaces.upload import (
    IChunkReader, IUploadSession, SESSION_TRANSITIONS,
    UploadSessionInfo, UploadSessionState
)
from ...clients.dropbox import DropboxApi


START_ROUTE = "files/upload_session/start"
APPEND_ROUTE = "files/upload_session/append_v2"
FINISH_ROUTE = "files/upload_session/finish"


def _find_correct_offset(error: Any) -> Optional[int]:
    """Locate correct_offset anywhere in a nested error document."""
    if isinstance(error, dict):
        if "correct_offset" in error:
            return int(error["correct_offset"])
        for value in error.values():
            found = _find_correct_offset(value)
            if found is not None:
                return found
    return None


class ChunkedUploadSession(IUploadSession):
    """Upload session for one file, one chunk at a time."""

    def __init__(
        self,
        api: DropboxApi,
        commit: CommitInfo,
        chunk_size: int,
        expected_size: Optional[int] = None
    ):
        """
        Initialize the session.

        Args:
            api: API client used for the three remote calls
            commit: Final-placement parameters, applied at finish
            chunk_size: Maximum bytes per chunk
            expected_size: Local file size, checked against the final offset
        """
        if chunk_size <= 0:
            raise PreconditionError(f"Chunk size must be positive, got {chunk_size}")

        self._api = api
        self._chunk_size = chunk_size
        self._expected_size = expected_size
        self._info = UploadSessionInfo(commit=commit)

    @property
    def state(self) -> UploadSessionState:
        return self._info.state

    @property
    def session_id(self) -> Optional[str]:
        return self._info.session_id

    @property
    def cursor_offset(self) -> int:
        return self._info.cursor_offset

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def get_info(self) -> UploadSessionInfo:
        """Get upload session information."""
        return self._info

    async def run(self, reader: IChunkReader) -> Metadata:
        """
        Upload the whole file behind the reader and commit it.

        The reader is opened here and closed exactly once, whichever phase
        ends the session.

        Returns:
            Metadata of the committed file
        """
        self._require_state(UploadSessionState.IDLE)
        await reader.open()
        try:
            bytes_read = 0

            chunk = await reader.read(self._chunk_size)
            bytes_read += len(chunk)
            await self.start(chunk)

            while True:
                chunk = await reader.read(self._chunk_size)
                if not chunk:
                    break
                self._check_offset(bytes_read)
                bytes_read += len(chunk)
                await self.append(chunk)

            self._check_offset(bytes_read)
            return await self.finish()
        except BaseException as e:
            self._abort(e)
            raise
        finally:
            await reader.close()

    async def start(self, first_chunk: bytes) -> str:
        """Open the remote session, sending the first chunk."""
        self._require_state(UploadSessionState.IDLE)

        try:
            response = await self._api.upload(START_ROUTE, {"close": False}, first_chunk)
        except DropboxError as e:
            self._abort(e)
            raise

        session_id = (response or {}).get("session_id")
        if not session_id:
            error = RemoteApiError(200, START_ROUTE, body="response carried no session_id")
            self._abort(error)
            raise error

        self._info.session_id = session_id
        self._info.cursor_offset = len(first_chunk)
        self._info.chunk_sizes.append(len(first_chunk))
        self._transition(UploadSessionState.STARTED)

        logger.info(
            f"Upload session {session_id} started for {self._info.commit.path} "
            f"({len(first_chunk)} bytes)")
        return session_id

    async def append(self, chunk: bytes) -> int:
        """Append the next chunk at the current cursor."""
        self._require_active()
        cursor = self._cursor()

        try:
            await self._api.upload(
                APPEND_ROUTE,
                {"close": False, "cursor": cursor.to_dict()},
                chunk
            )
        except DropboxError as e:
            error = self._offset_error(e, cursor)
            self._abort(error)
            if error is e:
                raise
            raise error from e

        self._info.cursor_offset += len(chunk)
        self._info.chunk_sizes.append(len(chunk))
        self._transition(UploadSessionState.APPENDING)

        logger.debug(
            f"Upload session {cursor.session_id} appended chunk "
            f"{self._info.chunks_sent} ({len(chunk)} bytes, offset {self._info.cursor_offset})")
        return self._info.cursor_offset

    async def finish(self) -> Metadata:
        """Commit the session to its destination and close it."""
        self._require_active()

        if self._expected_size is not None and self._info.cursor_offset != self._expected_size:
            error = OffsetMismatchError(
                self._info.session_id,
                self._info.cursor_offset,
                self._expected_size,
                message=(
                    f"Upload session {self._info.session_id} committed "
                    f"{self._info.cursor_offset} bytes but the file has {self._expected_size}"
                )
            )
            self._abort(error)
            raise error

        cursor = self._cursor()
        commit = self._info.commit

        try:
            response = await self._api.upload(
                FINISH_ROUTE,
                {"commit": commit.to_dict(), "cursor": cursor.to_dict()},
                b""
            )
        except DropboxError as e:
            error = self._offset_error(e, cursor)
            self._abort(error)
            if error is e:
                raise
            raise error from e

        self._transition(UploadSessionState.FINISHED)
        metadata = Metadata.from_dict(response or {})

        logger.info(
            f"Upload session {cursor.session_id} committed {cursor.offset} bytes "
            f"in {self._info.chunks_sent} chunks as {metadata.path_display} "
            f"at {metadata.server_modified}")
        return metadata

    def _cursor(self) -> UploadSessionCursor:
        assert self._info.session_id is not None
        return UploadSessionCursor(self._info.session_id, self._info.cursor_offset)

    def _check_offset(self, bytes_read: int) -> None:
        """The acknowledged cursor must account for every byte read so far."""
        if self._info.cursor_offset != bytes_read:
            raise OffsetMismatchError(
                self._info.session_id,
                self._info.cursor_offset,
                bytes_read,
                message=(
                    f"Upload session {self._info.session_id} cursor at "
                    f"{self._info.cursor_offset} but {bytes_read} bytes were read"
                )
            )

    def _offset_error(self, error: DropboxError, cursor: UploadSessionCursor) -> DropboxError:
        if isinstance(error, RemoteApiError) and error.summary_contains("incorrect_offset"):
            return OffsetMismatchError(
                cursor.session_id,
                cursor.offset,
                _find_correct_offset(error.error)
            )
        return error

    def _require_state(self, state: UploadSessionState) -> None:
        if self._info.state is not state:
            raise SessionStateError(
                f"Upload session is {self._info.state.value}, expected {state.value}")

    def _require_active(self) -> None:
        if self._info.state not in (UploadSessionState.STARTED, UploadSessionState.APPENDING):
            raise SessionStateError(
                f"Upload session is {self._info.state.value}, not open for transfer")

    def _transition(self, new_state: UploadSessionState) -> None:
        current = self._info.state
        if new_state not in SESSION_TRANSITIONS[current]:
            raise SessionStateError(
                f"Illegal upload session transition {current.value} -> {new_state.value}")
        self._info.state = new_state

    def _abort(self, error: BaseException) -> None:
        if self._info.state.is_terminal:
            return
        self._info.state = UploadSessionState.ABORTED
        self._info.last_error = str(error) or type(error).__name__
        logger.error(
            f"Upload session {self._info.session_id or '(not started)'} for "
            f"{self._info.commit.path} aborted at offset {self._info.cursor_offset}: "
            f"{self._info.last_error}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self._info.session_id,
            "state": self._info.state.value,
            "cursor_offset": self._info.cursor_offset,
            "chunks_sent": self._info.chunks_sent,
            "destination": self._info.commit.path,
            "last_error": self._info.last_error,
        }
