"""
File uploader.

Chooses between the single-request upload and the chunked upload session
by file size, after checking every local precondition.
"""

import os
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from ....core.domain.metadata import Metadata
from ....core.domain.paths import join_path
from ....core.domain.upload import CommitInfo, UploadMethod, UploadResult, WriteMode
from ....core.exceptions import PreconditionError
from ....core.interfaces.upload import IChunkReader
from ...clients.dropbox import DropboxApi
from ...config.models import DEFAULT_CHUNK_SIZE, MAX_CHUNK_SIZE
from .reader import FileChunkReader
from .session import ChunkedUploadSession


UPLOAD_ROUTE = "files/upload"

ReaderFactory = Callable[[Path], IChunkReader]


class FileUploader:
    """Uploads local files of any size."""

    def __init__(
        self,
        api: DropboxApi,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        reader_factory: ReaderFactory = FileChunkReader
    ):
        """
        Initialize the uploader.

        Args:
            api: API client
            chunk_size: Size threshold for the chunked path and maximum chunk size
            reader_factory: Builds the chunk reader for a local path
        """
        if not (1 <= chunk_size <= MAX_CHUNK_SIZE):
            raise PreconditionError(
                f"Chunk size must be between 1 and {MAX_CHUNK_SIZE}, got {chunk_size}")
        self._api = api
        self._chunk_size = chunk_size
        self._reader_factory = reader_factory
        self._last_session: Optional[ChunkedUploadSession] = None

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def last_session(self) -> Optional[ChunkedUploadSession]:
        """The most recent chunked session, for inspection after a failure."""
        return self._last_session

    def uses_session(self, file_size: int) -> bool:
        """Files at or above the chunk size go through an upload session."""
        return file_size >= self._chunk_size

    async def upload(
        self,
        file: Union[str, Path],
        path: Optional[str] = None,
        mode: Union[str, WriteMode] = WriteMode.OVERWRITE,
        autorename: bool = True,
        mute: bool = False,
        rev: Optional[str] = None
    ) -> UploadResult:
        """
        Upload a local file into a remote folder.

        Args:
            file: Local file path
            path: Remote folder that receives the file (root when None)
            mode: 'overwrite', 'add' or 'update'
            autorename: Let the remote side rename on conflict
            mute: Suppress desktop and mobile notifications
            rev: Revision replaced by mode 'update'

        Returns:
            UploadResult describing the committed file

        Raises:
            PreconditionError: File missing or invalid arguments
            RemoteApiError: The remote service rejected a request
            OffsetMismatchError: Session cursors diverged
        """
        local = Path(file)
        if not local.exists():
            raise PreconditionError(f"Local file does not exist: {local}")
        if not local.is_file():
            raise PreconditionError(f"Not a regular file: {local}")

        commit = CommitInfo(
            path=join_path(path, local.name),
            mode=WriteMode.parse(mode),
            autorename=autorename,
            mute=mute,
            rev=rev
        )
        file_size = os.path.getsize(local)

        if self.uses_session(file_size):
            result = await self._upload_chunked(local, commit, file_size)
        else:
            result = await self._upload_single(local, commit, file_size)

        logger.info(
            f"File {local} uploaded as {result.path_display} successfully "
            f"at {result.server_modified}")
        return result

    async def _upload_single(self, local: Path, commit: CommitInfo, file_size: int) -> UploadResult:
        reader = self._reader_factory(local)
        await reader.open()
        try:
            data = await reader.read(file_size)
            trailing = await reader.read(1)
        finally:
            await reader.close()

        if trailing or len(data) != file_size:
            raise PreconditionError(f"Local file {local} changed size while being read")

        response = await self._api.upload(UPLOAD_ROUTE, commit.to_dict(), data)
        return UploadResult(
            metadata=Metadata.from_dict(response or {}),
            method=UploadMethod.SINGLE,
            bytes_sent=len(data)
        )

    async def _upload_chunked(self, local: Path, commit: CommitInfo, file_size: int) -> UploadResult:
        session = ChunkedUploadSession(
            self._api, commit, self._chunk_size, expected_size=file_size)
        self._last_session = session

        logger.info(
            f"Uploading {local} ({file_size} bytes) in chunks of {self._chunk_size} bytes")
        metadata = await session.run(self._reader_factory(local))

        info = session.get_info()
        return UploadResult(
            metadata=metadata,
            method=UploadMethod.CHUNKED,
            bytes_sent=info.cursor_offset,
            chunks=info.chunks_sent,
            session_id=info.session_id
        )
