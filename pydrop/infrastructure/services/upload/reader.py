"""
Sequential chunk reader over a local file.
"""

from pathlib import Path
from typing import Any, Optional, Union

import aiofiles
from loguru import logger

from ....core.exceptions import SessionStateError
from ....core.interfaces.upload import IChunkReader


class FileChunkReader(IChunkReader):
    """Reads a local file front to back in bounded chunks."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._handle: Optional[Any] = None
        self._bytes_read = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    @property
    def closed(self) -> bool:
        return self._handle is None

    async def open(self) -> None:
        if self._handle is not None:
            return
        self._handle = await aiofiles.open(self._path, 'rb')
        logger.debug(f"Opened {self._path} for reading")

    async def read(self, size: int) -> bytes:
        if self._handle is None:
            raise SessionStateError(f"Reader for {self._path} is not open")
        data: bytes = await self._handle.read(size)
        self._bytes_read += len(data)
        return data

    async def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        await handle.close()
        logger.debug(f"Closed {self._path} after {self._bytes_read} bytes")

    async def __aenter__(self) -> 'FileChunkReader':
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
