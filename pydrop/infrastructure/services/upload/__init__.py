"""
Upload services: chunk reader, chunked upload session and file uploader.
"""

from .reader import FileChunkReader
from .session import ChunkedUploadSession
from .uploader import FileUploader

__all__ = [
    "FileChunkReader",
    "ChunkedUploadSession",
    "FileUploader",
]
