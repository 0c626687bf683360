"""
Client services built on the low-level API client.
"""

from .upload import FileUploader, ChunkedUploadSession, FileChunkReader
from .files import FileOperations

__all__ = [
    "FileUploader",
    "ChunkedUploadSession",
    "FileChunkReader",
    "FileOperations",
]
