"""
Single-request file operations.

Download, metadata, existence checks, search, sharing, move, copy, delete,
revision history, folder creation and listing, temporary links and the
current account.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiofiles
from loguru import logger

from ....core.domain.metadata import (
    Account, FolderListing, Metadata, SearchResult, SharedLink, TemporaryLink
)
from ....core.domain.paths import basename, normalize_path
from ....core.exceptions import PathNotFoundError, PreconditionError
from ...clients.dropbox import DropboxApi


SEARCH_MODES = ("filename", "filename_and_content", "deleted_filename")
SHARE_VISIBILITIES = ("public", "team_only", "password")


class FileOperations:
    """Remote file operations, one request each."""

    def __init__(self, api: DropboxApi):
        self._api = api

    async def download(
        self,
        path: str,
        local_path: Optional[Union[str, Path]] = None,
        overwrite: bool = False
    ) -> Path:
        """
        Download a remote file to disk.

        Args:
            path: Remote file path
            local_path: Destination. None saves the file under its remote name
                in the working directory; an existing directory receives the
                file under its remote name; anything else is used as-is.
            overwrite: Replace an existing local file

        Returns:
            Path of the written file
        """
        remote = normalize_path(path)
        if not remote:
            raise PreconditionError("Cannot download the root folder")

        if local_path is None:
            target = Path(basename(remote))
        elif Path(local_path).is_dir():
            target = Path(local_path) / basename(remote)
        else:
            target = Path(local_path)

        if target.exists() and not overwrite:
            raise PreconditionError(
                f"Local file {target} already exists; pass overwrite=True to replace it")
        if target.is_dir():
            raise PreconditionError(f"Local path {target} is a directory")
        parent = target.parent
        if not parent.is_dir():
            raise PreconditionError(f"Local directory {parent} does not exist")

        metadata, content = await self._api.download("files/download", {"path": remote})

        try:
            async with aiofiles.open(target, 'wb') as f:
                await f.write(content)
        except OSError as e:
            raise PreconditionError(f"Cannot write {target}: {e}") from e

        logger.info(
            f"Downloaded {metadata.get('path_display', remote)} to {target}: "
            f"{len(content)} bytes on disk")
        return target

    async def get_metadata(self, path: str, include_deleted: bool = False) -> Metadata:
        """Get metadata for a file or folder."""
        response = await self._api.rpc("files/get_metadata", {
            "path": normalize_path(path),
            "include_deleted": include_deleted,
        })
        return Metadata.from_dict(response)

    async def exists(self, path: str) -> bool:
        """
        Check whether a remote file or folder exists.

        Only a not-found answer maps to False; every other failure propagates.
        """
        remote = normalize_path(path)
        if not remote:
            return True
        try:
            await self.get_metadata(remote)
        except PathNotFoundError:
            return False
        return True

    async def search(
        self,
        query: str,
        path: str = "",
        max_results: int = 100,
        mode: str = "filename"
    ) -> SearchResult:
        """
        Search for files and folders whose name (or content) matches a query.

        Args:
            query: Search string; every word must match
            path: Folder to search below ('' for everything)
            max_results: Page size, 1 to 1000
            mode: 'filename', 'filename_and_content' or 'deleted_filename'
        """
        if not query:
            raise PreconditionError("Search query cannot be empty")
        if mode not in SEARCH_MODES:
            raise PreconditionError(
                f"Unsupported search mode '{mode}' (expected one of: {', '.join(SEARCH_MODES)})")
        if not (1 <= max_results <= 1000):
            raise PreconditionError(f"max_results must be between 1 and 1000, got {max_results}")

        options: Dict[str, Any] = {
            "path": normalize_path(path),
            "max_results": max_results,
            "file_status": "deleted" if mode == "deleted_filename" else "active",
            "filename_only": mode != "filename_and_content",
        }
        response = await self._api.rpc("files/search_v2", {"query": query, "options": options})
        return SearchResult.from_dict(response)

    async def search_continue(self, cursor: str) -> SearchResult:
        """Fetch the next page of a search."""
        if not cursor:
            raise PreconditionError("Search cursor cannot be empty")
        response = await self._api.rpc("files/search/continue_v2", {"cursor": cursor})
        return SearchResult.from_dict(response)

    async def share(self, path: str, requested_visibility: str = "public") -> SharedLink:
        """Create a shared link for a file or folder."""
        if requested_visibility not in SHARE_VISIBILITIES:
            raise PreconditionError(
                f"Unsupported visibility '{requested_visibility}' "
                f"(expected one of: {', '.join(SHARE_VISIBILITIES)})")
        response = await self._api.rpc("sharing/create_shared_link_with_settings", {
            "path": normalize_path(path),
            "settings": {"requested_visibility": requested_visibility},
        })
        return SharedLink.from_dict(response)

    async def move(
        self,
        from_path: str,
        to_path: str,
        autorename: bool = False,
        allow_ownership_transfer: bool = False
    ) -> Metadata:
        """Move a file or folder."""
        response = await self._api.rpc("files/move_v2", {
            "from_path": self._require_path(from_path),
            "to_path": self._require_path(to_path),
            "autorename": autorename,
            "allow_ownership_transfer": allow_ownership_transfer,
        })
        metadata = Metadata.from_dict(response.get("metadata", {}))
        logger.info(f"Moved {from_path} to {metadata.path_display}")
        return metadata

    async def copy(self, from_path: str, to_path: str, autorename: bool = False) -> Metadata:
        """Copy a file or folder."""
        response = await self._api.rpc("files/copy_v2", {
            "from_path": self._require_path(from_path),
            "to_path": self._require_path(to_path),
            "autorename": autorename,
        })
        metadata = Metadata.from_dict(response.get("metadata", {}))
        logger.info(f"Copied {from_path} to {metadata.path_display}")
        return metadata

    async def delete(self, path: str) -> Metadata:
        """Delete a file or folder (folders recursively)."""
        response = await self._api.rpc("files/delete_v2", {"path": self._require_path(path)})
        metadata = Metadata.from_dict(response.get("metadata", {}))
        logger.info(f"Deleted {metadata.path_display or path}")
        return metadata

    async def history(self, path: str, limit: int = 10) -> List[Metadata]:
        """List the revisions of a file, newest first."""
        if not (1 <= limit <= 100):
            raise PreconditionError(f"limit must be between 1 and 100, got {limit}")
        response = await self._api.rpc("files/list_revisions", {
            "path": self._require_path(path),
            "mode": "path",
            "limit": limit,
        })
        return [Metadata.from_dict(entry) for entry in response.get("entries", [])]

    async def create_folder(self, path: str, autorename: bool = False) -> Metadata:
        """Create a folder."""
        response = await self._api.rpc("files/create_folder_v2", {
            "path": self._require_path(path),
            "autorename": autorename,
        })
        return Metadata.from_dict(response.get("metadata", {}), default_tag="folder")

    async def list_folder(
        self,
        path: str = "",
        recursive: bool = False,
        include_deleted: bool = False
    ) -> FolderListing:
        """List a folder, following pagination until every entry is read."""
        listing = FolderListing()
        response = await self._api.rpc("files/list_folder", {
            "path": normalize_path(path),
            "recursive": recursive,
            "include_deleted": include_deleted,
        })
        listing.extend(response)

        while listing.has_more:
            response = await self._api.rpc("files/list_folder/continue", {"cursor": listing.cursor})
            listing.extend(response)

        return listing

    async def media(self, path: str) -> TemporaryLink:
        """Get a temporary direct link for streaming a file."""
        response = await self._api.rpc("files/get_temporary_link", {"path": self._require_path(path)})
        return TemporaryLink.from_dict(response)

    async def get_current_account(self) -> Account:
        """Get the account that owns the access token."""
        response = await self._api.rpc("users/get_current_account")
        return Account.from_dict(response)

    def _require_path(self, path: str) -> str:
        remote = normalize_path(path)
        if not remote:
            raise PreconditionError("This operation needs a path below the root folder")
        return remote
