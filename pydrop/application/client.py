"""
DropboxClient facade.

Wires the transport, credential provider, API client and services
together. Every collaborator can be injected; nothing is looked up from
process-wide state.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from ..core.domain.metadata import (
    Account, FolderListing, Metadata, SearchResult, SharedLink, TemporaryLink
)
from ..core.domain.upload import UploadResult, WriteMode
from ..core.interfaces.credentials import ICredentialProvider
from ..core.interfaces.lifecycle import IStartable, IStoppable, IHealthCheckable
from ..core.interfaces.transport import IHttpTransport
from ..infrastructure.auth.credentials import PathRoot, credentials_from_config
from ..infrastructure.clients.dropbox import DropboxApi
from ..infrastructure.config.models import ApplicationConfig
from ..infrastructure.services.files.operations import FileOperations
from ..infrastructure.services.upload.uploader import FileUploader, ReaderFactory
from ..infrastructure.services.upload.reader import FileChunkReader
from ..infrastructure.transport.http import AiohttpTransport


class DropboxClient(IStartable, IStoppable, IHealthCheckable):
    """
    High-level client for the Dropbox file API.

    Usage:
        async with DropboxClient(StaticTokenProvider(token)) as client:
            result = await client.upload("report.csv", path="reports")
    """

    def __init__(
        self,
        credentials: ICredentialProvider,
        config: Optional[ApplicationConfig] = None,
        transport: Optional[IHttpTransport] = None,
        path_root: Optional[PathRoot] = None,
        reader_factory: ReaderFactory = FileChunkReader
    ):
        """
        Initialize the client.

        Args:
            credentials: Source of the bearer token
            config: Client configuration (defaults when None)
            transport: HTTP transport (aiohttp when None)
            path_root: Namespace receiving reads and writes; overrides the
                configured root_namespace_id
            reader_factory: Builds chunk readers for local files
        """
        self._config = config or ApplicationConfig()
        self._transport = transport or AiohttpTransport(timeout=self._config.dropbox.timeout)

        if path_root is None and self._config.dropbox.root_namespace_id:
            path_root = PathRoot(self._config.dropbox.root_namespace_id)

        self._api = DropboxApi(
            self._transport,
            credentials,
            api_url=self._config.dropbox.api_url,
            content_url=self._config.dropbox.content_url,
            path_root=path_root
        )
        self._uploader = FileUploader(
            self._api,
            chunk_size=self._config.upload.chunk_size,
            reader_factory=reader_factory
        )
        self._files = FileOperations(self._api)
        self._started = False

    @classmethod
    def from_config(cls, config: ApplicationConfig, **kwargs: Any) -> 'DropboxClient':
        """Build a client whose credentials come from configuration."""
        credentials = credentials_from_config(
            config.dropbox.access_token, config.dropbox.token_env_var)
        return cls(credentials, config=config, **kwargs)

    @property
    def api(self) -> DropboxApi:
        return self._api

    @property
    def uploader(self) -> FileUploader:
        return self._uploader

    @property
    def files(self) -> FileOperations:
        return self._files

    @property
    def config(self) -> ApplicationConfig:
        return self._config

    async def start(self) -> None:
        """Open the transport."""
        if self._started:
            return
        await self._transport.start()
        self._started = True
        logger.debug(f"{self._config.name} client started")

    async def stop(self) -> None:
        """Close the transport."""
        if not self._started:
            return
        await self._transport.stop()
        self._started = False
        logger.debug(f"{self._config.name} client stopped")

    async def check_health(self) -> Dict[str, Any]:
        """Report client health."""
        transport_health = await self._transport.check_health()
        metrics = self._api.get_metrics()
        return {
            'healthy': transport_health.get('healthy', False),
            'status': 'running' if self._started else 'stopped',
            'details': {
                'transport': transport_health,
                'total_requests': metrics.total_requests,
                'success_rate': metrics.success_rate,
                'average_response_time': metrics.average_response_time,
                'bytes_sent': metrics.bytes_sent,
                'last_error': metrics.last_error,
                'path_root': self._api.path_root.namespace_id if self._api.path_root else None
            }
        }

    async def __aenter__(self) -> 'DropboxClient':
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    async def use_account_root(self) -> PathRoot:
        """Direct all requests at the account's root namespace."""
        account = await self._files.get_current_account()
        root = PathRoot.from_account(account)
        self._api.path_root = root
        logger.info(f"Using root namespace {root.namespace_id}")
        return root

    async def upload(
        self,
        file: Union[str, Path],
        path: Optional[str] = None,
        mode: Union[str, WriteMode, None] = None,
        autorename: Optional[bool] = None,
        mute: Optional[bool] = None,
        rev: Optional[str] = None
    ) -> UploadResult:
        """Upload a local file into a remote folder; unset options use the config."""
        upload_config = self._config.upload
        return await self._uploader.upload(
            file,
            path=path,
            mode=mode if mode is not None else upload_config.mode,
            autorename=upload_config.autorename if autorename is None else autorename,
            mute=upload_config.mute if mute is None else mute,
            rev=rev
        )

    async def download(
        self,
        path: str,
        local_path: Optional[Union[str, Path]] = None,
        overwrite: bool = False
    ) -> Path:
        return await self._files.download(path, local_path, overwrite)

    async def get_metadata(self, path: str, include_deleted: bool = False) -> Metadata:
        return await self._files.get_metadata(path, include_deleted)

    async def exists(self, path: str) -> bool:
        return await self._files.exists(path)

    async def search(
        self,
        query: str,
        path: str = "",
        max_results: int = 100,
        mode: str = "filename"
    ) -> SearchResult:
        return await self._files.search(query, path, max_results, mode)

    async def search_continue(self, cursor: str) -> SearchResult:
        return await self._files.search_continue(cursor)

    async def share(self, path: str, requested_visibility: str = "public") -> SharedLink:
        return await self._files.share(path, requested_visibility)

    async def move(
        self,
        from_path: str,
        to_path: str,
        autorename: bool = False,
        allow_ownership_transfer: bool = False
    ) -> Metadata:
        return await self._files.move(from_path, to_path, autorename, allow_ownership_transfer)

    async def copy(self, from_path: str, to_path: str, autorename: bool = False) -> Metadata:
        return await self._files.copy(from_path, to_path, autorename)

    async def delete(self, path: str) -> Metadata:
        return await self._files.delete(path)

    async def history(self, path: str, limit: int = 10) -> List[Metadata]:
        return await self._files.history(path, limit)

    async def create_folder(self, path: str, autorename: bool = False) -> Metadata:
        return await self._files.create_folder(path, autorename)

    async def list_folder(
        self,
        path: str = "",
        recursive: bool = False,
        include_deleted: bool = False
    ) -> FolderListing:
        return await self._files.list_folder(path, recursive, include_deleted)

    async def media(self, path: str) -> TemporaryLink:
        return await self._files.media(path)

    async def get_current_account(self) -> Account:
        return await self._files.get_current_account()
