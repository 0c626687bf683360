"""
Command-line interface for pydrop.

Every command loads configuration, sets up logging and runs one client
operation.
"""

import asyncio
import sys
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from loguru import logger

from .application.client import DropboxClient
from .core.exceptions import DropboxError
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig
from .infrastructure.logging.setup import describe_logging, setup_logging

T = TypeVar('T')

cli = typer.Typer(
    name="pydrop",
    help="Upload, download, search and manage files in Dropbox"
)

ConfigOption = typer.Option(None, "--config", "-c", help="Configuration file path")
TokenOption = typer.Option(None, "--token", "-t", help="Access token (overrides configuration)")
LogLevelOption = typer.Option(None, "--log-level", help="Logging level")


def _load_config(
    config_file: Optional[str],
    token: Optional[str],
    log_level: Optional[str]
) -> ApplicationConfig:
    config_loader = ConfigLoader()
    try:
        config = config_loader.load_config(config_file)
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if token:
        config.dropbox.access_token = token
    if log_level:
        config.logging.level = log_level.upper()

    setup_logging(config.logging)
    return config


def _execute(config: ApplicationConfig, operation: Callable[[DropboxClient], Awaitable[T]]) -> T:
    """Run one operation against a freshly opened client."""

    async def runner() -> T:
        async with DropboxClient.from_config(config) as client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except DropboxError as e:
        logger.debug(f"{type(e).__name__} ({e.kind.value}): {e.details}")
        typer.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


@cli.command()
def upload(
    file: str = typer.Argument(..., help="Local file to upload"),
    path: Optional[str] = typer.Argument(None, help="Remote folder (root when omitted)"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="overwrite, add or update"),
    autorename: Optional[bool] = typer.Option(None, "--autorename/--no-autorename", help="Rename on conflict"),
    mute: Optional[bool] = typer.Option(None, "--mute/--notify", help="Suppress notifications"),
    rev: Optional[str] = typer.Option(None, "--rev", help="Revision replaced in update mode"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Upload a file of any size."""
    config = _load_config(config_file, token, log_level)
    result = _execute(config, lambda client: client.upload(
        file, path=path, mode=mode, autorename=autorename, mute=mute, rev=rev))
    typer.echo(
        f"File {file} uploaded as {result.path_display} successfully at {result.server_modified}")


@cli.command()
def download(
    path: str = typer.Argument(..., help="Remote file"),
    local_path: Optional[str] = typer.Argument(None, help="Local file or folder"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing local file"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Download a file to disk."""
    config = _load_config(config_file, token, log_level)
    target = _execute(config, lambda client: client.download(path, local_path, overwrite))
    typer.echo(f"Downloaded {path} to {target}")


@cli.command()
def search(
    query: str = typer.Argument(..., help="Search string"),
    path: str = typer.Option("", "--path", help="Folder to search below"),
    max_results: int = typer.Option(100, "--max-results", help="Maximum number of matches"),
    mode: str = typer.Option("filename", "--mode", help="filename, filename_and_content or deleted_filename"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Search files and folders by name."""
    config = _load_config(config_file, token, log_level)
    result = _execute(config, lambda client: client.search(query, path, max_results, mode))
    for match in result.matches:
        typer.echo(f"{match.metadata.tag}\t{match.metadata.path_display}")
    if result.has_more:
        typer.echo(f"More results available (cursor {result.cursor})")


@cli.command()
def share(
    path: str = typer.Argument(..., help="Remote file or folder"),
    visibility: str = typer.Option("public", "--visibility", help="public, team_only or password"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Create a shared link."""
    config = _load_config(config_file, token, log_level)
    link = _execute(config, lambda client: client.share(path, visibility))
    typer.echo(link.url)


@cli.command()
def move(
    from_path: str = typer.Argument(..., help="Source path"),
    to_path: str = typer.Argument(..., help="Destination path"),
    autorename: bool = typer.Option(False, "--autorename", help="Rename on conflict"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Move a file or folder."""
    config = _load_config(config_file, token, log_level)
    metadata = _execute(config, lambda client: client.move(from_path, to_path, autorename))
    typer.echo(f"Moved {from_path} to {metadata.path_display}")


@cli.command()
def copy(
    from_path: str = typer.Argument(..., help="Source path"),
    to_path: str = typer.Argument(..., help="Destination path"),
    autorename: bool = typer.Option(False, "--autorename", help="Rename on conflict"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Copy a file or folder."""
    config = _load_config(config_file, token, log_level)
    metadata = _execute(config, lambda client: client.copy(from_path, to_path, autorename))
    typer.echo(f"Copied {from_path} to {metadata.path_display}")


@cli.command()
def delete(
    path: str = typer.Argument(..., help="Remote file or folder"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Delete a file or folder."""
    config = _load_config(config_file, token, log_level)
    metadata = _execute(config, lambda client: client.delete(path))
    typer.echo(f"Deleted {metadata.path_display or path}")


@cli.command()
def history(
    path: str = typer.Argument(..., help="Remote file"),
    limit: int = typer.Option(10, "--limit", help="Number of revisions"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """List the revisions of a file."""
    config = _load_config(config_file, token, log_level)
    revisions = _execute(config, lambda client: client.history(path, limit))
    for entry in revisions:
        typer.echo(f"{entry.rev}\t{entry.server_modified}\t{entry.size}")


@cli.command()
def exists(
    path: str = typer.Argument(..., help="Remote file or folder"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Check whether a path exists; exit status 1 when it does not."""
    config = _load_config(config_file, token, log_level)
    found = _execute(config, lambda client: client.exists(path))
    typer.echo("true" if found else "false")
    if not found:
        sys.exit(1)


@cli.command()
def mkdir(
    path: str = typer.Argument(..., help="Folder to create"),
    autorename: bool = typer.Option(False, "--autorename", help="Rename on conflict"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Create a folder."""
    config = _load_config(config_file, token, log_level)
    metadata = _execute(config, lambda client: client.create_folder(path, autorename))
    typer.echo(f"Folder {metadata.path_display} created")


@cli.command()
def ls(
    path: str = typer.Argument("", help="Remote folder (root when omitted)"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subfolders"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """List a folder."""
    config = _load_config(config_file, token, log_level)
    listing = _execute(config, lambda client: client.list_folder(path, recursive))
    for entry in listing.entries:
        typer.echo(f"{entry.tag}\t{entry.path_display}")


@cli.command()
def media(
    path: str = typer.Argument(..., help="Remote file"),
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Print a temporary streaming link for a file."""
    config = _load_config(config_file, token, log_level)
    link = _execute(config, lambda client: client.media(path))
    typer.echo(link.link)


@cli.command()
def account(
    config_file: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
    log_level: Optional[str] = LogLevelOption
) -> None:
    """Show the account that owns the token."""
    config = _load_config(config_file, token, log_level)
    info = _execute(config, lambda client: client.get_current_account())
    typer.echo(f"Account: {info.display_name} <{info.email}>")
    typer.echo(f"Root namespace: {info.root_namespace_id}")


@cli.command()
def init_config(
    output: str = typer.Option(
        "pydrop.yaml", "--output", "-o", help="Output configuration file"
    ),
    format: str = typer.Option(
        "yaml", "--format", "-f", help="Configuration format (yaml/json)"
    )
) -> None:
    """Generate a default configuration file."""

    config = ApplicationConfig()
    config_loader = ConfigLoader()

    try:
        config_loader.save_config(config, output, format)
        typer.echo(f"Default configuration saved to {output}")
    except ValueError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(...,
                                      help="Configuration file to validate")
) -> None:
    """Validate a configuration file."""

    config_loader = ConfigLoader()

    try:
        config = config_loader.load_config(config_file)
    except (ValueError, FileNotFoundError, TypeError) as e:
        typer.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    typer.echo(f"Configuration file {config_file} is valid")
    typer.echo(f"Chunk size: {config.upload.chunk_size} bytes")
    logging_summary: Any = describe_logging(config.logging)
    typer.echo(f"Log level: {logging_summary['log_level']}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
