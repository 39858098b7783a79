"""CLI main entry point."""

import json
import shutil
import sys
from functools import update_wrapper
from pathlib import Path

import click

from ...adapters import (
    FsStorageAdapter,
    JsonCacheStateAdapter,
    LoggingMetricsAdapter,
    MemoryCacheStateAdapter,
    NoopMetricsAdapter,
    S3StorageAdapter,
    StdLoggerAdapter,
)
from ...core import CachedStorage, CacheTierConfig
from ...ports import StoragePort


def parse_remote(remote: str, config: CacheTierConfig) -> StoragePort:
    """Build the remote storage from a directory path or an s3:// URL."""
    if remote.startswith("s3://"):
        s3_path = remote[5:].rstrip("/")
        parts = s3_path.split("/", 1)
        if not parts[0]:
            raise click.BadParameter(f"Invalid S3 URL: {remote}", param_hint="--remote")
        return S3StorageAdapter(
            bucket=parts[0],
            prefix=parts[1] if len(parts) > 1 else "",
            endpoint_url=config.endpoint_url,
            region=config.region,
            profile=config.profile,
        )
    return FsStorageAdapter(Path(remote))


def create_service(config: CacheTierConfig) -> CachedStorage:
    """Create service with wired adapters."""
    if config.remote is None:
        raise click.UsageError("A remote storage is required (--remote or CT_REMOTE)")

    logger = StdLoggerAdapter(level=config.log_level)
    remote = parse_remote(config.remote, config)
    local = FsStorageAdapter(config.local_dir)

    if config.state_backend == "json":
        cache_state = JsonCacheStateAdapter(config.resolved_state_file)
    else:
        cache_state = MemoryCacheStateAdapter()

    if config.metrics_type == "logging":
        metrics = LoggingMetricsAdapter(level=config.log_level)
    else:
        metrics = NoopMetricsAdapter()

    return CachedStorage(
        remote=remote,
        local=local,
        cache_state=cache_state,
        logger=logger,
        metrics=metrics,
        lazy_caching=config.lazy_caching,
        chunk_size=config.chunk_size,
        lock_timeout=config.lock_timeout,
    )


def pass_service(f):
    """Pass a service built from the group's config as the first argument.

    The service is only built when a command runs, so help and usage errors
    work without a configured remote.
    """

    def new_func(*args, **kwargs):
        config = click.get_current_context().obj
        return f(create_service(config), *args, **kwargs)

    return update_wrapper(new_func, f)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--remote",
    envvar="CT_REMOTE",
    help="Remote storage: a directory or s3://bucket/prefix",
)
@click.option(
    "--local",
    "local_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local cache directory (default: CT_LOCAL_DIR)",
)
@click.option("--lazy", is_flag=True, help="Do not populate the local cache on reads")
@click.option("--endpoint-url", help="S3 endpoint URL")
@click.option("--region", help="S3 region")
@click.option("--profile", help="AWS profile")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    remote: str | None,
    local_dir: Path | None,
    lazy: bool,
    endpoint_url: str | None,
    region: str | None,
    profile: str | None,
) -> None:
    """cachetier - Read-through local cache for remote storage."""
    config = CacheTierConfig.from_env(
        log_level="DEBUG" if debug else "INFO",
        state_backend="json",
        remote=remote,
        local_dir=local_dir,
        endpoint_url=endpoint_url,
        region=region,
        profile=profile,
    )
    if debug:
        config.log_level = "DEBUG"
    if lazy:
        config.lazy_caching = True
    ctx.obj = config


@cli.command()
@click.argument("id")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output file path")
@pass_service
def get(service: CachedStorage, id: str, output: Path | None) -> None:
    """Read an identifier, caching it locally on the way."""
    try:
        stream = service.open_input_stream(id)
        if stream is None:
            click.echo(f"Error: Not found: {id}", err=True)
            sys.exit(1)

        with stream:
            if output is None:
                shutil.copyfileobj(stream, click.get_binary_stream("stdout"), service.chunk_size)
            else:
                with open(output, "wb") as f:
                    shutil.copyfileobj(stream, f, service.chunk_size)
                click.echo(f"Successfully retrieved: {output}", err=True)

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("id")
@pass_service
def put(service: CachedStorage, file: Path, id: str) -> None:
    """Upload a file to the remote storage."""
    try:
        with open(file, "rb") as src, service.open_output_stream(id) as dst:
            shutil.copyfileobj(src, dst, service.chunk_size)

        output = {
            "operation": "put",
            "id": id,
            "file_size": file.stat().st_size,
            # Writes bypass the local cache
            "fully_cached": service.is_fully_cached(id),
        }
        click.echo(json.dumps(output, indent=2))

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("id")
@pass_service
def cache(service: CachedStorage, id: str) -> None:
    """Copy an identifier into the local cache."""
    try:
        service.cache(id)
        click.echo(f"Cached: {id}")
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("id")
@pass_service
def purge(service: CachedStorage, id: str) -> None:
    """Remove an identifier from the local cache only."""
    try:
        if service.purge(id):
            click.echo(f"Purged: {id}")
        else:
            click.echo(f"Not cached: {id}")
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("id")
@pass_service
def delete(service: CachedStorage, id: str) -> None:
    """Delete an identifier from the remote storage and the local cache."""
    try:
        existed = service.remote.contains(id)
        service.delete(id)
        if existed:
            click.echo(f"Deleted: {id}")
        else:
            click.echo(f"Error: Not found: {id}", err=True)
            sys.exit(1)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("delete-all")
@click.confirmation_option(prompt="Delete everything from the local cache and the remote storage?")
@pass_service
def delete_all(service: CachedStorage) -> None:
    """Clear the local cache and, if supported, the remote storage."""
    try:
        service.delete_all()
        click.echo("Deleted all")
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("id")
@pass_service
def status(service: CachedStorage, id: str) -> None:
    """Show where an identifier is stored."""
    try:
        output = {
            "id": id,
            "contains": service.contains(id),
            "local": service.local.contains(id),
            "fully_cached": service.is_fully_cached(id),
            "lazy_caching": service.lazy_caching,
        }
        click.echo(json.dumps(output, indent=2))
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli()
