"""CLI entry point for api-doc-registry."""

from pathlib import Path

import click

from api_doc_registry.checksum import cache_base, digest, load_cached_docs
from api_doc_registry.config import DocConfig, load_config
from api_doc_registry.errors import ConfigError
from api_doc_registry.log import configure_logging


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, json_logs: bool):
    """API doc registry: inspect cached API documentation."""
    configure_logging(use_json=json_logs)
    try:
        ctx.obj = load_config(config_path) if config_path else DocConfig()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument("cache_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--doc-base-url", default=None, help="Documentation base URL (defaults to the configured one).")
@click.pass_obj
def checksum(config: DocConfig, cache_dir: Path, doc_base_url: str | None):
    """Print the checksum of the cached documentation."""
    base = cache_base(cache_dir, doc_base_url or config.doc_base_url)
    click.echo(digest(load_cached_docs(base)))


@main.command()
@click.argument("cache_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--doc-base-url", default=None, help="Documentation base URL (defaults to the configured one).")
@click.pass_obj
def versions(config: DocConfig, cache_dir: Path, doc_base_url: str | None):
    """List the API versions present in the cache."""
    base = cache_base(cache_dir, doc_base_url or config.doc_base_url)
    docs = load_cached_docs(base)
    if not docs:
        click.echo(f"No cached documentation in {base}")
        return
    for version in docs:
        click.echo(version)
