"""CLI entry point for the course registration service."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from coursereg.config import AppConfig, ConfigError, find_config, load_config
from coursereg.logging import setup_logging
from coursereg.store import RegistryStore


def _load(config_path: Path | None) -> AppConfig:
    """Load the given config, the nearest coursereg.yaml, or defaults."""
    if config_path is None:
        try:
            config_path = find_config()
        except ConfigError:
            return load_config(None)
    return load_config(config_path)


@click.group()
@click.version_option(package_name="coursereg")
def main() -> None:
    """Course registration service."""
    pass


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to coursereg.yaml (auto-detected if not specified)",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
def serve(config_path: Path | None, host: str, port: int) -> None:
    """Run the REST API."""
    import uvicorn  # noqa: PLC0415

    from coursereg.api import create_app  # noqa: PLC0415

    try:
        config = _load(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(config)
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level.lower())


@main.command("init-db")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to coursereg.yaml (auto-detected if not specified)",
)
def init_db(config_path: Path | None) -> None:
    """Create the database tables."""
    try:
        config = _load(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    store = RegistryStore(config.db_path)
    store.close()
    click.echo(f"Database ready at {config.db_path}")
