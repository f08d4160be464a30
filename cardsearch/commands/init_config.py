"""Write a starter configuration file."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click

from cardsearch.config import get_default_config_path
from cardsearch.exceptions import ConfigError
from cardsearch.utils.output import error, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("cardsearch").joinpath("config.example.toml").read_text()


def write_example_config(path: Path, *, force: bool = False) -> Path:
    """Copy the packaged example config to ``path``.

    Returns:
        The resolved path that was written.

    Raises:
        ConfigError: If ``path`` exists and ``force`` is not set, or the
            file cannot be written.
    """
    path = path.expanduser().resolve()
    if path.exists() and not force:
        raise ConfigError(f"Config file already exists: {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_load_example_config())
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e
    return path


@click.command("init-config")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write (default: ~/.config/cardsearch/config.toml)",
)
@click.option(
    "--print",
    "print_only",
    is_flag=True,
    default=False,
    help="Print the example config instead of writing it",
)
def cli(force: bool, output: Path | None, print_only: bool) -> None:
    """Create a config file with the [search] and [display] defaults.

    \b
      cardsearch init-config
      cardsearch init-config --output ./cardsearch.toml --force
      cardsearch init-config --print > cardsearch.toml
    """
    if print_only:
        click.echo(_load_example_config(), nl=False)
        return

    try:
        written = write_example_config(output or get_default_config_path(), force=force)
    except ConfigError as e:
        error(str(e), hint="Use --force to overwrite" if "exists" in str(e) else None)
        raise SystemExit(1)

    success(f"Created config file: {written}")
