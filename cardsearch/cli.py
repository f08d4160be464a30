"""Command-line interface for cardsearch."""

from __future__ import annotations

import os
from pathlib import Path

import click

from cardsearch import __version__
from cardsearch.commands import COMMANDS
from cardsearch.config import load_config
from cardsearch.context import Context
from cardsearch.exceptions import ConfigError
from cardsearch.utils.output import debug, error, set_color, set_verbosity, warning


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config file (default: ~/.config/cardsearch/config.toml)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject unknown is: states and prop: properties (default: search.strict)",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--debug",
    "debug_mode",
    is_flag=True,
    default=False,
    help="Log parser decisions to stderr (implies --verbose)",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Hide config warnings")
@click.version_option(version=__version__, prog_name="cardsearch")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    strict: bool | None,
    no_color: bool,
    verbose: bool,
    debug_mode: bool,
    quiet: bool,
) -> None:
    """cardsearch: Compile flashcard search strings into structured queries.

    Parses the search syntax used to filter cards and notes (deck:, tag:,
    is:, flag:, prop:, front:/back:/field:, re:, nc:, w:, quoted phrases,
    wildcards and -negation) and shows what each clause means.

    Settings are read from ~/.config/cardsearch/config.toml unless
    --config names another file. --strict/--no-strict overrides
    search.strict for this run.

    Examples:

        cardsearch parse deck:Default tag:vocabulary -tag:marked

        cardsearch --strict parse prop:ivl>=10 is:due
    """
    set_verbosity(verbose=verbose, debug=debug_mode)

    # NO_COLOR and --no-color win over display.colored_output
    color_forced_off = no_color or os.environ.get("NO_COLOR") is not None
    if color_forced_off:
        set_color(False)

    try:
        config, warnings = load_config(config_path)
    except ConfigError as e:
        error(str(e), hint="Run 'cardsearch init-config --force' to start over")
        ctx.exit(1)

    if not color_forced_off and not config.colored_output:
        set_color(False)
    if not quiet:
        for warn in warnings:
            warning(warn)
    source = config.config_path or "(defaults)"
    debug(f"Config {source}: strict={config.strict}, override={strict}")

    ctx.obj = Context(config=config, strict=strict)


for _command in COMMANDS:
    cli.add_command(_command)
