"""Subcommands of the cardsearch CLI."""

from cardsearch.commands.init_config import cli as init_config
from cardsearch.commands.parse import cli as parse

COMMANDS = (parse, init_config)

__all__ = ["COMMANDS", "init_config", "parse"]
