"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

import click

from cardsearch.config import Config
from cardsearch.search.ast_nodes import Query
from cardsearch.search.parser import parse_query


class Context:
    """Loaded config plus the overrides given on the command line."""

    def __init__(self, config: Config | None = None, strict: bool | None = None) -> None:
        self.config: Config = config if config is not None else Config()
        # None means "use the config file value"
        self.strict_override: bool | None = strict

    @property
    def strict(self) -> bool:
        if self.strict_override is not None:
            return self.strict_override
        return self.config.strict

    def compile(self, query_string: str) -> Query:
        """Parse ``query_string`` with the configured strictness and length cap.

        Raises:
            SearchParseError: If the query cannot be parsed.
        """
        return parse_query(
            query_string,
            strict=self.strict,
            max_length=self.config.length_limit,
        )


pass_context = click.make_pass_decorator(Context, ensure=True)
