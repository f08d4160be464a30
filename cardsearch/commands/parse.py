"""Show how a search string is understood."""

from __future__ import annotations

import json

import click
from rich.markup import escape

from cardsearch.config import OUTPUT_FORMATS
from cardsearch.context import Context, pass_context
from cardsearch.exceptions import SearchParseError
from cardsearch.search.ast_nodes import Query, TextSearch
from cardsearch.utils.output import console, create_table, error, info, verbose

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1


def _describe_text_search(ts: TextSearch) -> str:
    """Render a TextSearch as a short human-readable line."""
    modifiers: list[str] = []
    if ts.is_exact:
        modifiers.append("exact")
    if ts.is_wildcard:
        modifiers.append("wildcard")
    if ts.is_regex:
        modifiers.append("regex")
    if ts.is_no_combining:
        modifiers.append("no-combining")
    if ts.is_word_boundary:
        modifiers.append("word")

    scope = f"[modifier]{escape(ts.field)}:[/modifier] " if ts.field else ""
    label = ", ".join(modifiers) if modifiers else "substring"
    prefix = "[negated]NOT[/negated] " if ts.is_negated else ""
    return f"{prefix}{scope}{escape(repr(ts.text))} ({label})"


def _query_rows(query: Query) -> list[tuple[str, str]]:
    """Flatten the non-empty buckets of a Query into (bucket, value) rows."""
    rows: list[tuple[str, str]] = []
    for ts in query.text_searches:
        rows.append(("text", _describe_text_search(ts)))
    for deck in query.decks_include:
        rows.append(("deck", escape(deck)))
    for deck in query.decks_exclude:
        rows.append(("deck", f"[negated]NOT[/negated] {escape(deck)}"))
    for tag in query.tags_include:
        rows.append(("tag", escape(tag)))
    for tag in query.tags_exclude:
        rows.append(("tag", f"[negated]NOT[/negated] {escape(tag)}"))
    for name, value in query.field_searches.items():
        rows.append(("field", f"{escape(name)} contains {escape(repr(value))}"))
    for state in query.states:
        rows.append(("state", escape(state)))
    for state in query.states_exclude:
        rows.append(("state", f"[negated]NOT[/negated] {escape(state)}"))
    for flag in query.flags:
        rows.append(("flag", str(flag)))
    for flag in query.flags_exclude:
        rows.append(("flag", f"[negated]NOT[/negated] {flag}"))
    for prop in query.property_filters:
        rows.append(("prop", escape(f"{prop.property} {prop.operator} {prop.value}")))
    return rows


@click.command("parse", context_settings={"ignore_unknown_options": True})
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    default=None,
    help="Output format (default: from config, else table)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str | None,
) -> None:
    """Parse a search string and show the compiled query.

    QUERY is a card search string. Multiple arguments are joined with
    spaces, and negated clauses such as -tag:marked need no "--".

    \b
    Syntax examples:
      cardsearch parse "deck:Default tag:vocabulary"
      cardsearch parse '"exact phrase" -tag:marked'
      cardsearch parse "front:re:[a-c]1 prop:ivl>=10"
      cardsearch parse 'field:Meaning:nc:"cafe au lait"'

    \b
    Output formats:
      --format table   Rich table of non-empty buckets (default)
      --format json    JSON object of every bucket
    """
    if output_format is None:
        output_format = ctx.config.default_format

    query_string = " ".join(query)
    verbose(f"Parsing {escape(repr(query_string))} (strict={ctx.strict})")

    try:
        parsed = ctx.compile(query_string)
    except SearchParseError as e:
        error("Could not understand search", hint=escape(str(e)))
        raise SystemExit(EXIT_PARSE_ERROR)

    if output_format == "json":
        click.echo(json.dumps(parsed.to_dict(), indent=2))
    else:
        _print_table(parsed, query_string)

    raise SystemExit(EXIT_SUCCESS)


def _print_table(query: Query, query_string: str) -> None:
    """Print the compiled query as a Rich table."""
    rows = _query_rows(query)
    if not rows:
        info(f"Search {escape(repr(query_string))} places no constraints (matches everything)")
        return

    info(f"Search: {escape(query_string)} ({len(rows)} constraints)")
    table = create_table(show_header=True, header_style="bold")
    table.add_column("Bucket", style="bucket", no_wrap=True)
    table.add_column("Value")
    for bucket, value in rows:
        table.add_row(bucket, value)
    console.print(table)
