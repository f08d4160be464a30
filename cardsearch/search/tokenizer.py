"""Split a search string into clauses using the Lark clause grammar."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedInput

from cardsearch.exceptions import SearchParseError, UnterminatedQuoteError

logger = logging.getLogger(__name__)

# One quoted region (group 1, escapes intact) or a run of bare text (group 2)
_SEGMENT_RE = re.compile(r'"((?:\\.|[^"\\])*)"|([^"]+)')


@dataclass(frozen=True)
class RawClause:
    """One clause as typed, with its leading ``-`` split off."""

    negated: bool
    text: str


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("cardsearch.search").joinpath("grammar.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

_parser = Lark(
    _GRAMMAR_TEXT,
    parser="lalr",
    lexer="contextual",
)


class _ClauseTransformer(Transformer):
    """Transform the Lark parse tree into RawClause objects."""

    def start(self, items: list[Any]) -> list[RawClause]:
        # Clauses are implicitly ANDed, so a bare AND keyword adds nothing
        return [
            item
            for item in items
            if isinstance(item, RawClause) and not _is_and_keyword(item)
        ]

    def clause(self, items: list[Any]) -> RawClause:
        # items is [NEGATE, BODY] or [BODY]
        return RawClause(negated=len(items) == 2, text=str(items[-1]))

    def BODY(self, token: Token) -> str:
        return str(token)


def _is_and_keyword(clause: RawClause) -> bool:
    return not clause.negated and clause.text.upper() == "AND"


_transformer = _ClauseTransformer()


def tokenize(query: str) -> list[RawClause]:
    """Scan a search string into clauses.

    Args:
        query: Raw search string.

    Returns:
        Clauses in input order, without bare ``AND`` keywords. Empty or
        whitespace-only input yields ``[]``.

    Raises:
        UnterminatedQuoteError: If a ``"`` is never closed.
        SearchParseError: For any other lexical problem, such as a
            dangling or doubled ``-``.
    """
    query = query.strip()
    if not query:
        return []

    try:
        tree = _parser.parse(query)
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise UnterminatedQuoteError(query, e.pos_in_stream) from e
        raise SearchParseError(query, str(e)) from e
    except UnexpectedInput as e:
        raise SearchParseError(query, str(e)) from e

    clauses = _transformer.transform(tree)
    logger.debug("Tokenized %d clause(s) from %r", len(clauses), query)
    return clauses


def unquote(value: str) -> tuple[str, bool]:
    """Strip quote delimiters from a clause value.

    ``\\"`` inside a quoted region becomes ``"``; other backslashes are
    kept so regex escapes survive.

    Returns:
        Tuple of (text, quoted) where ``quoted`` is True only when the
        whole value is a single quoted region.
    """
    if '"' not in value:
        return value, False

    parts: list[str] = []
    quoted_regions = 0
    for match in _SEGMENT_RE.finditer(value):
        inner, bare = match.group(1), match.group(2)
        if inner is not None:
            quoted_regions += 1
            parts.append(inner.replace('\\"', '"'))
        else:
            parts.append(bare)

    whole = quoted_regions == 1 and len(parts) == 1
    return "".join(parts), whole
