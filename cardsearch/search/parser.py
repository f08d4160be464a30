"""Compile flashcard search syntax into a Query."""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from cardsearch.exceptions import (
    EmptyFieldNameError,
    InvalidFlagValueError,
    InvalidPropertyExpressionError,
    QueryTooLongError,
    UnknownStateError,
)
from cardsearch.search.ast_nodes import OPERATORS, PropertyFilter, Query, TextSearch
from cardsearch.search.tokenizer import tokenize, unquote

logger = logging.getLogger(__name__)

# States accepted by ``is:`` in strict mode
KNOWN_STATES: frozenset[str] = frozenset(
    {
        "new",
        "learn",
        "review",
        "relearn",
        "due",
        "suspended",
        "buried",
        "marked",
    }
)

# Card properties accepted by ``prop:`` in strict mode
KNOWN_PROPERTIES: frozenset[str] = frozenset({"ivl", "due", "lapses", "reps", "ease", "pos"})

# Note fields with their own prefix; anything else goes through ``field:NAME:``
RESERVED_FIELDS: tuple[str, ...] = ("front", "back")

# Prefixes that turn a field scope into a text search instead of a plain match
_MODIFIER_PREFIXES: tuple[str, ...] = ("re:", "nc:", "w:")

# ``-prop:`` flips the comparison
_NEGATED_OPERATORS: dict[str, str] = {
    "=": "!=",
    "!=": "=",
    ">": "<=",
    "<=": ">",
    "<": ">=",
    ">=": "<",
}

_OPERATOR_CHARS = frozenset("=!<>")
_FLAG_RE = re.compile(r"[0-9]+")
_PROPERTY_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
# Field name in ``field:NAME:``; quoted regions may contain colons
_FIELD_NAME_RE = re.compile(r'(?:"(?:\\.|[^"\\])*"|[^:"])*')

MAX_FLAG = 7


def parse_query(
    query_string: str,
    *,
    strict: bool = False,
    max_length: int | None = None,
) -> Query:
    """Parse a search string into a Query.

    Clauses are ANDed together. Parsing stops at the first bad clause and
    nothing is returned in that case, so a caller can never execute a
    half-compiled query.

    Args:
        query_string: The search string as typed by the user.
        strict: Reject ``is:`` states and ``prop:`` properties outside
            ``KNOWN_STATES`` / ``KNOWN_PROPERTIES``.
        max_length: Optional cap on the input length.

    Returns:
        The compiled Query. Empty input gives an empty Query.

    Raises:
        SearchParseError: If the query cannot be parsed. The concrete
            subclass names the problem.
    """
    if max_length is not None and len(query_string) > max_length:
        raise QueryTooLongError(query_string, len(query_string), max_length)

    source = query_string.strip()
    query = Query()
    for clause in tokenize(source):
        classify_clause(query, clause.negated, clause.text, strict=strict, source=source)
    return query


def classify_clause(
    query: Query,
    negated: bool,
    text: str,
    *,
    strict: bool = False,
    source: str | None = None,
) -> None:
    """Add one clause to ``query``.

    Prefixes are matched case-sensitively in a fixed order; the first
    match decides the bucket. Unprefixed text falls through to a generic
    text search.

    Args:
        query: Accumulator to append to.
        negated: Whether the clause had a leading ``-``.
        text: Clause text with the ``-`` removed.
        strict: See :func:`parse_query`.
        source: Full query string, used in error messages.
    """
    if source is None:
        source = text
    logger.debug("Classifying clause %r (negated=%s)", text, negated)

    if text.startswith("deck:"):
        name, _ = unquote(text[len("deck:") :])
        if name:
            (query.decks_exclude if negated else query.decks_include).append(name)

    elif text.startswith("tag:"):
        tag, _ = unquote(text[len("tag:") :])
        if tag:
            (query.tags_exclude if negated else query.tags_include).append(tag)

    elif text.startswith("is:"):
        state, _ = unquote(text[len("is:") :])
        if strict and state.lower() not in KNOWN_STATES:
            raise UnknownStateError(source, state)
        (query.states_exclude if negated else query.states).append(state)

    elif text.startswith("flag:"):
        flag = _parse_flag(source, text[len("flag:") :])
        (query.flags_exclude if negated else query.flags).append(flag)

    elif text.startswith("prop:"):
        prop = _parse_property(source, text[len("prop:") :], strict=strict)
        if negated:
            prop = replace(prop, operator=_NEGATED_OPERATORS[prop.operator])
        query.property_filters.append(prop)

    elif text.startswith(tuple(f"{name}:" for name in RESERVED_FIELDS)):
        field_name, _, rest = text.partition(":")
        _classify_scoped(query, negated, rest, field_name)

    elif text.startswith("field:"):
        body = text[len("field:") :]
        match = _FIELD_NAME_RE.match(body)
        name, _ = unquote(match.group(0))
        rest = body[match.end() :]
        if not rest.startswith(":") or not name:
            raise EmptyFieldNameError(source, text)
        rest = rest[1:]
        _classify_scoped(query, negated, rest, name)

    else:
        _classify_text(query, negated, text, "")


def _classify_scoped(query: Query, negated: bool, text: str, field_name: str) -> None:
    """Handle the part after ``front:``, ``back:`` or ``field:NAME:``.

    A modifier prefix makes it a field-scoped text search. Otherwise it is
    a plain field match, which has no negated form.
    """
    if text.startswith(_MODIFIER_PREFIXES):
        _classify_text(query, negated, text, field_name)
        return

    value, _ = unquote(text)
    query.field_searches[field_name] = value


def _classify_text(
    query: Query,
    negated: bool,
    text: str,
    field_name: str,
    *,
    no_combining: bool = False,
    word_boundary: bool = False,
) -> None:
    """Strip ``nc:``/``w:`` modifiers one at a time, then emit a TextSearch."""
    if text.startswith("re:"):
        pattern, _ = unquote(text[len("re:") :])
        if not pattern:
            return
        query.text_searches.append(
            TextSearch(
                text=pattern,
                field=field_name,
                is_regex=True,
                is_no_combining=no_combining,
                is_word_boundary=word_boundary,
                is_negated=negated,
            )
        )
        return

    if text.startswith("nc:") and not no_combining:
        _classify_text(
            query,
            negated,
            text[len("nc:") :],
            field_name,
            no_combining=True,
            word_boundary=word_boundary,
        )
        return

    if text.startswith("w:") and not word_boundary:
        _classify_text(
            query,
            negated,
            text[len("w:") :],
            field_name,
            no_combining=no_combining,
            word_boundary=True,
        )
        return

    value, quoted = unquote(text)
    if not value:
        return
    query.text_searches.append(
        TextSearch(
            text=value,
            field=field_name,
            is_exact=quoted,
            is_wildcard=not quoted and "*" in value,
            is_no_combining=no_combining,
            is_word_boundary=word_boundary,
            is_negated=negated,
        )
    )


def _parse_flag(source: str, value: str) -> int:
    """Parse a ``flag:`` value in [0, 7]."""
    if not _FLAG_RE.fullmatch(value):
        raise InvalidFlagValueError(source, value)
    flag = int(value)
    if flag > MAX_FLAG:
        raise InvalidFlagValueError(source, value)
    return flag


def split_property_expression(expression: str) -> tuple[str, str, str] | None:
    """Split ``ivl>=10`` into ``("ivl", ">=", "10")``.

    The first operator character starts the operator; two-character
    operators win over their one-character prefixes. Returns None when
    there is no recognized operator.
    """
    for index, char in enumerate(expression):
        if char not in _OPERATOR_CHARS:
            continue
        for operator in OPERATORS:
            if expression.startswith(operator, index):
                return expression[:index], operator, expression[index + len(operator) :]
        # A lone "!" is not an operator
        return None
    return None


def _parse_property(source: str, expression: str, *, strict: bool) -> PropertyFilter:
    """Parse a ``prop:`` body into a PropertyFilter."""
    parts = split_property_expression(expression)
    if parts is None:
        raise InvalidPropertyExpressionError(source, expression, "no comparison operator")

    prop, operator, value = parts
    if not _PROPERTY_NAME_RE.fullmatch(prop):
        raise InvalidPropertyExpressionError(source, expression, "missing or invalid property name")
    if not value:
        raise InvalidPropertyExpressionError(source, expression, "missing value")
    if value[0] in _OPERATOR_CHARS:
        raise InvalidPropertyExpressionError(
            source, expression, f"unrecognized operator '{operator}{value[0]}'"
        )

    if strict:
        if prop not in KNOWN_PROPERTIES:
            valid = ", ".join(sorted(KNOWN_PROPERTIES))
            raise InvalidPropertyExpressionError(
                source, expression, f"unknown property '{prop}' (valid: {valid})"
            )
        if not _NUMBER_RE.fullmatch(value):
            raise InvalidPropertyExpressionError(source, expression, "value must be numeric")

    return PropertyFilter(property=prop, operator=operator, value=value)
