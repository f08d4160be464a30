"""Data classes for compiled search queries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

# Comparators accepted by ``prop:``, longest first so that scanning
# never splits ``>=`` into ``>`` followed by ``=``.
OPERATORS: tuple[str, ...] = (">=", "<=", "!=", "=", ">", "<")


@dataclass(frozen=True)
class TextSearch:
    """A free-text match, optionally scoped to one note field.

    Matching strategies:
        - plain substring (no flag set)
        - ``is_exact``: quoted phrase
        - ``is_wildcard``: ``*`` matches any run of characters
        - ``is_regex``: ``re:`` pattern

    ``is_no_combining`` (``nc:``) and ``is_word_boundary`` (``w:``) are
    orthogonal modifiers. ``text`` is stored exactly as typed; accent
    folding for ``nc:`` happens in the execution layer.
    """

    text: str
    field: str = ""
    is_exact: bool = False
    is_wildcard: bool = False
    is_regex: bool = False
    is_no_combining: bool = False
    is_word_boundary: bool = False
    is_negated: bool = False


@dataclass(frozen=True)
class PropertyFilter:
    """A comparison against a card property like ``prop:ivl>=10``.

    ``value`` is raw text; numeric coercion belongs to the execution layer.
    """

    property: str
    operator: str
    value: str


@dataclass
class Query:
    """Compiled search query.

    Every clause lands in exactly one bucket. All buckets combine with
    AND: two ``tag:`` clauses require both tags, two ``deck:`` clauses
    require both deck patterns to match.

    The parser fills a fresh instance per call and never touches it again,
    so the returned Query belongs to the caller. It stays mutable so that
    :func:`~cardsearch.search.parser.classify_clause` can append to it;
    callers that share one across threads should treat it as read-only.
    """

    text_searches: list[TextSearch] = field(default_factory=list)
    decks_include: list[str] = field(default_factory=list)
    decks_exclude: list[str] = field(default_factory=list)
    tags_include: list[str] = field(default_factory=list)
    tags_exclude: list[str] = field(default_factory=list)
    field_searches: dict[str, str] = field(default_factory=dict)
    states: list[str] = field(default_factory=list)
    states_exclude: list[str] = field(default_factory=list)
    flags: list[int] = field(default_factory=list)
    flags_exclude: list[int] = field(default_factory=list)
    property_filters: list[PropertyFilter] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when the query places no constraint at all."""
        return not any(
            (
                self.text_searches,
                self.decks_include,
                self.decks_exclude,
                self.tags_include,
                self.tags_exclude,
                self.field_searches,
                self.states,
                self.states_exclude,
                self.flags,
                self.flags_exclude,
                self.property_filters,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return asdict(self)
