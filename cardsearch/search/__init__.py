"""Search string compiler for flashcard collections."""

from cardsearch.exceptions import SearchParseError
from cardsearch.search.ast_nodes import PropertyFilter, Query, TextSearch
from cardsearch.search.parser import KNOWN_PROPERTIES, KNOWN_STATES, classify_clause, parse_query
from cardsearch.search.tokenizer import RawClause, tokenize

__all__ = [
    "KNOWN_PROPERTIES",
    "KNOWN_STATES",
    "PropertyFilter",
    "Query",
    "RawClause",
    "SearchParseError",
    "TextSearch",
    "classify_clause",
    "parse_query",
    "tokenize",
]
