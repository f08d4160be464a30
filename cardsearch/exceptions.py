"""Exception hierarchy for cardsearch."""

from pathlib import Path


class CardSearchError(Exception):
    """Base exception for all cardsearch errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all cardsearch errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(CardSearchError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Search Errors
class SearchParseError(CardSearchError):
    """Raised when a search query cannot be parsed.

    A query that raised this error must not be executed; there is no
    partially-compiled result to fall back on.
    """

    def __init__(self, query: str, message: str) -> None:
        self.query = query
        self.message = message
        super().__init__(f"Failed to parse search query '{query}': {message}")


class UnterminatedQuoteError(SearchParseError):
    """A quoted region never closes before the end of input."""

    def __init__(self, query: str, position: int) -> None:
        self.position = position
        super().__init__(query, f"unterminated quote at position {position}")


class InvalidFlagValueError(SearchParseError):
    """``flag:`` value is not an integer in [0, 7]."""

    def __init__(self, query: str, value: str) -> None:
        self.value = value
        super().__init__(query, f"invalid flag '{value}' (must be 0-7)")


class InvalidPropertyExpressionError(SearchParseError):
    """``prop:`` body is not ``<property><operator><value>``."""

    def __init__(self, query: str, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(query, f"invalid property filter '{expression}': {reason}")


class EmptyFieldNameError(SearchParseError):
    """``field:`` clause is missing its field name segment."""

    def __init__(self, query: str, clause: str) -> None:
        self.clause = clause
        super().__init__(query, f"missing field name in '{clause}' (expected field:NAME:VALUE)")


class UnknownStateError(SearchParseError):
    """``is:`` names a state outside the known set (strict mode only)."""

    def __init__(self, query: str, state: str) -> None:
        self.state = state
        super().__init__(query, f"unknown card state '{state}'")


class QueryTooLongError(SearchParseError):
    """Input exceeds the caller's length cap."""

    def __init__(self, query: str, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(query, f"query is {length} characters long (limit {limit})")
