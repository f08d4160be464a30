"""cardsearch: compile flashcard search strings into structured queries."""

__version__ = "0.1.0"
