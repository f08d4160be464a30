"""Utility modules for cardsearch."""
