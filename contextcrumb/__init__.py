"""Rank repository files by relevance and fit them into a token budget."""

__version__ = "0.1.0"
