"""Fuzzy type-ahead ranking of items over weighted keys."""

from .fuzzy import fuzzy_match, fuzzy_match_positions, is_subsequence
from .search import KeySpec, SearchResult, get_value, search

__all__ = [
    "KeySpec",
    "SearchResult",
    "fuzzy_match",
    "fuzzy_match_positions",
    "get_value",
    "is_subsequence",
    "search",
]
