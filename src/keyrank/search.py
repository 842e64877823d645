"""Weighted multi-key ranked search over arbitrary items."""

import logging
import math
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .fuzzy import fuzzy_match, is_subsequence

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, bytes, int, float, bool, type(None))

Getter = Callable[[Any, str], Any]


@dataclass(frozen=True)
class KeySpec:
    """A searchable field of an item and the weight of its score."""

    path: str
    weight: float = 1

    def __post_init__(self):
        if (
            isinstance(self.weight, bool)
            or not isinstance(self.weight, (int, float))
            or not math.isfinite(self.weight)
            or self.weight <= 0
        ):
            raise ValueError(f"Weight for key '{self.path}' must be a positive finite number, got {self.weight}")

    @classmethod
    def parse(cls, text: str) -> "KeySpec":
        """Parse 'PATH' or 'PATH:WEIGHT'.

        A suffix that is not a number stays part of the path, so 'ns:name'
        is a path with the default weight.
        """
        path, sep, weight = text.rpartition(":")
        if not sep:
            return cls(text)
        try:
            value = float(weight)
        except ValueError:
            return cls(text)
        return cls(path, value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeySpec":
        """Build from {'path': ..., 'weight': ...} ('key' accepted for path)."""
        path = data.get("path", data.get("key"))
        if not isinstance(path, str):
            raise ValueError(f"Key spec is missing a path: {dict(data)!r}")
        return cls(path, data.get("weight", 1))


@dataclass
class SearchResult:
    """A matched item and its best weighted score."""

    score: float
    item: Any


def _lookup(obj: Any, segment: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(segment)
    if isinstance(obj, SCALAR_TYPES):
        return None
    if isinstance(obj, Sequence):
        if segment.isdecimal() and int(segment) < len(obj):
            return obj[int(segment)]
        return None
    return getattr(obj, segment, None)


def get_value(item: Any, path: str) -> Any:
    """
    Read the value at path from item.

    Scalars pass through unchanged. A mapping key equal to the whole path
    wins over dotted lookup, so flat keys containing dots still resolve.
    Returns None if any segment is missing.
    """
    if isinstance(item, SCALAR_TYPES):
        return item

    if isinstance(item, Mapping) and path in item:
        return item[path]

    result = item
    for segment in path.split("."):
        if result is None:
            break
        result = _lookup(result, segment)
    return result


def iter_candidates(
    item: Any,
    keys: Iterable[KeySpec],
    getter: Getter = get_value,
) -> Iterator[tuple[str, float]]:
    """Yield (value, weight) for every searchable string of item."""
    for key in keys:
        value = getter(item, key.path)
        if isinstance(value, (list, tuple)):
            for element in value:
                if isinstance(element, str) and element:
                    yield element, key.weight
        elif isinstance(value, str) and value:
            yield value, key.weight


def score_item(
    pattern: str,
    item: Any,
    keys: Iterable[KeySpec],
    getter: Getter = get_value,
) -> float | None:
    """Return the best weighted score of item, or None if nothing matched."""
    best = None
    for value, weight in iter_candidates(item, keys, getter):
        if not is_subsequence(pattern, value):
            continue
        matched, score = fuzzy_match(pattern, value)
        if not matched:
            continue
        score *= weight
        if best is None or score > best:
            best = score
    return best


def search(
    pattern: str,
    items: Iterable[Any],
    keys: Sequence[KeySpec],
    getter: Getter = get_value,
    limit: int | None = None,
) -> list[SearchResult]:
    """
    Rank items by their best weighted fuzzy match against pattern.

    Items with no matching field are dropped. Results are sorted by score
    descending; equal scores keep input order. Items are never copied.
    """
    results = []
    total = 0
    for item in items:
        total += 1
        score = score_item(pattern, item, keys, getter)
        if score is not None:
            results.append(SearchResult(score, item))

    results.sort(key=lambda r: -r.score)
    logger.debug("Search %r matched %d of %d items", pattern, len(results), total)

    if limit:
        return results[:limit]
    return results
