"""
Request Validator Helpers
=========================

Small collection helpers shared by the validation engine.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, TypeVar

T = TypeVar("T")


def unique(
    items: Iterable[T],
    key: Optional[Callable[[T], Any]] = None,
) -> List[T]:
    """
    Get unique items preserving order.

    Args:
        items: Input iterable
        key: Optional key function

    Returns:
        List of unique items in order of first occurrence

    Example:
        >>> unique(["a", "b", "a"])
        ['a', 'b']
    """
    seen = set()
    result = []

    for item in items:
        k = key(item) if key else item
        if k not in seen:
            seen.add(k)
            result.append(item)

    return result


def iter_leaves(obj: Any, depth: int = -1) -> Iterator[Any]:
    """
    Yield the leaf values of nested mappings and lists, depth first.

    Args:
        obj: Mapping, list or scalar
        depth: Max depth to descend (-1 for unlimited)

    Example:
        >>> list(iter_leaves({"a": {"b": 1}, "c": [2, 3]}))
        [1, 2, 3]
    """
    if isinstance(obj, Mapping) and depth != 0:
        for value in obj.values():
            yield from iter_leaves(value, depth - 1 if depth > 0 else -1)
    elif isinstance(obj, (list, tuple)) and depth != 0:
        for value in obj:
            yield from iter_leaves(value, depth - 1 if depth > 0 else -1)
    else:
        yield obj


def deep_merge(base: dict, override: Mapping) -> None:
    """Deep merge override into base, in place."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            deep_merge(base[key], value)
        elif isinstance(value, Mapping):
            base[key] = {}
            deep_merge(base[key], value)
        else:
            base[key] = value
