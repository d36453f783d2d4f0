"""Order-preserving deduplication of harvested values."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")


def dedupe_by(values: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Keep the first value seen for every distinct ``key(value)``."""

    seen: set[Hashable] = set()
    unique: list[T] = []
    for value in values:
        marker = key(value)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(value)
    return unique


def dedupe(values: Iterable[T]) -> list[T]:
    """Return each distinct value once, in order of first occurrence."""

    return dedupe_by(values, lambda value: value)


__all__ = ["dedupe", "dedupe_by"]
