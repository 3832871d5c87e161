"""Admitted items and the pool they are drawn from."""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class EmptyPoolError(Exception):
    """A draw was requested from a pool with no items."""


@dataclass(frozen=True)
class AdmittedItem:
    title: str
    identifier: str


class SamplingPool:
    """Snapshot of admitted items, drawn from uniformly by index.

    Duplicate titles are kept, so an item admitted twice is twice as likely
    to be drawn.
    """

    def __init__(self, items: Iterable[AdmittedItem] = ()) -> None:
        self._items: list[AdmittedItem] = list(items)

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AdmittedItem]:
        return iter(self._items)

    def item_at(self, index: int) -> AdmittedItem:
        if not 0 <= index < len(self._items):
            raise IndexError(f"pool index {index} out of range (size {len(self._items)})")
        return self._items[index]

    def draw(self, rng: random.Random) -> AdmittedItem:
        if not self._items:
            raise EmptyPoolError("Cannot draw from an empty pool")
        return self._items[rng.randrange(len(self._items))]

    def title_counts(self) -> dict[str, int]:
        return dict(Counter(item.title for item in self._items))
