"""Tests for the sampling pool."""

import random

import pytest

from random_items.core.pool import AdmittedItem, EmptyPoolError, SamplingPool


def _make_pool(n: int = 10) -> SamplingPool:
    return SamplingPool(AdmittedItem(f"Item {i}", f"id-{i}") for i in range(n))


def test_size_and_iteration():
    pool = _make_pool(4)
    assert pool.size() == 4
    assert len(pool) == 4
    assert [item.identifier for item in pool] == ["id-0", "id-1", "id-2", "id-3"]


def test_item_at_bounds():
    pool = _make_pool(3)
    assert pool.item_at(2).title == "Item 2"
    with pytest.raises(IndexError):
        pool.item_at(3)
    with pytest.raises(IndexError):
        pool.item_at(-1)


def test_draw_empty_raises():
    with pytest.raises(EmptyPoolError):
        SamplingPool().draw(random.Random(0))


def test_draw_is_uniform_chi_square():
    k = 10
    n = 20_000
    pool = _make_pool(k)
    rng = random.Random(1234)
    counts = {item.identifier: 0 for item in pool}
    for _ in range(n):
        counts[pool.draw(rng).identifier] += 1

    expected = n / k
    chi_square = sum((c - expected) ** 2 / expected for c in counts.values())
    # df = 9, p = 0.001
    assert chi_square < 27.88


def test_multiplicity_weights_draws():
    pool = SamplingPool(
        [AdmittedItem("Coin", "a"), AdmittedItem("Coin", "b"), AdmittedItem("Duck", "c")]
    )
    rng = random.Random(7)
    titles = [pool.draw(rng).title for _ in range(3000)]
    assert titles.count("Coin") > titles.count("Duck") * 1.5


def test_title_counts():
    pool = SamplingPool([AdmittedItem("Coin", "a"), AdmittedItem("Coin", "b")])
    assert pool.title_counts() == {"Coin": 2}
