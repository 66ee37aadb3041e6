"""Uniform selection of winners without replacement."""

from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Minimal interface the selector needs from a random generator.

    :class:`random.Random` satisfies it, so does any test double that returns
    integers in ``[start, stop)``.
    """

    def randrange(self, start: int, stop: int) -> int: ...


_default_source = random.Random()


def draw_count_for(prize_count: int, pool_size: int) -> int:
    """Number of winners a round can draw: ``min(prize_count, pool_size)``, never negative."""
    return max(0, min(prize_count, pool_size))


def sample_without_replacement(
    pool: Sequence[T],
    count: int,
    rng: Optional[RandomSource] = None,
) -> list[T]:
    """Return ``count`` distinct items of ``pool`` chosen uniformly at random.

    Runs a partial Fisher-Yates shuffle over a copy of ``pool``: only the first
    ``count`` positions are settled, which keeps the uniform-probability
    guarantee of a full shuffle without paying for the tail.

    Parameters
    ----------
    pool : Sequence[T]
        Candidates. Never modified.
    count : int
        Number of items to select; must be between 0 and ``len(pool)``.
    rng : Optional[RandomSource], default: None
        Random source used for every swap. A module-level
        :class:`random.Random` is used when omitted.

    Returns
    -------
    list[T]
        Selected items in draw order.

    Raises
    ------
    ValueError
        If ``count`` is negative or larger than the pool.
    """

    size = len(pool)
    if count < 0:
        raise ValueError("count must be non-negative")
    if count > size:
        raise ValueError(f"cannot draw {count} items from a pool of {size}")

    source = rng or _default_source
    items = list(pool)
    for i in range(count):
        j = source.randrange(i, size)
        if not i <= j < size:
            raise ValueError(f"random source returned {j}, outside [{i}, {size})")
        items[i], items[j] = items[j], items[i]
    return items[:count]


__all__ = ["RandomSource", "draw_count_for", "sample_without_replacement"]
