"""Shuffle engine — pure business logic, no I/O.

Provides:
- Fisher–Yates shuffle (unbiased, in place)
- ``permute``: shuffled copy, input untouched
- ``shuffle_order``: a permutation of linear positions
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Fisher–Yates Shuffle
# ---------------------------------------------------------------------------

def fisher_yates_shuffle(
    items: List[T],
    rng: Optional[random.Random] = None,
) -> List[T]:
    """In-place unbiased Fisher–Yates (Knuth) shuffle.

    Parameters
    ----------
    items:
        List to shuffle.  Will be **mutated** in place.
    rng:
        Optional ``random.Random`` instance for deterministic testing.

    Returns
    -------
    The same list (shuffled in place) for convenience.
    """
    rng = rng or random.Random()
    n = len(items)
    for i in range(n - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def permute(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled **new** list (does not mutate input)."""
    return fisher_yates_shuffle(list(items), rng=rng)


def shuffle_order(n: int, rng: Optional[random.Random] = None) -> List[int]:
    """Random permutation of ``range(n)``.

    ``order[k]`` is the linear position of the k-th song in shuffle order.
    """
    return permute(range(n), rng=rng)
