"""Feed merger - combines per-source batches into one shuffled batch.

Example:
    >>> import random
    >>> from pawfeed.merger import merge
    >>> merge([[1, 2], [3]], rng=random.Random(7)) in ([1, 2, 3], [1, 3, 2], [2, 1, 3], [2, 3, 1], [3, 1, 2], [3, 2, 1])
    True
    >>> merge([])
    []
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")


def merge(batches: Iterable[Iterable[T]], *, rng: random.Random | None = None) -> list[T]:
    """Concatenate ``batches`` and shuffle the result in place.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so items from the
    same source are not kept together. The inputs are not modified.

    Args:
        batches: Per-source batches, in any order.
        rng: Random source; pass a seeded ``random.Random`` for
            reproducible output. Defaults to the module-level generator.

    Returns:
        A new list holding every input item exactly once.
    """
    merged = [item for batch in batches for item in batch]
    (rng or random).shuffle(merged)
    return merged
