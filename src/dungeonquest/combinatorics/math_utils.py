"""
Exact integer combinatorics.

Pure helpers with no state; used by the draw enumerator to weight
without-replacement draw sequences.
"""

import math
from typing import Iterable


def factorial(n: int) -> int:
    """n! for n >= 0.

    Raises:
        ValueError: If n is negative.
    """
    if n < 0:
        raise ValueError(f"factorial() not defined for negative values: {n}")
    if n <= 1:
        return 1
    return math.factorial(n)


def multinomial_coefficient(counts: Iterable[int]) -> int:
    """Number of distinct orderings of a multiset: (sum k)! / prod(k!).

    Example:
        multinomial_coefficient([2, 2]) == 6  # "AABB" has 6 orderings
    """
    counts = list(counts)
    if any(c < 0 for c in counts):
        raise ValueError(f"multinomial coefficient undefined for negative counts: {counts}")
    result = factorial(sum(counts))
    for count in counts:
        result //= factorial(count)
    return result


__all__ = [
    'factorial',
    'multinomial_coefficient',
]
