"""
Draw distribution enumeration.

Given a tile bag and a draw size, enumerates every feasible multiset draw
together with its exact probability under sampling without replacement.

The probability of a combination is built the same way a player would
reason about it: draw the tiles of each type in turn, multiplying
(tiles of that type left) / (tiles left) for every tile taken, then multiply
by the number of orderings of the draw sequence that give the same multiset.
All arithmetic uses Fraction so a distribution always sums to exactly 1.

Usage:
    from dungeonquest.combinatorics import enumerate_draws

    for combo in enumerate_draws(bag, 4):
        print(combo.as_dict(), float(combo.probability))
"""

from fractions import Fraction
from typing import List, Tuple

from ..errors import ConfigurationError, InsufficientTilesError
from ..types import DrawCombination, TileBag
from .math_utils import multinomial_coefficient


def _count_combinations(
    available: Tuple[int, ...],
    num_tiles_to_draw: int,
) -> List[Tuple[int, ...]]:
    """Every count vector drawing exactly ``num_tiles_to_draw`` tiles.

    Recurses over tile types in canonical order; each type takes between 0 and
    min(remaining draws, available) tiles.
    """
    results: List[Tuple[int, ...]] = []

    def recurse(type_index: int, remaining: int, current: Tuple[int, ...]):
        if type_index == len(available):
            if remaining == 0:
                results.append(current)
            return
        max_can_draw = min(remaining, available[type_index])
        for count in range(max_can_draw + 1):
            recurse(type_index + 1, remaining - count, current + (count,))

    recurse(0, num_tiles_to_draw, ())
    return results


def draw_probability(tile_bag: TileBag, counts: Tuple[int, ...]) -> Fraction:
    """Exact probability of drawing the multiset ``counts`` from ``tile_bag``."""
    probability = Fraction(1)
    tiles_left = tile_bag.total
    bag = list(tile_bag.counts)

    for type_index, draw_count in enumerate(counts):
        for _ in range(draw_count):
            probability *= Fraction(bag[type_index], tiles_left)
            bag[type_index] -= 1
            tiles_left -= 1

    return probability * multinomial_coefficient(counts)


def enumerate_draws(tile_bag: TileBag, num_tiles_to_draw: int) -> List[DrawCombination]:
    """
    Enumerate the full probability distribution of one draw.

    Args:
        tile_bag: Tiles available, one count per type.
        num_tiles_to_draw: Number of tiles drawn without replacement.

    Returns:
        DrawCombination list in deterministic order (canonical tile order,
        ascending counts). Probabilities sum to exactly 1.

    Raises:
        ConfigurationError: If num_tiles_to_draw is negative.
        InsufficientTilesError: If the bag holds fewer tiles than requested.
            Callers check the bag total first and treat a short bag as a
            defense win.
    """
    if num_tiles_to_draw < 0:
        raise ConfigurationError(f"Draw size must be non-negative, got {num_tiles_to_draw}")
    if num_tiles_to_draw > tile_bag.total:
        raise InsufficientTilesError(
            f"Cannot draw {num_tiles_to_draw} tiles from a bag of {tile_bag.total} ({tile_bag.key})"
        )

    return [
        DrawCombination(counts, draw_probability(tile_bag, counts))
        for counts in _count_combinations(tile_bag.counts, num_tiles_to_draw)
    ]


__all__ = [
    'draw_probability',
    'enumerate_draws',
]
