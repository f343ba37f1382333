"""
Arrangement enumeration.

Lays a drawn multiset out over the ordered board slots. Identical tiles are
indistinguishable, so "BBSS" is produced once rather than 2! * 2! times.
Mirrored layouts are kept distinct; there is no board-symmetry reduction.
"""

from fractions import Fraction
from typing import List, Tuple

from ..errors import SizeMismatchError
from ..types import Arrangement, DrawCombination, TileType


def unique_permutations(tiles: Tuple[TileType, ...], target_length: int) -> List[Tuple[TileType, ...]]:
    """All distinguishable orderings of ``tiles``.

    At each position a tile type is tried at most once, which is what
    collapses permutations of identical tiles.
    """
    results: List[Tuple[TileType, ...]] = []

    def recurse(remaining: Tuple[TileType, ...], current: Tuple[TileType, ...]):
        if len(current) == target_length:
            results.append(current)
            return
        used = set()
        for i, tile in enumerate(remaining):
            if tile in used:
                continue
            used.add(tile)
            recurse(remaining[:i] + remaining[i + 1:], current + (tile,))

    recurse(tuple(tiles), ())
    return results


def enumerate_arrangements(combination: DrawCombination, num_locations: int) -> List[Arrangement]:
    """
    Enumerate every distinguishable placement of ``combination``.

    Args:
        combination: The drawn multiset.
        num_locations: Ordered board slots to fill; must equal the multiset size.

    Returns:
        num_locations! / prod(count!) arrangements, each with the uniform
        random-placement probability 1 / (number of arrangements).

    Raises:
        SizeMismatchError: If the multiset size differs from num_locations.
    """
    tiles = combination.tiles()
    if len(tiles) != num_locations:
        raise SizeMismatchError(
            f"Combination size ({len(tiles)}) must match numLocations ({num_locations})"
        )

    permutations = unique_permutations(tiles, num_locations)
    probability = Fraction(1, len(permutations))
    return [Arrangement(p, probability) for p in permutations]


__all__ = [
    'unique_permutations',
    'enumerate_arrangements',
]
