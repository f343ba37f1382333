"""
Combinatorics submodule.

Provides exact factorial/multinomial helpers, the draw distribution
enumerator and the arrangement enumerator.
"""

from .math_utils import (
    factorial,
    multinomial_coefficient,
)

from .draws import (
    draw_probability,
    enumerate_draws,
)

from .arrangements import (
    unique_permutations,
    enumerate_arrangements,
)

__all__ = [
    'factorial',
    'multinomial_coefficient',
    'draw_probability',
    'enumerate_draws',
    'unique_permutations',
    'enumerate_arrangements',
]
