"""
Search algorithms for offense turns.

This module provides:
- Exhaustive action-space DFS (action_space.py)
- Transposition table for memoizing explored turns (transposition.py)
"""

from .action_space import (
    ORTHOGONAL_DELTAS,
    dedupe_results,
    ActionSpaceExplorer,
)

from .transposition import (
    ActionSpaceEntry,
    ActionSpaceCache,
)

__all__ = [
    # Action space
    'ORTHOGONAL_DELTAS',
    'dedupe_results',
    'ActionSpaceExplorer',
    # Transposition
    'ActionSpaceEntry',
    'ActionSpaceCache',
]
