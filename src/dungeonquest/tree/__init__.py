"""
Game-tree submodule.

This module provides:
- The five node kinds and their tagged serialization (nodes.py)
- Round-by-round tree construction (builder.py)
- Backward-induction outcome annotation (annotator.py)
- Build progress observers (observers.py)
- Explicit-stack walks and breadcrumb reconstruction (traversal.py)
"""

from .nodes import (
    DefenseNode,
    DrawNode,
    PlacementNode,
    OffenseTurnNode,
    ActionNode,
    GameTreeNode,
    NODE_TYPES,
    node_from_dict,
)

from .observers import (
    BuildObserver,
    LoggingObserver,
    CompositeObserver,
)

from .builder import (
    GameTreeBuilder,
    build_game_tree,
)

from .annotator import (
    Outcome,
    OutcomeAnnotator,
    annotate_tree,
)

from .traversal import (
    iter_nodes,
    node_at,
    nodes_along,
    placements_along,
    board_state_along,
    TerminalCounts,
    count_terminals,
    tree_stats,
)

__all__ = [
    # Nodes
    'DefenseNode',
    'DrawNode',
    'PlacementNode',
    'OffenseTurnNode',
    'ActionNode',
    'GameTreeNode',
    'NODE_TYPES',
    'node_from_dict',
    # Observers
    'BuildObserver',
    'LoggingObserver',
    'CompositeObserver',
    # Builder
    'GameTreeBuilder',
    'build_game_tree',
    # Annotator
    'Outcome',
    'OutcomeAnnotator',
    'annotate_tree',
    # Traversal
    'iter_nodes',
    'node_at',
    'nodes_along',
    'placements_along',
    'board_state_along',
    'TerminalCounts',
    'count_terminals',
    'tree_stats',
]
