"""
DungeonQuest Analyzer: Exhaustive game-tree analysis for DungeonQuest.

Builds the complete game tree of a two-player tile-placement game under a
small configuration and annotates every node with whether the offense can
still force a reachable win and how many resolved outcomes lie beneath it.

Submodules:
    combinatorics - Exact draw distributions and distinct arrangements
    search        - Offense action-space DFS and its memo cache
    tree          - Node types, builder, outcome annotator and traversal
    persistence   - JSON analysis documents and per-round draw logs

Usage:
    from dungeonquest import AnalyzerConfig, build_game_tree, annotate_tree
    root = build_game_tree(AnalyzerConfig(max_rounds=2))
    can_offense_win, num_outcomes = annotate_tree(root)
"""

__version__ = "0.1.0"

# Shared types
from .types import (
    Player,
    TileType,
    TILE_TYPE_ORDER,
    TileBag,
    DrawCombination,
    Arrangement,
    UnitType,
    UNIT_TYPE_ORDER,
    Unit,
    SpawnAction,
    MoveAction,
    ActionResult,
)

# Errors
from .errors import (
    AnalyzerError,
    ConfigurationError,
    InsufficientTilesError,
    SizeMismatchError,
    SchemaVersionError,
)

# Configuration
from .config import AnalyzerConfig, GOLD_PER_ROUND, parse_tile_bag

# Combinatorics
from .combinatorics import (
    factorial,
    multinomial_coefficient,
    draw_probability,
    enumerate_draws,
    unique_permutations,
    enumerate_arrangements,
)

# Search
from .search import ActionSpaceExplorer, ActionSpaceCache

# Tree
from .tree import (
    DefenseNode,
    DrawNode,
    PlacementNode,
    OffenseTurnNode,
    ActionNode,
    node_from_dict,
    BuildObserver,
    LoggingObserver,
    CompositeObserver,
    GameTreeBuilder,
    build_game_tree,
    OutcomeAnnotator,
    annotate_tree,
    iter_nodes,
    count_terminals,
    tree_stats,
)

# Persistence
from .persistence import (
    AnalysisDocument,
    save_analysis,
    load_analysis,
    DrawLogObserver,
    clear_log_dir,
)

__all__ = [
    '__version__',
    # Types
    'Player',
    'TileType',
    'TILE_TYPE_ORDER',
    'TileBag',
    'DrawCombination',
    'Arrangement',
    'UnitType',
    'UNIT_TYPE_ORDER',
    'Unit',
    'SpawnAction',
    'MoveAction',
    'ActionResult',
    # Errors
    'AnalyzerError',
    'ConfigurationError',
    'InsufficientTilesError',
    'SizeMismatchError',
    'SchemaVersionError',
    # Config
    'AnalyzerConfig',
    'GOLD_PER_ROUND',
    'parse_tile_bag',
    # Combinatorics
    'factorial',
    'multinomial_coefficient',
    'draw_probability',
    'enumerate_draws',
    'unique_permutations',
    'enumerate_arrangements',
    # Search
    'ActionSpaceExplorer',
    'ActionSpaceCache',
    # Tree
    'DefenseNode',
    'DrawNode',
    'PlacementNode',
    'OffenseTurnNode',
    'ActionNode',
    'node_from_dict',
    'BuildObserver',
    'LoggingObserver',
    'CompositeObserver',
    'GameTreeBuilder',
    'build_game_tree',
    'OutcomeAnnotator',
    'annotate_tree',
    'iter_nodes',
    'count_terminals',
    'tree_stats',
    # Persistence
    'AnalysisDocument',
    'save_analysis',
    'load_analysis',
    'DrawLogObserver',
    'clear_log_dir',
]
