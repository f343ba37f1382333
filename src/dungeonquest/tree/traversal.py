"""
Top-down traversal helpers.

Nodes hold no parent pointers, so breadcrumbs are rebuilt by walking from
the root along a path of child indices. Walks use an explicit stack and do
not depend on recursion depth.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from .nodes import (
    ActionNode,
    DefenseNode,
    GameTreeNode,
    NODE_TYPES,
    PlacementNode,
)

Path = Tuple[int, ...]


def iter_nodes(root: GameTreeNode) -> Iterator[Tuple[Path, GameTreeNode]]:
    """Yield (path, node) for every node in pre-order."""
    stack: List[Tuple[Path, GameTreeNode]] = [((), root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        children = node.children()
        for index in range(len(children) - 1, -1, -1):
            stack.append((path + (index,), children[index]))


def node_at(root: GameTreeNode, path: Sequence[int]) -> GameTreeNode:
    """Follow ``path`` (child indices) from ``root``."""
    node = root
    for depth, index in enumerate(path):
        children = node.children()
        if not 0 <= index < len(children):
            raise IndexError(
                f"Path step {depth} selects child {index} of a {node.KIND} with {len(children)} children"
            )
        node = children[index]
    return node


def nodes_along(root: GameTreeNode, path: Sequence[int]) -> List[GameTreeNode]:
    """Every node from ``root`` down to ``node_at(root, path)``, inclusive."""
    nodes = [root]
    for depth in range(len(path)):
        nodes.append(node_at(nodes[-1], path[depth:depth + 1]))
    return nodes


def placements_along(root: GameTreeNode, path: Sequence[int]) -> List[str]:
    """Placement strings chosen on the way down ``path``, oldest first."""
    return [n.placement for n in nodes_along(root, path) if isinstance(n, PlacementNode)]


def board_state_along(root: GameTreeNode, path: Sequence[int]) -> str:
    """The board's tiles, row-major from row 0, as of the end of ``path``."""
    return "".join(placements_along(root, path))


@dataclass
class TerminalCounts:
    """
    Leaf census of a tree.

    Attributes:
        offense_wins: ActionNodes where a unit reached the goal row.
        defense_wins: DefenseNodes where the bag ran out.
        unresolved: ActionNodes cut off by the round horizon.
    """
    offense_wins: int = 0
    defense_wins: int = 0
    unresolved: int = 0

    @property
    def resolved(self) -> int:
        return self.offense_wins + self.defense_wins

    @property
    def total(self) -> int:
        return self.resolved + self.unresolved


def count_terminals(root: GameTreeNode) -> TerminalCounts:
    """Count terminal leaves by kind, independently of any annotation."""
    counts = TerminalCounts()
    for _, node in iter_nodes(root):
        if isinstance(node, ActionNode):
            if node.is_offense_win:
                counts.offense_wins += 1
            elif node.next_round is None:
                counts.unresolved += 1
        elif isinstance(node, DefenseNode) and node.is_defense_win:
            counts.defense_wins += 1
    return counts


def tree_stats(root: GameTreeNode) -> Dict[str, int]:
    """Node counts per kind plus a "total"."""
    stats: Dict[str, int] = {kind: 0 for kind in NODE_TYPES}
    for _, node in iter_nodes(root):
        stats[node.KIND] += 1
    stats["total"] = sum(stats.values())
    return stats


__all__ = [
    'Path',
    'iter_nodes',
    'node_at',
    'nodes_along',
    'placements_along',
    'board_state_along',
    'TerminalCounts',
    'count_terminals',
    'tree_stats',
]
