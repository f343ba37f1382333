"""
Backward induction over a built game tree.

Post-order walk that fills in, for every node:
    can_offense_win - some offense-win terminal is reachable beneath it
    num_outcomes    - resolved terminal outcomes beneath it

Leaf rules:
    offense-win ActionNode         -> (True, 1)
    defense-win DefenseNode        -> (False, 1)
    horizon ActionNode (no child)  -> (False, 0)

Inner nodes take the OR / sum over their children; PlacementNode and a
non-winning ActionNode pass their single child's values through.

The walk always descends. Fields that are already populated are kept and
only missing ones are filled in, so annotating a reloaded, partially or
fully annotated tree is a fixed point.
"""

import logging
from typing import Dict, Iterable, Tuple

from .nodes import (
    ActionNode,
    DefenseNode,
    DrawNode,
    GameTreeNode,
    OffenseTurnNode,
    PlacementNode,
)

logger = logging.getLogger(__name__)

Outcome = Tuple[bool, int]

_NODE_CLASSES = (ActionNode, DefenseNode, DrawNode, OffenseTurnNode, PlacementNode)


class OutcomeAnnotator:
    """
    Memoized outcome annotator.

    Attributes:
        nodes_visited: Distinct nodes resolved by this annotator.
        cache_hits: Nodes whose two fields were both already populated.
    """

    def __init__(self):
        self._memo: Dict[int, Outcome] = {}
        self.nodes_visited = 0
        self.cache_hits = 0

    def annotate(self, node: GameTreeNode) -> Outcome:
        """
        Annotate ``node`` and everything beneath it.

        Returns:
            (can_offense_win, num_outcomes) of ``node``.
        """
        if not isinstance(node, _NODE_CLASSES):
            raise TypeError(f"Not a game-tree node: {type(node).__name__}")

        key = id(node)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        computed = self._compute(node)
        if node.can_offense_win is not None and node.num_outcomes is not None:
            self.cache_hits += 1
        if node.can_offense_win is None:
            node.can_offense_win = computed[0]
        if node.num_outcomes is None:
            node.num_outcomes = computed[1]

        outcome = (node.can_offense_win, node.num_outcomes)
        self._memo[key] = outcome
        self.nodes_visited += 1
        return outcome

    def _aggregate(self, children: Iterable[GameTreeNode]) -> Outcome:
        can_win = False
        total = 0
        # No short-circuit: every child must be annotated.
        for child in children:
            child_can_win, child_outcomes = self.annotate(child)
            can_win = can_win or child_can_win
            total += child_outcomes
        return can_win, total

    def _compute(self, node: GameTreeNode) -> Outcome:
        if isinstance(node, ActionNode):
            if node.is_offense_win:
                return True, 1
            if node.next_round is None:
                return False, 0
            return self.annotate(node.next_round)

        if isinstance(node, DefenseNode):
            if node.is_defense_win:
                return False, 1
            return self._aggregate(node.draws)

        if isinstance(node, DrawNode):
            return self._aggregate(node.placements)

        if isinstance(node, PlacementNode):
            if node.offense_turn is None:
                return False, 0
            return self.annotate(node.offense_turn)

        return self._aggregate(node.actions)


def annotate_tree(root: GameTreeNode) -> Outcome:
    """Annotate a whole tree in place and return the root's outcome."""
    annotator = OutcomeAnnotator()
    outcome = annotator.annotate(root)
    logger.debug(
        f"Annotated {annotator.nodes_visited} nodes ({annotator.cache_hits} already populated): "
        f"canOffenseWin={outcome[0]} numOutcomes={outcome[1]}"
    )
    return outcome


__all__ = [
    'Outcome',
    'OutcomeAnnotator',
    'annotate_tree',
]
