"""
Game-tree node types.

A round of play is represented by five node kinds, strictly alternating:

    DefenseNode -> DrawNode* -> PlacementNode* -> OffenseTurnNode -> ActionNode*
                                                                        |
                                                           DefenseNode (next round)

Every node exclusively owns its children. There are no parent pointers;
breadcrumbs are reconstructed top-down (see traversal.py).

Every node carries two fields filled in by the OutcomeAnnotator once the
whole tree exists: can_offense_win and num_outcomes. They are None until
annotated.

Serialization uses the viewer's tagged shape: every dict carries a "t" kind
tag and the viewer's camelCase keys. Probabilities are written both as
floats (for display) and as exact "num/den" strings (for lossless reload).
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from ..types import (
    Action,
    DrawCombination,
    Player,
    TileBag,
    Unit,
    action_from_dict,
    decode_units,
    encode_units,
)


def _annotations(node) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if node.can_offense_win is not None:
        data["canOffenseWin"] = node.can_offense_win
    if node.num_outcomes is not None:
        data["numOutcomes"] = node.num_outcomes
    return data


def _read_annotations(node, data: Dict[str, Any]):
    node.can_offense_win = data.get("canOffenseWin")
    node.num_outcomes = data.get("numOutcomes")
    return node


def _read_player(value: Optional[str]) -> Optional[Player]:
    return Player(value) if value is not None else None


def _read_fraction(data: Dict[str, Any], key: str) -> Fraction:
    exact = data.get(key + "Exact")
    if exact is not None:
        return Fraction(exact)
    return Fraction(data[key])


# =============================================================================
# NODES
# =============================================================================

@dataclass
class DefenseNode:
    """
    Start of a round: the defense is about to draw.

    Attributes:
        round: 1-based round number.
        tile_bag: Bag at the start of the round.
        draws: One DrawNode per feasible draw combination.
        terminal_win: Player.DEFENSE when the bag could not cover the draw.
    """
    KIND: ClassVar[str] = "DefenseNode"

    round: int
    tile_bag: TileBag
    draws: List["DrawNode"] = field(default_factory=list)
    terminal_win: Optional[Player] = None
    can_offense_win: Optional[bool] = None
    num_outcomes: Optional[int] = None

    @property
    def is_defense_win(self) -> bool:
        return self.terminal_win is Player.DEFENSE

    def children(self) -> List["DrawNode"]:
        return self.draws

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.KIND,
            "round": self.round,
            "turn": Player.DEFENSE.value,
            "tileBag": self.tile_bag.key,
            "win": self.terminal_win.value if self.terminal_win else None,
            "potentialDraws": [d.to_dict() for d in self.draws],
            **_annotations(self),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefenseNode":
        node = cls(
            round=data["round"],
            tile_bag=TileBag.from_key(data["tileBag"]),
            draws=[DrawNode.from_dict(d) for d in data.get("potentialDraws", [])],
            terminal_win=_read_player(data.get("win")),
        )
        return _read_annotations(node, data)


@dataclass
class DrawNode:
    """
    One feasible draw combination for the round.

    Attributes:
        combination: The drawn multiset and its exact draw probability.
        random_placement_probability: 1 / number of distinct arrangements.
        placements: One PlacementNode per arrangement.
    """
    KIND: ClassVar[str] = "DrawNode"

    combination: DrawCombination
    random_placement_probability: Fraction
    placements: List["PlacementNode"] = field(default_factory=list)
    can_offense_win: Optional[bool] = None
    num_outcomes: Optional[int] = None

    @property
    def draw_key(self) -> str:
        return self.combination.key

    @property
    def draw_probability(self) -> Fraction:
        return self.combination.probability

    def children(self) -> List["PlacementNode"]:
        return self.placements

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.KIND,
            "drawKey": self.draw_key,
            "drawProbability": float(self.draw_probability),
            "drawProbabilityExact": str(self.draw_probability),
            "randomPlacementProbability": float(self.random_placement_probability),
            "randomPlacementProbabilityExact": str(self.random_placement_probability),
            "placementPermutations": [p.to_dict() for p in self.placements],
            **_annotations(self),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrawNode":
        bag = TileBag.from_key(data["drawKey"])
        node = cls(
            combination=DrawCombination(bag.counts, _read_fraction(data, "drawProbability")),
            random_placement_probability=_read_fraction(data, "randomPlacementProbability"),
            placements=[PlacementNode.from_dict(p) for p in data.get("placementPermutations", [])],
        )
        return _read_annotations(node, data)


@dataclass
class PlacementNode:
    """
    One arrangement of the drawn tiles on the new board slots.

    Attributes:
        placement: Tile symbols in slot order, e.g. "BSSB".
        offense_turn: The offense turn played on this board.
    """
    KIND: ClassVar[str] = "PlacementNode"

    placement: str
    offense_turn: Optional["OffenseTurnNode"] = None
    can_offense_win: Optional[bool] = None
    num_outcomes: Optional[int] = None

    def children(self) -> List["OffenseTurnNode"]:
        return [self.offense_turn] if self.offense_turn is not None else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.KIND,
            "placement": self.placement,
            "nextRound": self.offense_turn.to_dict() if self.offense_turn else None,
            **_annotations(self),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementNode":
        turn = data.get("nextRound")
        node = cls(
            placement=data["placement"],
            offense_turn=OffenseTurnNode.from_dict(turn) if turn else None,
        )
        return _read_annotations(node, data)


@dataclass
class OffenseTurnNode:
    """
    The offense's turn after a placement, with its resources at the start.

    Attributes:
        round: 1-based round number.
        gold: Gold at the start of the turn.
        units: Units on the board at the start of the turn.
        spawn_source_counts: Remaining spawns per unit type.
        actions: One ActionNode per distinct end-of-turn state.
    """
    KIND: ClassVar[str] = "OffenseTurnNode"

    round: int
    gold: int
    units: Tuple[Unit, ...] = ()
    spawn_source_counts: Tuple[int, ...] = ()
    actions: List["ActionNode"] = field(default_factory=list)
    can_offense_win: Optional[bool] = None
    num_outcomes: Optional[int] = None

    def children(self) -> List["ActionNode"]:
        return self.actions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.KIND,
            "round": self.round,
            "turn": Player.OFFENSE.value,
            "gold": self.gold,
            "units": encode_units(self.units),
            "unitSourceCounts": list(self.spawn_source_counts),
            "turnActions": [a.to_dict() for a in self.actions],
            **_annotations(self),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OffenseTurnNode":
        node = cls(
            round=data["round"],
            gold=data["gold"],
            units=decode_units(data.get("units", [])),
            spawn_source_counts=tuple(data.get("unitSourceCounts", [])),
            actions=[ActionNode.from_dict(a) for a in data.get("turnActions", [])],
        )
        return _read_annotations(node, data)


@dataclass
class ActionNode:
    """
    A distinct end-of-turn state reached by an action sequence.

    Attributes:
        actions: The spawn/move sequence taken this turn.
        final_gold: Gold left at the end of the turn.
        final_units: Units at the end of the turn.
        final_spawn_source_counts: Remaining spawns per unit type.
        terminal_win: Player.OFFENSE if a unit reached the goal row.
        next_round: The following DefenseNode; None for a win or when the
            round horizon was reached.
    """
    KIND: ClassVar[str] = "ActionNode"

    actions: Tuple[Action, ...]
    final_gold: int
    final_units: Tuple[Unit, ...]
    final_spawn_source_counts: Tuple[int, ...]
    terminal_win: Optional[Player] = None
    next_round: Optional[DefenseNode] = None
    can_offense_win: Optional[bool] = None
    num_outcomes: Optional[int] = None

    @property
    def is_offense_win(self) -> bool:
        return self.terminal_win is Player.OFFENSE

    @property
    def is_unresolved(self) -> bool:
        """Horizon leaf: neither side won before the round limit."""
        return not self.is_offense_win and self.next_round is None

    def children(self) -> List[DefenseNode]:
        return [self.next_round] if self.next_round is not None else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.KIND,
            "finalGold": self.final_gold,
            "win": self.terminal_win.value if self.terminal_win else None,
            "actions": [a.to_dict() for a in self.actions],
            "units": encode_units(self.final_units),
            "unitSourceCounts": list(self.final_spawn_source_counts),
            "nextRound": self.next_round.to_dict() if self.next_round else None,
            **_annotations(self),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionNode":
        next_round = data.get("nextRound")
        node = cls(
            actions=tuple(action_from_dict(a) for a in data.get("actions", [])),
            final_gold=data["finalGold"],
            final_units=decode_units(data.get("units", [])),
            final_spawn_source_counts=tuple(data.get("unitSourceCounts", [])),
            terminal_win=_read_player(data.get("win")),
            next_round=DefenseNode.from_dict(next_round) if next_round else None,
        )
        return _read_annotations(node, data)


GameTreeNode = Union[DefenseNode, DrawNode, PlacementNode, OffenseTurnNode, ActionNode]

NODE_TYPES: Dict[str, type] = {
    cls.KIND: cls
    for cls in (DefenseNode, DrawNode, PlacementNode, OffenseTurnNode, ActionNode)
}


def node_from_dict(data: Dict[str, Any]) -> GameTreeNode:
    """Rebuild any node (and its subtree) from its tagged dict."""
    kind = data.get("t")
    node_type = NODE_TYPES.get(kind)
    if node_type is None:
        raise ValueError(f"Unknown node kind: {kind!r}")
    return node_type.from_dict(data)


__all__ = [
    'DefenseNode',
    'DrawNode',
    'PlacementNode',
    'OffenseTurnNode',
    'ActionNode',
    'GameTreeNode',
    'NODE_TYPES',
    'node_from_dict',
]
