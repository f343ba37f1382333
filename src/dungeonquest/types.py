"""
Shared type definitions for game-tree analysis.

This module contains the value types used across the combinatorics, search
and tree submodules to avoid circular import issues. All of them are frozen
so that search results can be shared safely between branches of the tree.

Types:
    Player: The two sides of the game
    TileType: The closed set of defense tiles
    TileBag: Tiles not yet drawn, as counts per type
    DrawCombination: A multiset drawn in one round, with its probability
    Arrangement: A drawn multiset laid out over the ordered board slots
    UnitType / Unit: Offense units and their board locations
    SpawnAction / MoveAction: The atomic offense actions
    ActionResult: One distinct end-of-turn state of an offense turn
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from fractions import Fraction
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError


# =============================================================================
# PLAYERS AND TILES
# =============================================================================

class Player(Enum):
    """Side that owns a turn or a win."""
    OFFENSE = "O"
    DEFENSE = "D"


class TileType(Enum):
    """Defense tiles. Values are the one-letter symbols used in placements."""
    BLANK = "B"
    SPIKE_TRAP = "S"
    CAGE_TRAP = "C"
    OIL_TRAP = "O"
    PUSHBACK_TRAP = "P"


# Canonical order: sorted by symbol (B, C, O, P, S). Drives enumeration order
# and every dash-joined count key.
TILE_TYPE_ORDER: Tuple[TileType, ...] = tuple(sorted(TileType, key=lambda t: t.value))


def parse_tile_type(value: Union[str, TileType]) -> TileType:
    """Resolve a TileType from an enum member, its symbol or its name."""
    if isinstance(value, TileType):
        return value
    text = str(value).strip()
    for tile_type in TileType:
        if text == tile_type.value or text.upper() == tile_type.name:
            return tile_type
    raise ConfigurationError(f"Unknown tile type: {value!r}")


def counts_key(counts: Tuple[int, ...]) -> str:
    """Concise key for a count vector, e.g. "4-0-0-0-2"."""
    return "-".join(str(c) for c in counts)


def _counts_from_key(key: str) -> Tuple[int, ...]:
    parts = key.split("-")
    if len(parts) != len(TILE_TYPE_ORDER):
        raise ValueError(f"Expected {len(TILE_TYPE_ORDER)} counts in key {key!r}")
    return tuple(int(p) for p in parts)


def _counts_from_mapping(mapping: Mapping[Any, int]) -> Tuple[int, ...]:
    counts = [0] * len(TILE_TYPE_ORDER)
    for key, count in mapping.items():
        tile_type = parse_tile_type(key)
        counts[TILE_TYPE_ORDER.index(tile_type)] += int(count)
    return tuple(counts)


@dataclass(frozen=True)
class TileBag:
    """Tiles remaining in the bag, one count per type in TILE_TYPE_ORDER.

    Attributes:
        counts: Non-negative count per tile type.
    """
    counts: Tuple[int, ...]

    def __post_init__(self):
        if len(self.counts) != len(TILE_TYPE_ORDER):
            raise ConfigurationError(
                f"Tile bag needs {len(TILE_TYPE_ORDER)} counts, got {len(self.counts)}"
            )
        if any(c < 0 for c in self.counts):
            raise ConfigurationError(f"Tile bag counts must be non-negative: {self.counts}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, int]) -> "TileBag":
        """Build a bag from {tile type, symbol or name: count}; missing types are 0."""
        return cls(_counts_from_mapping(mapping))

    @classmethod
    def from_key(cls, key: str) -> "TileBag":
        return cls(_counts_from_key(key))

    def __getitem__(self, tile_type: Union[str, TileType]) -> int:
        return self.counts[TILE_TYPE_ORDER.index(parse_tile_type(tile_type))]

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def key(self) -> str:
        return counts_key(self.counts)

    def remove(self, combination: "DrawCombination") -> "TileBag":
        """Bag left after the realized draw ``combination``."""
        return TileBag(tuple(a - b for a, b in zip(self.counts, combination.counts)))

    def as_dict(self) -> Dict[str, int]:
        return {t.name: c for t, c in zip(TILE_TYPE_ORDER, self.counts)}


@dataclass(frozen=True)
class DrawCombination:
    """A multiset of tiles drawn in one round.

    Attributes:
        counts: Count drawn per tile type in TILE_TYPE_ORDER.
        probability: Exact without-replacement probability of this draw.
    """
    counts: Tuple[int, ...]
    probability: Fraction = Fraction(1)

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, int], probability: Fraction = Fraction(1)) -> "DrawCombination":
        return cls(_counts_from_mapping(mapping), probability)

    @property
    def size(self) -> int:
        return sum(self.counts)

    @property
    def key(self) -> str:
        return counts_key(self.counts)

    def as_dict(self) -> Dict[str, int]:
        """Symbol -> count with zero entries elided."""
        return {t.value: c for t, c in zip(TILE_TYPE_ORDER, self.counts) if c > 0}

    def tiles(self) -> Tuple[TileType, ...]:
        """The multiset expanded into a tuple, in canonical order."""
        tiles: List[TileType] = []
        for tile_type, count in zip(TILE_TYPE_ORDER, self.counts):
            tiles.extend([tile_type] * count)
        return tuple(tiles)


@dataclass(frozen=True)
class Arrangement:
    """A drawn multiset assigned to ordered board slots."""
    tiles: Tuple[TileType, ...]
    probability: Fraction

    @property
    def placement(self) -> str:
        return "".join(t.value for t in self.tiles)


# =============================================================================
# UNITS AND BOARD GEOMETRY
# =============================================================================

class UnitType(IntEnum):
    """Offense unit types. The value indexes spawn-source count vectors."""
    BASIC = 0
    SPRINTER = 1


UNIT_TYPE_ORDER: Tuple[UnitType, ...] = (UnitType.BASIC, UnitType.SPRINTER)


def parse_unit_type(value: Union[int, str, UnitType]) -> UnitType:
    if isinstance(value, UnitType):
        return value
    if isinstance(value, str) and not value.strip().isdigit():
        try:
            return UnitType[value.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown unit type: {value!r}") from None
    try:
        return UnitType(int(value))
    except ValueError:
        raise ConfigurationError(f"Unknown unit type id: {value!r}") from None


def location_to_xy(location: int, num_paths: int) -> Tuple[int, int]:
    return location % num_paths, location // num_paths


def xy_to_location(x: int, y: int, num_paths: int) -> int:
    return y * num_paths + x


@dataclass(frozen=True)
class Unit:
    """An offense unit on the board.

    Attributes:
        unit_type: The unit's type tag.
        location: Board location encoded as ``y * num_paths + x``.
    """
    unit_type: UnitType
    location: int

    def encode(self) -> str:
        return f"{int(self.unit_type)}::{self.location}"

    @classmethod
    def decode(cls, text: str) -> "Unit":
        unit_type, location = text.split("::")
        return cls(parse_unit_type(unit_type), int(location))


def encode_units(units: Tuple[Unit, ...]) -> List[str]:
    return [u.encode() for u in units]


def decode_units(encoded: List[str]) -> Tuple[Unit, ...]:
    return tuple(Unit.decode(text) for text in encoded)


# =============================================================================
# ACTIONS
# =============================================================================

@dataclass(frozen=True)
class SpawnAction:
    """Spawn a unit of ``unit_type`` at ``location`` in row 0."""
    unit_type: UnitType
    location: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "spawn", "unitType": int(self.unit_type), "location": self.location}


@dataclass(frozen=True)
class MoveAction:
    """Move the unit at ``unit_index`` one orthogonal step."""
    unit_index: int
    from_location: int
    to_location: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "move",
            "unitIndex": self.unit_index,
            "from": self.from_location,
            "to": self.to_location,
        }


Action = Union[SpawnAction, MoveAction]


def action_from_dict(data: Dict[str, Any]) -> Action:
    """Inverse of ``SpawnAction.to_dict`` / ``MoveAction.to_dict``."""
    kind = data.get("type")
    if kind == "spawn":
        return SpawnAction(parse_unit_type(data["unitType"]), int(data["location"]))
    if kind == "move":
        return MoveAction(int(data["unitIndex"]), int(data["from"]), int(data["to"]))
    raise ValueError(f"Unknown action type: {kind!r}")


@dataclass(frozen=True)
class ActionResult:
    """A distinct end-of-turn state reachable within one offense turn.

    Attributes:
        actions: The action sequence that produced this state.
        final_gold: Gold left after the sequence.
        final_units: Units after the sequence, in spawn order.
        final_spawn_source_counts: Remaining spawns per unit type.
        win: Player.OFFENSE if a unit stands on the goal row, else None.
    """
    actions: Tuple[Action, ...]
    final_gold: int
    final_units: Tuple[Unit, ...]
    final_spawn_source_counts: Tuple[int, ...]
    win: Optional[Player] = None

    @property
    def is_offense_win(self) -> bool:
        return self.win is Player.OFFENSE

    def dedup_key(self) -> Tuple:
        """Identity for deduplication; the unit multiset is order-independent."""
        units = tuple(sorted((int(u.unit_type), u.location) for u in self.final_units))
        return (self.actions, units, self.final_gold, self.win)


__all__ = [
    'Player',
    'TileType',
    'TILE_TYPE_ORDER',
    'parse_tile_type',
    'counts_key',
    'TileBag',
    'DrawCombination',
    'Arrangement',
    'UnitType',
    'UNIT_TYPE_ORDER',
    'parse_unit_type',
    'location_to_xy',
    'xy_to_location',
    'Unit',
    'encode_units',
    'decode_units',
    'SpawnAction',
    'MoveAction',
    'Action',
    'action_from_dict',
    'ActionResult',
]
