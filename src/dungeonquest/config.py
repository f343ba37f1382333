"""
Analyzer configuration.

A single immutable AnalyzerConfig is threaded into the builder instead of
process-wide constants. Values can be loaded from the environment (and a
.env file) so that runs are reproducible without editing code.

Environment variables:
    DQ_NUM_PATHS        board width (x extent)
    DQ_STARTING_DEPTH   rows filled by the first placement
    DQ_MAX_ROUNDS       recursion horizon
    DQ_TILE_BAG         initial bag, e.g. "B=4,S=2"
    DQ_STARTING_GOLD    offense gold on round 1
    DQ_SPAWN_SOURCES    spawns available per unit type, e.g. "1,1"
    DQ_SPAWN_COSTS      spawn cost per unit type, e.g. "2,3"
    DQ_MOVE_COST        gold per move action
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError
from .types import TileBag, TileType, UNIT_TYPE_ORDER, UnitType, parse_unit_type


DEFAULT_TILE_BAG = TileBag.from_mapping({
    TileType.BLANK: 4,
    TileType.SPIKE_TRAP: 2,
})
DEFAULT_SPAWN_COSTS: Tuple[int, ...] = (2, 3)  # BASIC, SPRINTER
DEFAULT_SPAWN_SOURCES: Tuple[int, ...] = (1, 1)

# Gold regenerated by the offense between rounds.
GOLD_PER_ROUND = 1


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Configuration for one analysis run.

    Attributes:
        num_paths: Board width; number of slots per row.
        starting_depth: Rows filled by the round-1 placement.
        max_rounds: Last round that is expanded; deeper branches stay unresolved.
        tile_bag: Initial tile bag.
        starting_gold: Offense gold at the start of round 1.
        spawn_source_counts: Spawns available per unit type (UNIT_TYPE_ORDER).
        spawn_costs: Gold cost per unit type (UNIT_TYPE_ORDER).
        move_cost: Gold cost of one move action. Must be positive.
    """
    num_paths: int = 2
    starting_depth: int = 2
    max_rounds: int = 4
    tile_bag: TileBag = DEFAULT_TILE_BAG
    starting_gold: int = 4
    spawn_source_counts: Tuple[int, ...] = DEFAULT_SPAWN_SOURCES
    spawn_costs: Tuple[int, ...] = DEFAULT_SPAWN_COSTS
    move_cost: int = 2

    def __post_init__(self):
        if not isinstance(self.tile_bag, TileBag):
            object.__setattr__(self, "tile_bag", TileBag.from_mapping(self.tile_bag))
        object.__setattr__(self, "spawn_source_counts", tuple(self.spawn_source_counts))
        object.__setattr__(self, "spawn_costs", tuple(self.spawn_costs))
        self.validate()

    def validate(self):
        """Raise ConfigurationError on any invalid value."""
        for name in ("num_paths", "starting_depth", "max_rounds", "move_cost"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.starting_gold, int) or self.starting_gold < 0:
            raise ConfigurationError(
                f"starting_gold must be a non-negative integer, got {self.starting_gold!r}"
            )
        if len(self.spawn_source_counts) != len(UNIT_TYPE_ORDER):
            raise ConfigurationError(
                f"spawn_source_counts needs one entry per unit type, got {self.spawn_source_counts}"
            )
        if any(c < 0 for c in self.spawn_source_counts):
            raise ConfigurationError(
                f"spawn_source_counts must be non-negative: {self.spawn_source_counts}"
            )
        if len(self.spawn_costs) != len(UNIT_TYPE_ORDER):
            raise ConfigurationError(
                f"spawn_costs needs one entry per unit type, got {self.spawn_costs}"
            )
        if any(c < 1 for c in self.spawn_costs):
            raise ConfigurationError(f"spawn_costs must be positive: {self.spawn_costs}")

    # -------------------------------------------------------------------------
    # Board geometry
    # -------------------------------------------------------------------------

    def draw_size(self, round_number: int) -> int:
        """Tiles drawn in ``round_number``: a full starting block, then one row."""
        if round_number == 1:
            return self.num_paths * self.starting_depth
        return self.num_paths

    def max_y(self, round_number: int) -> int:
        """Goal row index once this round's placement is on the board."""
        return (self.starting_depth - 1) + (round_number - 1)

    def spawn_cost(self, unit_type: UnitType) -> int:
        return self.spawn_costs[UNIT_TYPE_ORDER.index(unit_type)]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_paths": self.num_paths,
            "starting_depth": self.starting_depth,
            "max_rounds": self.max_rounds,
            "tile_bag": self.tile_bag.as_dict(),
            "starting_gold": self.starting_gold,
            "spawn_source_counts": list(self.spawn_source_counts),
            "spawn_costs": {t.name: c for t, c in zip(UNIT_TYPE_ORDER, self.spawn_costs)},
            "move_cost": self.move_cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyzerConfig":
        defaults = cls()
        costs = data.get("spawn_costs")
        if isinstance(costs, dict):
            by_type = {parse_unit_type(k): int(v) for k, v in costs.items()}
            costs = tuple(by_type[t] for t in UNIT_TYPE_ORDER)
        return cls(
            num_paths=data.get("num_paths", defaults.num_paths),
            starting_depth=data.get("starting_depth", defaults.starting_depth),
            max_rounds=data.get("max_rounds", defaults.max_rounds),
            tile_bag=TileBag.from_mapping(data["tile_bag"]) if "tile_bag" in data else defaults.tile_bag,
            starting_gold=data.get("starting_gold", defaults.starting_gold),
            spawn_source_counts=tuple(data.get("spawn_source_counts", defaults.spawn_source_counts)),
            spawn_costs=tuple(costs) if costs is not None else defaults.spawn_costs,
            move_cost=data.get("move_cost", defaults.move_cost),
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "AnalyzerConfig":
        """
        Load configuration from DQ_* environment variables.

        Args:
            env_file: Optional .env path; the default .env lookup is used if None.
            **overrides: Explicit values that win over the environment
                (None values are ignored).

        Returns:
            A validated AnalyzerConfig.
        """
        load_dotenv(env_file)

        values: Dict[str, Any] = {}
        for name, var in (
            ("num_paths", "DQ_NUM_PATHS"),
            ("starting_depth", "DQ_STARTING_DEPTH"),
            ("max_rounds", "DQ_MAX_ROUNDS"),
            ("starting_gold", "DQ_STARTING_GOLD"),
            ("move_cost", "DQ_MOVE_COST"),
        ):
            raw = os.getenv(var)
            if raw:
                values[name] = _parse_int(var, raw)

        raw_bag = os.getenv("DQ_TILE_BAG")
        if raw_bag:
            values["tile_bag"] = parse_tile_bag(raw_bag)
        raw_sources = os.getenv("DQ_SPAWN_SOURCES")
        if raw_sources:
            values["spawn_source_counts"] = _parse_int_list("DQ_SPAWN_SOURCES", raw_sources)
        raw_costs = os.getenv("DQ_SPAWN_COSTS")
        if raw_costs:
            values["spawn_costs"] = _parse_int_list("DQ_SPAWN_COSTS", raw_costs)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def parse_tile_bag(text: str) -> TileBag:
    """Parse "B=4,S=2" (symbols or names) into a TileBag."""
    mapping: Dict[str, int] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ConfigurationError(f"Tile bag entry must look like B=4, got {part!r}")
        name, count = part.split("=", 1)
        mapping[name.strip()] = _parse_int("tile bag", count)
    return TileBag.from_mapping(mapping)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _parse_int_list(name: str, raw: str) -> Tuple[int, ...]:
    return tuple(_parse_int(name, part) for part in raw.split(",") if part.strip())


__all__ = [
    'AnalyzerConfig',
    'DEFAULT_TILE_BAG',
    'DEFAULT_SPAWN_COSTS',
    'DEFAULT_SPAWN_SOURCES',
    'GOLD_PER_ROUND',
    'parse_tile_bag',
]
