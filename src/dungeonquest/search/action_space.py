"""
Exhaustive action-space search for one offense turn.

Explores ALL legal sequences of spawn and move actions the offense can pay
for. No AI picks moves; every affordable branch is followed.

Key design:
- Every search node is recorded, including the empty sequence (passing)
- A node with a unit on the goal row is an offense-win terminal; nothing is
  explored past it
- Gold strictly decreases on every branch, which bounds the recursion
- Results are deduplicated on (sequence, unit multiset, gold, win flag)
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import ConfigurationError
from ..types import (
    Action,
    ActionResult,
    MoveAction,
    Player,
    SpawnAction,
    UNIT_TYPE_ORDER,
    Unit,
    location_to_xy,
    xy_to_location,
)
from .transposition import ActionSpaceCache

logger = logging.getLogger(__name__)


# Right, left, up (toward the goal), down.
ORTHOGONAL_DELTAS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def dedupe_results(results: Iterable[ActionResult]) -> Tuple[ActionResult, ...]:
    """Drop exact duplicates, keeping first-seen order."""
    seen = set()
    unique: List[ActionResult] = []
    for result in results:
        key = result.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    return tuple(unique)


class ActionSpaceExplorer:
    """
    Depth-first enumerator of offense turns.

    Board geometry and prices are fixed per explorer; the starting resources
    are passed to each explore() call.

    Attributes:
        num_paths: Board width.
        spawn_costs: Gold per spawn, indexed like UNIT_TYPE_ORDER.
        move_cost: Gold per move action (positive).
        cache: Optional ActionSpaceCache shared across calls.
        searches: Number of DFS runs performed (cache misses).
        nodes_visited: Total search nodes visited across all runs.
    """

    def __init__(
        self,
        num_paths: int,
        spawn_costs: Sequence[int],
        move_cost: int,
        cache: Optional[ActionSpaceCache] = None,
    ):
        if num_paths < 1:
            raise ConfigurationError(f"num_paths must be positive, got {num_paths}")
        if not isinstance(move_cost, int) or move_cost < 1:
            # A zero move cost would let units walk back and forth forever.
            raise ConfigurationError(f"move_cost must be a positive integer, got {move_cost!r}")
        if len(spawn_costs) != len(UNIT_TYPE_ORDER) or any(c < 1 for c in spawn_costs):
            raise ConfigurationError(
                f"spawn_costs needs one positive cost per unit type, got {list(spawn_costs)}"
            )

        self.num_paths = num_paths
        self.spawn_costs = tuple(spawn_costs)
        self.move_cost = move_cost
        self.cache = cache
        self.searches = 0
        self.nodes_visited = 0

    @classmethod
    def from_config(cls, config, cache: Optional[ActionSpaceCache] = None) -> "ActionSpaceExplorer":
        return cls(config.num_paths, config.spawn_costs, config.move_cost, cache=cache)

    def explore(
        self,
        gold: int,
        units: Sequence[Unit],
        spawn_source_counts: Sequence[int],
        max_y: int,
    ) -> Tuple[ActionResult, ...]:
        """
        Enumerate every distinct end-of-turn state.

        Args:
            gold: Offense gold at the start of the turn.
            units: Units on the board, in spawn order.
            spawn_source_counts: Remaining spawns per unit type.
            max_y: Goal row; a unit on this row wins for the offense.

        Returns:
            Tuple of ActionResult in DFS order. The first entry is always the
            empty sequence.
        """
        if gold < 0:
            raise ConfigurationError(f"gold must be non-negative, got {gold}")
        if len(spawn_source_counts) != len(UNIT_TYPE_ORDER) or any(c < 0 for c in spawn_source_counts):
            raise ConfigurationError(
                f"spawn_source_counts must hold one non-negative count per unit type, "
                f"got {list(spawn_source_counts)}"
            )

        units = tuple(units)
        counts = tuple(spawn_source_counts)
        state_key = (gold, units, counts, max_y)

        if self.cache is not None:
            entry = self.cache.lookup(state_key)
            if entry is not None:
                return entry.results

        results = self._search(gold, units, counts, max_y)
        self.searches += 1
        logger.debug(
            f"Explored offense turn gold={gold} units={len(units)} max_y={max_y}: "
            f"{len(results)} results"
        )

        if self.cache is not None:
            self.cache.store(state_key, results)
        return results

    def _offense_wins(self, units: Tuple[Unit, ...], max_y: int) -> bool:
        return any(location_to_xy(u.location, self.num_paths)[1] == max_y for u in units)

    def _search(
        self,
        gold: int,
        units: Tuple[Unit, ...],
        counts: Tuple[int, ...],
        max_y: int,
    ) -> Tuple[ActionResult, ...]:
        results: List[ActionResult] = []
        num_paths = self.num_paths
        move_cost = self.move_cost

        def dfs(
            current_gold: int,
            current_units: Tuple[Unit, ...],
            current_counts: Tuple[int, ...],
            actions: Tuple[Action, ...],
        ):
            self.nodes_visited += 1
            did_win = self._offense_wins(current_units, max_y)
            results.append(ActionResult(
                actions=actions,
                final_gold=current_gold,
                final_units=current_units,
                final_spawn_source_counts=current_counts,
                win=Player.OFFENSE if did_win else None,
            ))
            if did_win:
                return

            occupied = {u.location for u in current_units}

            # Spawn branch: row 0 only
            spawn_locations = [
                xy_to_location(x, 0, num_paths)
                for x in range(num_paths)
                if xy_to_location(x, 0, num_paths) not in occupied
            ]
            for index, unit_type in enumerate(UNIT_TYPE_ORDER):
                if current_counts[index] <= 0:
                    continue
                price = self.spawn_costs[index]
                if price > current_gold:
                    continue
                next_counts = current_counts[:index] + (current_counts[index] - 1,) + current_counts[index + 1:]
                for location in spawn_locations:
                    dfs(
                        current_gold - price,
                        current_units + (Unit(unit_type, location),),
                        next_counts,
                        actions + (SpawnAction(unit_type, location),),
                    )

            # Move branch
            if current_gold < move_cost or not current_units:
                return

            for i, unit in enumerate(current_units):
                x, y = location_to_xy(unit.location, num_paths)
                for dx, dy in ORTHOGONAL_DELTAS:
                    nx, ny = x + dx, y + dy
                    if not (0 <= nx < num_paths and ny >= 0):
                        continue
                    to = xy_to_location(nx, ny, num_paths)
                    if to in occupied:
                        continue
                    next_units = current_units[:i] + (Unit(unit.unit_type, to),) + current_units[i + 1:]
                    dfs(
                        current_gold - move_cost,
                        next_units,
                        current_counts,
                        actions + (MoveAction(i, unit.location, to),),
                    )

        dfs(gold, units, counts, ())
        return dedupe_results(results)


__all__ = [
    'ORTHOGONAL_DELTAS',
    'dedupe_results',
    'ActionSpaceExplorer',
]
