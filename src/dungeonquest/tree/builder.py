"""
Game-tree construction.

Alternates defense and offense turns round by round:

    For each round:
        1. Bag shorter than the round's draw -> defense-win terminal
        2. Enumerate every draw combination with its probability
        3. For each combination: enumerate arrangements, explore the offense
           action space once (it does not depend on the arrangement)
        4. For each arrangement: one offense turn with one ActionNode per
           distinct end-of-turn state
        5. Each non-winning ActionNode recurses into the next round with the
           realized bag, the end-of-turn units and gold + 1, unless the round
           horizon was reached

Construction is strictly recursive: each subtree is fully materialized
before its parent returns. The node count is the product of draws x
arrangements x action results across rounds, so keep the horizon small.
"""

import logging
from typing import Optional, Sequence

from ..config import AnalyzerConfig, GOLD_PER_ROUND
from ..combinatorics import enumerate_arrangements, enumerate_draws
from ..errors import ConfigurationError
from ..search import ActionSpaceCache, ActionSpaceExplorer
from ..types import ActionResult, Player, TileBag, Unit
from .nodes import ActionNode, DefenseNode, DrawNode, OffenseTurnNode, PlacementNode
from .observers import BuildObserver

logger = logging.getLogger(__name__)


class GameTreeBuilder:
    """
    Builds the full game tree for one configuration.

    Attributes:
        config: The immutable run configuration.
        observer: Progress hooks (no-op by default).
        cache: ActionSpaceCache shared by every offense turn of the build,
            or None when caching is disabled.
        explorer: The offense action-space explorer.
        nodes_created: Nodes materialized so far, all kinds.
        rounds_expanded: DefenseNodes that were expanded (not terminal).
    """

    def __init__(
        self,
        config: AnalyzerConfig,
        observer: Optional[BuildObserver] = None,
        cache: Optional[ActionSpaceCache] = None,
        use_cache: bool = True,
    ):
        self.config = config
        self.observer = observer if observer is not None else BuildObserver()
        if cache is None and use_cache:
            cache = ActionSpaceCache()
        self.cache = cache
        self.explorer = ActionSpaceExplorer.from_config(config, cache=self.cache)
        self.nodes_created = 0
        self.rounds_expanded = 0

    def build(self) -> DefenseNode:
        """Build the tree from the configured initial state (round 1, no units)."""
        config = self.config
        logger.debug(
            f"Building game tree: paths={config.num_paths} depth={config.starting_depth} "
            f"rounds={config.max_rounds} bag={config.tile_bag.key}"
        )
        root = self.build_round(
            config.tile_bag,
            1,
            config.starting_gold,
            (),
            config.spawn_source_counts,
        )
        logger.debug(f"Game tree complete: {self.nodes_created} nodes")
        return root

    def build_round(
        self,
        tile_bag: TileBag,
        round_number: int,
        gold: int,
        units: Sequence[Unit],
        spawn_source_counts: Sequence[int],
    ) -> DefenseNode:
        """
        Build the subtree rooted at one round's DefenseNode.

        Args:
            tile_bag: Bag at the start of the round.
            round_number: 1-based round number.
            gold: Offense gold for this round's turn.
            units: Offense units carried over from the previous round.
            spawn_source_counts: Remaining spawns per unit type.

        Returns:
            The fully materialized DefenseNode.
        """
        if round_number < 1:
            raise ConfigurationError(f"round_number must be >= 1, got {round_number}")

        config = self.config
        units = tuple(units)
        spawn_source_counts = tuple(spawn_source_counts)
        draw_size = config.draw_size(round_number)

        defense_node = DefenseNode(round=round_number, tile_bag=tile_bag)
        self.nodes_created += 1

        if tile_bag.total < draw_size:
            defense_node.terminal_win = Player.DEFENSE
            self.observer.defense_won(round_number, tile_bag, draw_size)
            return defense_node

        self.rounds_expanded += 1
        self.observer.round_started(round_number, tile_bag, draw_size)

        max_y = config.max_y(round_number)
        draws = enumerate_draws(tile_bag, draw_size)
        self.observer.draws_enumerated(round_number, draws)

        for index, combination in enumerate(draws):
            arrangements = enumerate_arrangements(combination, draw_size)
            action_results = self.explorer.explore(gold, units, spawn_source_counts, max_y)
            remaining_bag = tile_bag.remove(combination)
            self.observer.draw_expanded(round_number, index, combination, len(arrangements), len(action_results))

            draw_node = DrawNode(
                combination=combination,
                random_placement_probability=arrangements[0].probability,
            )
            self.nodes_created += 1

            for arrangement in arrangements:
                placement_node = PlacementNode(placement=arrangement.placement)
                self.nodes_created += 1
                placement_node.offense_turn = self._build_offense_turn(
                    round_number, gold, units, spawn_source_counts, action_results, remaining_bag,
                )
                draw_node.placements.append(placement_node)

            defense_node.draws.append(draw_node)

        return defense_node

    def _build_offense_turn(
        self,
        round_number: int,
        gold: int,
        units: tuple,
        spawn_source_counts: tuple,
        action_results: Sequence[ActionResult],
        remaining_bag: TileBag,
    ) -> OffenseTurnNode:
        turn_node = OffenseTurnNode(
            round=round_number,
            gold=gold,
            units=units,
            spawn_source_counts=spawn_source_counts,
        )
        self.nodes_created += 1

        for result in action_results:
            action_node = ActionNode(
                actions=result.actions,
                final_gold=result.final_gold,
                final_units=result.final_units,
                final_spawn_source_counts=result.final_spawn_source_counts,
                terminal_win=result.win,
            )
            self.nodes_created += 1

            if not result.is_offense_win and round_number < self.config.max_rounds:
                action_node.next_round = self.build_round(
                    remaining_bag,
                    round_number + 1,
                    result.final_gold + GOLD_PER_ROUND,
                    result.final_units,
                    result.final_spawn_source_counts,
                )
            turn_node.actions.append(action_node)

        return turn_node


def build_game_tree(
    config: AnalyzerConfig,
    observer: Optional[BuildObserver] = None,
    cache: Optional[ActionSpaceCache] = None,
) -> DefenseNode:
    """Convenience wrapper: build the full (unannotated) tree for ``config``."""
    return GameTreeBuilder(config, observer=observer, cache=cache).build()


__all__ = [
    'GameTreeBuilder',
    'build_game_tree',
]
