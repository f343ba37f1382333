"""
Build observers.

The builder itself never logs or prints progress. Callers that want
narration or side artifacts pass an observer; the default does nothing.
"""

import logging
from typing import List, Sequence

from ..types import DrawCombination, TileBag

logger = logging.getLogger(__name__)


class BuildObserver:
    """Base class for build progress hooks. All hooks are no-ops."""

    def round_started(self, round_number: int, tile_bag: TileBag, draw_size: int):
        """Called when a round begins expanding."""

    def draws_enumerated(self, round_number: int, draws: Sequence[DrawCombination]):
        """Called once per round expansion with the full draw distribution."""

    def draw_expanded(self, round_number: int, index: int, draw: DrawCombination,
                      num_arrangements: int, num_action_results: int):
        """Called after a draw's arrangements and action space are known."""

    def defense_won(self, round_number: int, tile_bag: TileBag, draw_size: int):
        """Called when the bag cannot cover the round's draw."""


class LoggingObserver(BuildObserver):
    """Narrates the build through the module logger."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def round_started(self, round_number, tile_bag, draw_size):
        logger.log(self.level, f"Processing round {round_number} (bag {tile_bag.key}, drawing {draw_size})...")

    def draws_enumerated(self, round_number, draws):
        logger.log(self.level, f"  Round {round_number}: {len(draws)} draw combinations")

    def draw_expanded(self, round_number, index, draw, num_arrangements, num_action_results):
        logger.log(
            self.level,
            f"  Round {round_number} - Combination {index + 1}: {draw.as_dict()} "
            f"(probability: {float(draw.probability):.6f}), "
            f"{num_arrangements} unique arrangements, {num_action_results} offense results",
        )

    def defense_won(self, round_number, tile_bag, draw_size):
        logger.log(
            self.level,
            f"  Round {round_number}: bag {tile_bag.key} cannot cover a draw of {draw_size} - defense wins",
        )


class CompositeObserver(BuildObserver):
    """Fans every hook out to several observers in order."""

    def __init__(self, observers: Sequence[BuildObserver]):
        self.observers: List[BuildObserver] = list(observers)

    def round_started(self, round_number, tile_bag, draw_size):
        for observer in self.observers:
            observer.round_started(round_number, tile_bag, draw_size)

    def draws_enumerated(self, round_number, draws):
        for observer in self.observers:
            observer.draws_enumerated(round_number, draws)

    def draw_expanded(self, round_number, index, draw, num_arrangements, num_action_results):
        for observer in self.observers:
            observer.draw_expanded(round_number, index, draw, num_arrangements, num_action_results)

    def defense_won(self, round_number, tile_bag, draw_size):
        for observer in self.observers:
            observer.defense_won(round_number, tile_bag, draw_size)


__all__ = [
    'BuildObserver',
    'LoggingObserver',
    'CompositeObserver',
]
