"""Shared pytest fixtures for dungeonquest-analyzer tests."""

import pytest

from dungeonquest.config import AnalyzerConfig
from dungeonquest.search import ActionSpaceCache, ActionSpaceExplorer
from dungeonquest.types import TileBag, TileType


# Unit spawn costs used throughout: BASIC, SPRINTER
SPAWN_COSTS = (2, 3)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DQ_* and Sentry settings from the host out of every test.

    Setting before deleting makes monkeypatch remove anything a .env file
    exports during the test.
    """
    for var in (
        "DQ_NUM_PATHS",
        "DQ_STARTING_DEPTH",
        "DQ_MAX_ROUNDS",
        "DQ_TILE_BAG",
        "DQ_STARTING_GOLD",
        "DQ_SPAWN_SOURCES",
        "DQ_SPAWN_COSTS",
        "DQ_MOVE_COST",
        "SENTRY_DSN",
    ):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def reference_bag():
    """Four blanks and two spike traps."""
    return TileBag.from_mapping({TileType.BLANK: 4, TileType.SPIKE_TRAP: 2})


@pytest.fixture
def blank_bag():
    """Exactly one round-1 draw worth of blanks."""
    return TileBag.from_mapping({TileType.BLANK: 4})


@pytest.fixture
def small_config(reference_bag):
    """2x2 board, one round, cheap moves."""
    return AnalyzerConfig(
        num_paths=2,
        starting_depth=2,
        max_rounds=1,
        tile_bag=reference_bag,
        starting_gold=4,
        spawn_source_counts=(1, 1),
        spawn_costs=SPAWN_COSTS,
        move_cost=1,
    )


@pytest.fixture
def explorer():
    """Explorer for a two-path board with unit move cost and no cache."""
    return ActionSpaceExplorer(num_paths=2, spawn_costs=SPAWN_COSTS, move_cost=1)


@pytest.fixture
def cached_explorer():
    """Explorer sharing a fresh ActionSpaceCache."""
    return ActionSpaceExplorer(
        num_paths=2, spawn_costs=SPAWN_COSTS, move_cost=1, cache=ActionSpaceCache(),
    )
