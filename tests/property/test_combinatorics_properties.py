"""
Property-based tests for draw and arrangement enumeration.

Uses Hypothesis to generate random bags and verify invariants:
1. Normalization - a draw distribution sums to exactly 1
2. Feasibility - every draw has the requested size and fits in the bag
3. Uniqueness - no draw or arrangement is produced twice
4. Counting - arrangements match the multinomial coefficient
"""

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from dungeonquest.combinatorics import (
    enumerate_arrangements,
    enumerate_draws,
    multinomial_coefficient,
)
from dungeonquest.types import DrawCombination, TILE_TYPE_ORDER, TileBag

# Check if hypothesis is available
pytest.importorskip("hypothesis")


bags = st.lists(
    st.integers(min_value=0, max_value=4),
    min_size=len(TILE_TYPE_ORDER),
    max_size=len(TILE_TYPE_ORDER),
).map(lambda counts: TileBag(tuple(counts)))


class TestDrawProperties:
    """Invariants of enumerate_draws()."""

    @given(bag=bags, data=st.data())
    @settings(max_examples=100)
    def test_distribution_normalized(self, bag, data):
        n = data.draw(st.integers(min_value=0, max_value=bag.total))
        draws = enumerate_draws(bag, n)
        assert draws
        assert sum(d.probability for d in draws) == 1

    @given(bag=bags, data=st.data())
    @settings(max_examples=100)
    def test_draws_feasible_and_unique(self, bag, data):
        n = data.draw(st.integers(min_value=0, max_value=bag.total))
        draws = enumerate_draws(bag, n)
        assert len({d.counts for d in draws}) == len(draws)
        for draw in draws:
            assert draw.size == n
            assert all(0 <= c <= a for c, a in zip(draw.counts, bag.counts))
            assert draw.probability > 0

    @given(bag=bags)
    @settings(max_examples=50)
    def test_deterministic(self, bag):
        assume(bag.total >= 2)
        assert enumerate_draws(bag, 2) == enumerate_draws(bag, 2)


class TestArrangementProperties:
    """Invariants of enumerate_arrangements()."""

    @given(counts=st.lists(st.integers(min_value=0, max_value=3),
                           min_size=len(TILE_TYPE_ORDER), max_size=len(TILE_TYPE_ORDER)))
    @settings(max_examples=100)
    def test_count_matches_multinomial(self, counts):
        combo = DrawCombination(tuple(counts))
        assume(0 < combo.size <= 8)
        arrangements = enumerate_arrangements(combo, combo.size)
        assert len(arrangements) == multinomial_coefficient(counts)

    @given(counts=st.lists(st.integers(min_value=0, max_value=2),
                           min_size=len(TILE_TYPE_ORDER), max_size=len(TILE_TYPE_ORDER)))
    @settings(max_examples=100)
    def test_arrangements_unique_and_uniform(self, counts):
        combo = DrawCombination(tuple(counts))
        assume(0 < combo.size <= 7)
        arrangements = enumerate_arrangements(combo, combo.size)
        placements = [a.placement for a in arrangements]
        assert len(placements) == len(set(placements))
        assert sum(a.probability for a in arrangements) == 1
        for placement in placements:
            assert sorted(placement) == sorted(t.value for t in combo.tiles())
