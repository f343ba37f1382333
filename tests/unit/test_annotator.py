"""
Tests for backward-induction outcome annotation.
"""

import pytest

from dungeonquest.config import AnalyzerConfig
from dungeonquest.tree import (
    ActionNode,
    DefenseNode,
    DrawNode,
    OffenseTurnNode,
    OutcomeAnnotator,
    PlacementNode,
    annotate_tree,
    build_game_tree,
    count_terminals,
    iter_nodes,
    node_from_dict,
)
from dungeonquest.types import DrawCombination, Player, TileBag


def _action(win=None, next_round=None):
    return ActionNode(
        actions=(),
        final_gold=0,
        final_units=(),
        final_spawn_source_counts=(0, 0),
        terminal_win=win,
        next_round=next_round,
    )


def _turn(*actions):
    return OffenseTurnNode(round=1, gold=0, actions=list(actions))


class TestLeafRules:
    """Terminal outcomes."""

    def test_offense_win(self):
        assert annotate_tree(_action(win=Player.OFFENSE)) == (True, 1)

    def test_defense_win(self):
        node = DefenseNode(round=2, tile_bag=TileBag.from_mapping({}), terminal_win=Player.DEFENSE)
        assert annotate_tree(node) == (False, 1)

    def test_horizon_leaf_counts_nothing(self):
        """Unresolved leaves contribute no outcomes."""
        assert annotate_tree(_action()) == (False, 0)

    def test_bare_placement(self):
        assert annotate_tree(PlacementNode(placement="BB")) == (False, 0)


class TestAggregation:
    """Inner-node rules."""

    def test_or_and_sum(self):
        turn = _turn(_action(win=Player.OFFENSE), _action(), _action(win=Player.OFFENSE))
        assert annotate_tree(turn) == (True, 2)

    def test_no_short_circuit(self):
        """Every child is annotated even after a win is found."""
        first = _action(win=Player.OFFENSE)
        later = _action()
        annotate_tree(_turn(first, later))
        assert later.can_offense_win is False
        assert later.num_outcomes == 0

    def test_action_passes_next_round_through(self):
        defense = DefenseNode(round=2, tile_bag=TileBag.from_mapping({}), terminal_win=Player.DEFENSE)
        action = _action(next_round=defense)
        assert annotate_tree(action) == (False, 1)
        assert defense.num_outcomes == 1

    def test_full_chain(self):
        placement = PlacementNode(placement="BBBB", offense_turn=_turn(_action(win=Player.OFFENSE), _action()))
        draw = DrawNode(
            combination=DrawCombination.from_mapping({"B": 4}),
            random_placement_probability=1,
            placements=[placement],
        )
        root = DefenseNode(round=1, tile_bag=TileBag.from_mapping({"B": 4}), draws=[draw])
        assert annotate_tree(root) == (True, 1)
        assert draw.can_offense_win is True
        assert placement.num_outcomes == 1

    def test_not_a_node(self):
        with pytest.raises(TypeError, match="Not a game-tree node: object"):
            OutcomeAnnotator().annotate(object())

    def test_not_a_node_with_annotation_fields(self):
        """Duck-typed objects are rejected before their fields are read."""
        class Impostor:
            can_offense_win = True
            num_outcomes = 1

        with pytest.raises(TypeError):
            annotate_tree(Impostor())

    def test_non_node_child_rejected(self):
        with pytest.raises(TypeError):
            annotate_tree(OffenseTurnNode(round=1, gold=0, actions=["not a node"]))


class TestBuiltTrees:
    """Annotation of builder output."""

    def test_one_round_reference(self, small_config):
        root = build_game_tree(small_config)
        assert annotate_tree(root) == (True, 66)
        assert [d.num_outcomes for d in root.draws] == [36, 24, 6]

    def test_every_node_annotated(self, small_config):
        root = build_game_tree(small_config)
        annotate_tree(root)
        for _, node in iter_nodes(root):
            assert node.can_offense_win is not None
            assert node.num_outcomes is not None

    def test_defense_wins_counted(self, blank_bag):
        config = AnalyzerConfig(tile_bag=blank_bag, max_rounds=2, move_cost=1)
        root = build_game_tree(config)
        assert annotate_tree(root) == (True, 17)

    def test_outcomes_equal_resolved_terminals(self, small_config):
        config = AnalyzerConfig.from_dict({**small_config.to_dict(), "max_rounds": 3})
        root = build_game_tree(config)
        can_win, outcomes = annotate_tree(root)
        counts = count_terminals(root)
        assert can_win is (counts.offense_wins > 0)
        assert outcomes == counts.resolved

    def test_idempotent(self, small_config):
        root = build_game_tree(small_config)
        first = annotate_tree(root)
        assert annotate_tree(root) == first

    def test_reannotating_visits_every_node_once(self, small_config):
        root = build_game_tree(small_config)
        annotate_tree(root)
        annotator = OutcomeAnnotator()
        annotator.annotate(root)
        assert annotator.nodes_visited == 213
        assert annotator.cache_hits == 213

    def test_missing_leaf_fields_filled_below_annotated_ancestors(self, small_config):
        root = build_game_tree(small_config)
        outcome = annotate_tree(root)
        leaf = root.draws[0].placements[0].offense_turn.actions[0]
        leaf.can_offense_win = None
        leaf.num_outcomes = None

        assert annotate_tree(root) == outcome
        unannotated = [
            node for _, node in iter_nodes(root)
            if node.can_offense_win is None or node.num_outcomes is None
        ]
        assert not unannotated
        assert (leaf.can_offense_win, leaf.num_outcomes) == (False, 0)

    def test_only_missing_field_recomputed(self, small_config):
        root = build_game_tree(small_config)
        annotate_tree(root)
        draw = root.draws[1]
        draw.num_outcomes = None
        annotator = OutcomeAnnotator()
        annotator.annotate(root)
        assert draw.num_outcomes == 24
        assert draw.can_offense_win is True
        assert annotator.cache_hits == 212

    def test_reloaded_tree_is_fixed_point(self, small_config):
        root = build_game_tree(small_config)
        outcome = annotate_tree(root)
        reloaded = node_from_dict(root.to_dict())
        assert (reloaded.can_offense_win, reloaded.num_outcomes) == outcome
        assert annotate_tree(reloaded) == outcome
        assert reloaded.to_dict() == root.to_dict()

    def test_unannotated_reload_matches(self, small_config):
        root = build_game_tree(small_config)
        reloaded = node_from_dict(root.to_dict())
        assert annotate_tree(reloaded) == annotate_tree(root)
