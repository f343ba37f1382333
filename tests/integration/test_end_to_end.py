"""
End-to-end analysis: build, annotate, persist and reload.

Exercises the whole pipeline on a two-round tree, including carried-over
units and the round-2 goal row.
"""

from dungeonquest import (
    AnalyzerConfig,
    DrawLogObserver,
    GameTreeBuilder,
    annotate_tree,
    count_terminals,
    iter_nodes,
    load_analysis,
    save_analysis,
)
from dungeonquest.tree import ActionNode, OffenseTurnNode, node_at
from dungeonquest.types import location_to_xy


def _two_round_config():
    return AnalyzerConfig(max_rounds=2, move_cost=1)


class TestTwoRoundAnalysis:
    """Full pipeline on the reference bag over two rounds."""

    def test_pipeline(self, tmp_path):
        config = _two_round_config()
        observer = DrawLogObserver(tmp_path / "logs")
        builder = GameTreeBuilder(config, observer=observer)

        root = builder.build()
        can_win, outcomes = annotate_tree(root)
        counts = count_terminals(root)

        assert can_win is True
        assert outcomes == counts.resolved
        assert counts.defense_wins == 0
        assert counts.unresolved > 0

        path = save_analysis(root, tmp_path / "analysis", config=config, compress=True)
        document = load_analysis(path)
        assert document.config == config
        assert document.tree == root
        assert annotate_tree(document.tree) == (can_win, outcomes)

        assert sorted(p.parent.name for p in observer.written) == ["round_1", "round_2"]

    def test_round_two_goal_row(self):
        """Round-2 wins need a unit on row 2, not row 1."""
        root = GameTreeBuilder(_two_round_config()).build()
        for _, node in iter_nodes(root):
            if not isinstance(node, OffenseTurnNode) or node.round != 2:
                continue
            for action in node.actions:
                rows = [location_to_xy(u.location, 2)[1] for u in action.final_units]
                assert action.is_offense_win == (2 in rows)

    def test_offense_wins_are_leaves(self):
        root = GameTreeBuilder(_two_round_config()).build()
        for path, node in iter_nodes(root):
            if isinstance(node, ActionNode) and node.is_offense_win:
                assert node.children() == []
                assert node_at(root, path) is node

    def test_gold_regenerates_between_rounds(self):
        root = GameTreeBuilder(_two_round_config()).build()
        for _, node in iter_nodes(root):
            if isinstance(node, ActionNode) and node.next_round is not None:
                for draw in node.next_round.draws:
                    for placement in draw.placements:
                        assert placement.offense_turn.gold == node.final_gold + 1

    def test_cache_reused_across_rounds(self):
        builder = GameTreeBuilder(_two_round_config())
        builder.build()
        stats = builder.cache.stats()
        assert stats["hits"] > 0
        assert builder.explorer.searches == stats["misses"]
