#!/usr/bin/env python3
"""
Command-line interface for game-tree analysis.

Usage:
    python -m dungeonquest.cli --rounds 3 --output game_analysis
    python -m dungeonquest.cli --tile-bag B=4,S=2 --gold 4 --log-dir logs --verbose
"""

import argparse
import logging
import sys

from .config import AnalyzerConfig, parse_tile_bag
from .errors import AnalyzerError
from .persistence import ANALYSIS_FILENAME, DrawLogObserver, clear_log_dir, save_analysis
from .sentry_config import capture_exception, init_sentry, set_analysis_context
from .tree import (
    CompositeObserver,
    GameTreeBuilder,
    LoggingObserver,
    annotate_tree,
    count_terminals,
    tree_stats,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exhaustive DungeonQuest game-tree analysis")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--paths", type=int, default=None, help="Board width (number of paths)")
    parser.add_argument("--depth", type=int, default=None, help="Rows placed in round 1")
    parser.add_argument("--rounds", type=int, default=None, help="Max rounds to expand")
    parser.add_argument("--gold", type=int, default=None, help="Offense starting gold")
    parser.add_argument("--move-cost", type=int, default=None, help="Gold per move action")
    parser.add_argument("--tile-bag", type=str, default=None,
                        help="Initial tile bag, e.g. B=4,S=2")
    parser.add_argument("--env-file", type=str, default=None,
                        help="Read DQ_* settings from this .env file")
    parser.add_argument("--output", "-o", type=str, default=ANALYSIS_FILENAME,
                        help="Output path (extension added automatically)")
    parser.add_argument("--compress", action="store_true", help="gzip the output")
    parser.add_argument("--log-dir", type=str, default=None,
                        help="Write per-round draw distributions under this directory")
    parser.add_argument("--clear-logs", action="store_true",
                        help="Delete --log-dir before running")
    return parser


def run(args: argparse.Namespace) -> int:
    """Build, annotate and save one analysis. Returns the exit code."""
    config = AnalyzerConfig.from_env(
        env_file=args.env_file,
        num_paths=args.paths,
        starting_depth=args.depth,
        max_rounds=args.rounds,
        starting_gold=args.gold,
        move_cost=args.move_cost,
        tile_bag=parse_tile_bag(args.tile_bag) if args.tile_bag else None,
    )
    set_analysis_context(config)

    observers = [LoggingObserver()]
    if args.log_dir:
        if args.clear_logs:
            clear_log_dir(args.log_dir)
        observers.append(DrawLogObserver(args.log_dir))

    builder = GameTreeBuilder(config, observer=CompositeObserver(observers))

    logger.info("Generating game tree...")
    root = builder.build()
    logger.info("Annotating outcomes...")
    can_offense_win, num_outcomes = annotate_tree(root)

    output_path = save_analysis(root, args.output, config=config, compress=args.compress)
    print(f"\nResults saved to: {output_path}")

    # Print summary
    terminals = count_terminals(root)
    stats = tree_stats(root)
    cache_stats = builder.cache.stats() if builder.cache is not None else None

    print("\n" + "=" * 80)
    print("SUMMARY")
    print("=" * 80)
    print(f"  Board: {config.num_paths} paths, starting depth {config.starting_depth}")
    print(f"  Rounds: {config.max_rounds}  Tile bag: {config.tile_bag.key}")
    print(f"  Offense can win: {can_offense_win}")
    print(f"  Resolved outcomes: {num_outcomes}")
    print(f"    Offense wins: {terminals.offense_wins}")
    print(f"    Defense wins: {terminals.defense_wins}")
    print(f"    Unresolved at horizon: {terminals.unresolved}")

    print("\nNodes by kind:")
    for kind, count in stats.items():
        print(f"  {kind}: {count}")

    if cache_stats is not None:
        print(f"\nAction-space cache: {cache_stats['size']} entries, "
              f"hit rate {cache_stats['hit_rate']:.1%}")

    return 0


def main(argv=None) -> int:
    """Main entry point for the analysis CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if init_sentry(args.env_file):
        logger.debug("Sentry error monitoring enabled")

    try:
        return run(args)
    except AnalyzerError as e:
        capture_exception(e)
        logger.error(f"Analysis failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
