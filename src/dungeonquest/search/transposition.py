"""
Transposition table for memoizing explored offense turns.

The action space of an offense turn depends only on the offense resources
and the goal row, never on where the defense placed its tiles. Every
arrangement of every draw in a round starts from the same resources, so the
explorer would otherwise repeat the same DFS many times per round.

Results are immutable tuples of ActionResult and are shared as-is.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Tuple

from ..types import ActionResult


@dataclass
class ActionSpaceEntry:
    """
    Cached action space for one starting state.

    Note: Intentionally mutable (not frozen). The visit_count field is
    incremented on cache hits to track access frequency for eviction decisions.

    Attributes:
        state_key: (gold, units, spawn_source_counts, max_y) of the start state.
        results: Every distinct end-of-turn state, in DFS order.
        visit_count: How many times this entry has been requested.
    """
    state_key: Hashable
    results: Tuple[ActionResult, ...]
    visit_count: int = 1


class ActionSpaceCache:
    """
    Hash table for caching explored offense turns.

    Attributes:
        table: Dictionary mapping state keys to ActionSpaceEntry
        max_size: Maximum number of entries before eviction
        hits: Number of successful lookups
        misses: Number of failed lookups
        evictions: Number of eviction passes
    """

    def __init__(self, max_size: int = 100_000):
        """
        Initialize the cache.

        Args:
            max_size: Maximum entries before eviction triggers.
        """
        self.table: Dict[Hashable, ActionSpaceEntry] = {}
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def lookup(self, state_key: Hashable) -> Optional[ActionSpaceEntry]:
        """
        Check if a start state has been explored.

        Returns:
            ActionSpaceEntry if found, None otherwise.
            Note: visit_count is incremented on hit.
        """
        entry = self.table.get(state_key)
        if entry:
            self.hits += 1
            entry.visit_count += 1
            return entry
        self.misses += 1
        return None

    def store(self, state_key: Hashable, results: Tuple[ActionResult, ...]) -> ActionSpaceEntry:
        """Store the action space for a start state."""
        if len(self.table) >= self.max_size:
            self._evict()
        entry = ActionSpaceEntry(state_key=state_key, results=results)
        self.table[state_key] = entry
        return entry

    def _evict(self):
        """
        Remove the least visited 10% of entries.

        Ties keep insertion order, so older entries go first.
        """
        if not self.table:
            return

        sorted_entries = sorted(self.table.items(), key=lambda x: x[1].visit_count)
        to_remove = max(1, len(sorted_entries) // 10)
        for key, _ in sorted_entries[:to_remove]:
            del self.table[key]
        self.evictions += 1

    def clear(self):
        """Clear all entries and reset statistics."""
        self.table.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def stats(self) -> dict:
        """
        Return cache statistics.

        Returns:
            Dictionary with size, max_size, hits, misses, hit_rate, evictions
            and the number of cached end-of-turn states.
        """
        total = self.hits + self.misses
        return {
            "size": len(self.table),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total > 0 else 0.0,
            "evictions": self.evictions,
            "cached_results": sum(len(e.results) for e in self.table.values()),
        }

    def __len__(self) -> int:
        """Return number of entries in the table."""
        return len(self.table)

    def __contains__(self, state_key: Hashable) -> bool:
        """Check if a key exists in the table (without updating stats)."""
        return state_key in self.table


__all__ = [
    'ActionSpaceEntry',
    'ActionSpaceCache',
]
