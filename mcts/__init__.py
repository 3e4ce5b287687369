"""Tree search over mutable game states."""

from .treesearch import GameStateMut, SearchNode, SearchStats, TreeSearch, run_treesearch

__all__ = ["GameStateMut", "SearchNode", "SearchStats", "TreeSearch", "run_treesearch"]
