"""
Best-first tree search over a single mutable game state.

Nodes do not store positions. A node's position is reached by replaying
the moves from the root and left again by undoing them, so the game state
is back at the root after every iteration.

Leaves are picked with a softmax over their mean values whose temperature
grows by `speed` every iteration, so the search explores broadly at first
and concentrates on the best leaves later.
"""

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


class GameStateMut(Protocol):
    """Mutable game state driven by the search."""

    def undo(self) -> None:
        ...

    def move_count(self) -> int:
        ...

    def select_move(self, i: int) -> None:
        ...

    def value(self) -> float:
        ...


class SearchNode:
    """Tree node. children is None until the node is expanded."""

    __slots__ = ("id", "parent", "children", "value_sum", "visit_count")

    def __init__(self, node_id: int, parent: int):
        self.id = node_id
        self.parent = parent
        self.children: Optional[List[int]] = None
        self.value_sum = 0.0
        self.visit_count = 0

    @property
    def mean(self) -> float:
        if self.visit_count == 0:
            return 0.0
        return self.value_sum / self.visit_count

    def is_leaf(self) -> bool:
        return self.children is None


@dataclass
class SearchStats:
    iterations: int
    nodes: int
    leaves: int
    temperature: float
    best_value: float
    exhausted: bool
    elapsed: float


class TreeSearch:
    """
    Search tree over a GameStateMut.

    Node 0 is the root and is its own parent.
    """

    def __init__(self, game_state: GameStateMut, rng: random.Random, speed: float):
        self.game_state = game_state
        self.rng = rng
        self.speed = speed
        self.temperature = speed
        self.nodes: List[SearchNode] = [SearchNode(0, 0)]
        # Unexpanded node ids in creation order
        self._leaves = {0: None}
        self.iterations = 0
        self.best_value = float("-inf")

    def select_leaf(self) -> Optional[int]:
        """Draw a leaf with probability proportional to exp((mean - max) * temperature)."""
        if not self._leaves:
            return None
        leaves = list(self._leaves)
        means = [self.nodes[i].mean for i in leaves]
        best = max(means)
        weights = [math.exp((mean - best) * self.temperature) for mean in means]
        total = sum(weights)
        v = self.rng.random() * total
        acc = 0.0
        for i, weight in zip(leaves, weights):
            acc += weight
            if v < acc:
                logger.debug(f"T={self.temperature:.4f} Selected {i:8} with prob {weight / total:.4f}")
                return i
        raise RuntimeError(f"Leaf draw {v} fell outside total weight {total}")

    def path_to(self, i: int) -> List[int]:
        """Node ids from just below the root down to node i."""
        path = []
        while i != 0:
            path.append(i)
            i = self.nodes[i].parent
        path.reverse()
        return path

    def replay_to(self, i: int) -> None:
        """Play the moves leading from the root to node i."""
        for node_id in self.path_to(i):
            siblings = self.nodes[self.nodes[node_id].parent].children
            if siblings is None or node_id not in siblings:
                raise RuntimeError(f"Node {node_id} is not a child of its parent")
            self.game_state.select_move(siblings.index(node_id))

    def unwind(self, i: int) -> None:
        """Undo the moves leading from the root to node i."""
        while i != 0:
            self.game_state.undo()
            i = self.nodes[i].parent

    def expand(self, i: int) -> int:
        """
        Create all children of leaf i and step into a random one.

        The game state must be at node i. Returns the child that was entered,
        or i itself when the position has no moves.
        """
        node = self.nodes[i]
        if not node.is_leaf():
            raise RuntimeError(f"Node {i} is already expanded")
        count = self.game_state.move_count()
        children = []
        for _ in range(count):
            child = SearchNode(len(self.nodes), i)
            self.nodes.append(child)
            self._leaves[child.id] = None
            children.append(child.id)
        node.children = children
        del self._leaves[i]
        if count == 0:
            return i
        j = self.rng.randrange(count)
        self.game_state.select_move(j)
        return children[j]

    def simulate(self) -> float:
        """Play random moves to the end, score, and undo back to the start."""
        depth = 0
        while True:
            count = self.game_state.move_count()
            if count == 0:
                break
            self.game_state.select_move(self.rng.randrange(count))
            depth += 1
        value = self.game_state.value()
        for _ in range(depth):
            self.game_state.undo()
        return value

    def backpropagate(self, i: int, value: float) -> None:
        while True:
            node = self.nodes[i]
            node.value_sum += value
            node.visit_count += 1
            if i == 0:
                break
            i = node.parent

    def step(self) -> bool:
        """Run one iteration. Returns False when every leaf has been expanded."""
        i = self.select_leaf()
        if i is None:
            return False
        self.replay_to(i)
        j = self.expand(i)
        value = self.simulate()
        self.best_value = max(self.best_value, value)
        self.backpropagate(j, value)
        self.unwind(j)
        self.temperature += self.speed
        self.iterations += 1
        return True

    def run(self, max_iterations: Optional[int] = None, time_limit: Optional[float] = None) -> SearchStats:
        """
        Iterate until the tree is exhausted or a budget runs out.

        Args:
            max_iterations: Stop after this many iterations (None = no limit)
            time_limit: Stop after this many seconds (None = no limit)

        Returns:
            SearchStats for the run
        """
        start = time.perf_counter()
        done = 0
        while max_iterations is None or done < max_iterations:
            if time_limit is not None and time.perf_counter() - start >= time_limit:
                break
            if not self.step():
                break
            done += 1
        stats = self.stats(time.perf_counter() - start)
        logger.info(
            f"Tree search stopped: iterations={stats.iterations}, nodes={stats.nodes}, "
            f"leaves={stats.leaves}, exhausted={stats.exhausted}, best={stats.best_value}"
        )
        return stats

    def stats(self, elapsed: float = 0.0) -> SearchStats:
        return SearchStats(
            iterations=self.iterations,
            nodes=len(self.nodes),
            leaves=len(self._leaves),
            temperature=self.temperature,
            best_value=self.best_value,
            exhausted=not self._leaves,
            elapsed=elapsed,
        )


def run_treesearch(
    game_state: GameStateMut,
    rng: random.Random,
    speed: float,
    max_iterations: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> SearchStats:
    """Search from the current position of game_state until exhausted or out of budget."""
    return TreeSearch(game_state, rng, speed).run(max_iterations=max_iterations, time_limit=time_limit)
