"""
Path extraction by backpointer walk.
"""

import math
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Any

from dynroute.core.errors import NoPathError
from dynroute.core.schema import Tag
from dynroute.core.state import StateTable


@dataclass(frozen=True)
class PlannedPath:
    """
    A path from a position to the goal.

    Attributes
    ----------
    nodes : tuple
        Nodes in travel order, position first, goal last
    cost : float
        Cost estimate of the first node, i.e. the summed edge costs
    """

    nodes: tuple[Hashable, ...]
    cost: float

    @property
    def start(self) -> Hashable:
        return self.nodes[0]

    @property
    def goal(self) -> Hashable:
        return self.nodes[-1]

    @property
    def edges(self) -> list[tuple[Hashable, Hashable]]:
        """Consecutive node pairs."""
        return list(zip(self.nodes, self.nodes[1:]))

    @property
    def hop_count(self) -> int:
        """Number of edges on the path."""
        return len(self.nodes) - 1

    def to_dict(self) -> dict[str, Any]:
        """Convert the path to a JSON-serializable dictionary."""
        return {
            "nodes": list(self.nodes),
            "cost": self.cost,
            "hop_count": self.hop_count,
        }

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


def extract_path(states: StateTable, start: Hashable, goal: Hashable) -> PlannedPath:
    """
    Follow backpointers from `start` until `goal`.

    Does not modify any state, so it can be called as often as needed.

    Raises
    ------
    NoPathError
        If `start` was never reached, its cost is infinite, a backpointer is
        missing before the goal, or the chain loops
    """
    first = states.get(start)
    if first is None or first.tag is Tag.NEW:
        raise NoPathError(start, "node has not been reached by the search")
    if math.isinf(first.cost):
        raise NoPathError(start, "goal is unreachable")

    nodes = [start]
    seen = {start}
    current = first

    while current.node != goal:
        nxt = current.backpointer
        if nxt is None:
            raise NoPathError(start, f"backpointer chain ends at {current.node!r}")
        if nxt in seen:
            raise NoPathError(start, f"backpointer chain loops at {nxt!r}")

        state = states.get(nxt)
        if state is None:
            raise NoPathError(start, f"backpointer leads to unknown node {nxt!r}")

        nodes.append(nxt)
        seen.add(nxt)
        current = state

    return PlannedPath(nodes=tuple(nodes), cost=first.cost)
