"""
Search state side table.

Per-node bookkeeping lives here rather than on the graph's node attributes,
so planning never writes into the graph it observes.
"""

from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from dynroute.core.schema import Tag


@dataclass(eq=False)
class SearchState:
    """
    Incremental search bookkeeping for one node.

    Attributes
    ----------
    node : Hashable
        The graph node this state belongs to
    tag : Tag
        Lifecycle stage
    backpointer : Hashable or None
        Next hop toward the goal
    cost : float
        Current estimate of the path cost to the goal (h)
    prev_cost : float
        Estimate recorded when the node was last queued (p)
    """

    node: Hashable
    tag: Tag = Tag.NEW
    backpointer: Optional[Hashable] = None
    cost: float = 0.0
    prev_cost: float = 0.0

    @property
    def key(self) -> float:
        """Queue ordering value."""
        return min(self.cost, self.prev_cost)

    def to_dict(self) -> dict[str, Any]:
        """Convert the state to a JSON-serializable dictionary."""
        return {
            "node": self.node,
            "tag": self.tag.value,
            "backpointer": self.backpointer,
            "cost": self.cost,
            "prev_cost": self.prev_cost,
        }

    def __repr__(self) -> str:
        return (
            f"SearchState(node={self.node!r}, tag={self.tag.value}, "
            f"b={self.backpointer!r}, h={self.cost}, p={self.prev_cost})"
        )


class StateTable:
    """Map from node to SearchState, filled lazily."""

    def __init__(self):
        self._states: dict[Hashable, SearchState] = {}

    def state_of(self, node: Hashable) -> SearchState:
        """Existing state for `node`, or a fresh NEW one."""
        state = self._states.get(node)
        if state is None:
            state = SearchState(node)
            self._states[node] = state
        return state

    def get(self, node: Hashable) -> Optional[SearchState]:
        """Existing state for `node` without creating one."""
        return self._states.get(node)

    def discard(self, node: Hashable) -> Optional[SearchState]:
        """Forget a node's state; returns it if there was one."""
        return self._states.pop(node, None)

    def clear(self) -> None:
        self._states.clear()

    def count(self, tag: Tag) -> int:
        """Number of states carrying `tag`."""
        return sum(1 for s in self._states.values() if s.tag is tag)

    def __contains__(self, node: Hashable) -> bool:
        return node in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[SearchState]:
        return iter(list(self._states.values()))
