"""
Open queue.

A binary heap over OPEN states ordered by key. Re-inserting a state pushes a
fresh entry and retires the old one; retired entries are dropped lazily when
they reach the top. Ties are broken by insertion order.
"""

import heapq
import itertools
import math
from collections.abc import Hashable
from typing import Optional

from dynroute.core.schema import Tag
from dynroute.core.state import SearchState


class OpenQueue:
    """Priority queue of states pending (re)expansion."""

    def __init__(self):
        self._heap: list[tuple[float, int, SearchState]] = []
        self._live: dict[Hashable, int] = {}
        self._counter = itertools.count()

    def insert(self, state: SearchState) -> None:
        """
        Queue `state` at its current key and tag it OPEN.

        The caller sets prev_cost beforehand; any earlier entry for the same
        node is superseded.
        """
        state.tag = Tag.OPEN
        seq = next(self._counter)
        self._live[state.node] = seq
        heapq.heappush(self._heap, (state.key, seq, state))

    def extract_min(self) -> Optional[SearchState]:
        """Pop the state with the smallest key and tag it CLOSED."""
        self._drop_retired()
        if not self._heap:
            return None

        _, _, state = heapq.heappop(self._heap)
        del self._live[state.node]
        state.tag = Tag.CLOSED
        return state

    def remove(self, state: SearchState) -> None:
        """Take `state` out of the queue and tag it CLOSED."""
        self._live.pop(state.node, None)
        state.tag = Tag.CLOSED

    def discard(self, node: Hashable) -> None:
        """Forget a node that no longer exists; its state is left untouched."""
        self._live.pop(node, None)

    def min_key(self) -> float:
        """Smallest key in the queue, or +inf when empty."""
        self._drop_retired()
        if not self._heap:
            return math.inf
        return self._heap[0][0]

    def clear(self) -> None:
        self._heap.clear()
        self._live.clear()

    def _drop_retired(self) -> None:
        heap = self._heap
        while heap:
            _, seq, state = heap[0]
            if self._live.get(state.node) == seq:
                return
            heapq.heappop(heap)

    def __contains__(self, node: Hashable) -> bool:
        return node in self._live

    def __len__(self) -> int:
        return len(self._live)

    def __bool__(self) -> bool:
        return bool(self._live)

    def __repr__(self) -> str:
        return f"OpenQueue(size={len(self)}, min_key={self.min_key()})"
