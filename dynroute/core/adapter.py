"""
Change Adapter
==============

Translates graph change notifications into cost invalidations.

The adapter only marks work; the actual repair happens in the planner's next
process_state() calls.

- Weight change / edge added: re-expand the settled endpoints so their
  neighbours are re-derived under the new cost. A weight of zero or less
  is rejected
- Edge removed: an endpoint whose backpointer used the edge is raised to an
  infinite cost and queued at its old priority
- Node removed: every incident edge is treated as removed; losing the goal
  or the source is fatal
- Graph cleared: fatal
"""

import math
from collections.abc import Hashable
from typing import TYPE_CHECKING

from dynroute.core.errors import AnchorRemovedError, GraphClearedError
from dynroute.core.interface import GraphListener
from dynroute.core.schema import GraphEvent, GraphEventType, Tag

if TYPE_CHECKING:
    from dynroute.core.engine import DStarPlanner


class ChangeAdapter(GraphListener):
    """
    Listener that keeps a planner's search state consistent with its graph.

    One adapter is created per planner and subscribed by
    `DStarPlanner.initialize()`.
    """

    def __init__(self, planner: "DStarPlanner"):
        self._planner = planner

    def on_graph_event(self, event: GraphEvent) -> None:
        if event.type == GraphEventType.EDGE_ATTRIBUTE_CHANGED:
            if event.attribute == self._planner.config.weight_attribute:
                self.edge_cost_changed(*event.edge)
        elif event.type == GraphEventType.EDGE_ADDED:
            self.edge_cost_changed(*event.edge)
        elif event.type == GraphEventType.EDGE_REMOVED:
            self.edge_removed(*event.edge)
        elif event.type == GraphEventType.NODE_REMOVED:
            self.node_removed(event.node, event.neighbors)
        elif event.type == GraphEventType.GRAPH_CLEARED:
            raise GraphClearedError("The graph was cleared during an active episode")

    def edge_cost_changed(self, u: Hashable, v: Hashable) -> None:
        """
        Force re-expansion of both endpoints of a re-weighted edge.

        The new weight is checked first, so a zero or negative weight fails
        the call that set it.

        Raises
        ------
        NonPositiveWeightError
            If the edge now weighs zero or less
        """
        self._planner.edge_cost(u, v)
        for node in (u, v):
            self._reexpand(node)

    def edge_removed(self, u: Hashable, v: Hashable) -> None:
        """Cut any backpointer that crossed the removed edge."""
        self._sever(u, v)
        self._sever(v, u)

    def node_removed(self, node: Hashable, neighbors: tuple[Hashable, ...]) -> None:
        """
        Invalidate every edge of a removed node and drop its state.

        Raises
        ------
        AnchorRemovedError
            If the node is the goal or the current source
        """
        planner = self._planner
        if node == planner.target:
            raise AnchorRemovedError(node, "goal")
        if planner.source is not None and node == planner.source:
            raise AnchorRemovedError(node, "source")

        for neighbor in neighbors:
            self._sever(neighbor, node)

        planner.queue.discard(node)
        planner.states.discard(node)

    def _reexpand(self, node: Hashable) -> None:
        state = self._planner.states.get(node)
        if state is None or state.tag is not Tag.CLOSED:
            return

        state.prev_cost = state.cost
        self._planner.queue.insert(state)

    def _sever(self, node: Hashable, lost: Hashable) -> None:
        """Raise `node` if its best path went through `lost`."""
        state = self._planner.states.get(node)
        if state is None or state.backpointer != lost:
            return

        if state.tag is Tag.OPEN:
            state.prev_cost = min(state.prev_cost, state.cost)
        else:
            state.prev_cost = state.cost

        state.backpointer = None
        state.cost = math.inf
        self._planner.queue.insert(state)
