"""
D* Planning Engine
==================

Incremental shortest paths over a graph whose costs and topology change
between planning cycles.

Key Design Principles:
1. Search runs backwards from the goal; every node's cost is its distance
   to the goal and its backpointer is its next hop
2. Per-node state persists across changes; only regions touched by a change
   are re-expanded
3. Graph mutations arrive synchronously through the ChangeAdapter, so state
   is consistent at every step boundary
4. A node cut off from the goal carries an infinite cost; NaN never enters
   the state table
"""

import math
from collections.abc import Hashable
from typing import Any, Optional

from dynroute.core.adapter import ChangeAdapter
from dynroute.core.cost import CostFunction
from dynroute.core.errors import NoPathError, NotInitializedError, UnknownNodeError
from dynroute.core.interface import DynamicAlgorithm, GraphSource
from dynroute.core.path import PlannedPath, extract_path
from dynroute.core.queue import OpenQueue
from dynroute.core.schema import PlannerConfig, Tag
from dynroute.core.state import SearchState, StateTable


class DStarPlanner(DynamicAlgorithm):
    """
    D* replanner bound to one observable graph.

    Example
    -------
    >>> graph = DynamicGraph()
    >>> graph.add_edge("A", "B", weight=1.0)
    >>> graph.add_edge("B", "D", weight=1.0)
    >>> planner = DStarPlanner()
    >>> planner.initialize(graph, source="A", target="D")
    >>> planner.compute()
    >>> planner.extract_path()
    ['A', 'B', 'D']
    >>>
    >>> graph.set_edge_attribute("B", "D", "weight", 10.0)
    >>> planner.compute()           # repairs only what the change touched
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """
        Initialize the planner.

        Parameters
        ----------
        config : PlannerConfig, optional
            Cost attribute, default weight and numeric policy.
            If None, uses default configuration.
        """
        self.config = config or PlannerConfig()
        self._cost = CostFunction(self.config)
        self._states = StateTable()
        self._queue = OpenQueue()
        self._adapter = ChangeAdapter(self)

        self._graph: Optional[GraphSource] = None
        self._source: Optional[Hashable] = None
        self._target: Optional[Hashable] = None
        self._last_step_count = 0

    @property
    def graph(self) -> Optional[GraphSource]:
        return self._graph

    @property
    def source(self) -> Optional[Hashable]:
        """Current position; None means "plan for every node"."""
        return self._source

    @property
    def target(self) -> Optional[Hashable]:
        """The goal of the current episode."""
        return self._target

    @property
    def states(self) -> StateTable:
        return self._states

    @property
    def queue(self) -> OpenQueue:
        return self._queue

    @property
    def is_initialized(self) -> bool:
        return self._graph is not None

    @property
    def last_step_count(self) -> int:
        """Number of process_state() calls made by the last compute()."""
        return self._last_step_count

    # -------------------------------------------------------------------------
    # Episode lifecycle
    # -------------------------------------------------------------------------

    def initialize(
        self,
        graph: GraphSource,
        source: Optional[Hashable],
        target: Hashable,
    ) -> None:
        """
        Start a new episode on `graph`.

        Clears all search state, subscribes to the graph's change
        notifications and seeds the goal.

        Parameters
        ----------
        graph : GraphSource
            The graph to plan over
        source : Hashable or None
            Current position. If None, compute() settles every reachable node.
        target : Hashable
            The goal

        Raises
        ------
        UnknownNodeError
            If the source or the target is not in the graph
        """
        self._require_node(graph, target)
        if source is not None:
            self._require_node(graph, source)

        if self._graph is not None:
            self._graph.unsubscribe(self._adapter)

        self._graph = graph
        self._source = source
        self._target = target
        self._states.clear()
        self._queue.clear()
        self._last_step_count = 0

        goal = self._states.state_of(target)
        goal.cost = 0.0
        goal.prev_cost = 0.0
        self._queue.insert(goal)

        graph.subscribe(self._adapter)
        print(f"[DStar] Initialized episode: source={source!r}, target={target!r}")

    def set_source(self, node: Hashable) -> None:
        """
        Move the current position without discarding search state.

        Raises
        ------
        NotInitializedError
            If no episode is active
        UnknownNodeError
            If the node is not in the graph
        """
        graph = self._require_initialized()
        if node is not None:
            self._require_node(graph, node)
        self._source = node

    def set_target(self, node: Hashable) -> None:
        """
        Change the goal without discarding search state.

        The new goal is lowered to a zero cost and the old goal is raised to
        an infinite one; both are queued so the next compute() repairs the
        affected region incrementally.

        Raises
        ------
        NotInitializedError
            If no episode is active
        UnknownNodeError
            If the node is not in the graph
        """
        graph = self._require_initialized()
        self._require_node(graph, node)

        old = self._target
        if node == old:
            return

        old_goal = self._states.state_of(old)
        old_goal.prev_cost = min(old_goal.prev_cost, old_goal.cost)
        old_goal.cost = math.inf
        old_goal.backpointer = None
        self._queue.insert(old_goal)

        goal = self._states.state_of(node)
        if goal.tag is Tag.NEW:
            goal.prev_cost = 0.0
        else:
            goal.prev_cost = min(goal.prev_cost, goal.cost, 0.0)
        goal.cost = 0.0
        goal.backpointer = None
        self._queue.insert(goal)

        self._target = node
        print(f"[DStar] Re-targeted episode: {old!r} -> {node!r}")

    def terminate(self) -> None:
        """Stop listening to the graph. Search state is kept for inspection."""
        if self._graph is not None:
            self._graph.unsubscribe(self._adapter)
            print("[DStar] Terminated: unsubscribed from graph changes")
        self._graph = None

    # -------------------------------------------------------------------------
    # Propagation
    # -------------------------------------------------------------------------

    def compute(self, max_steps: Optional[int] = None) -> float:
        """
        Propagate until the source is settled or the queue is exhausted.

        The source is settled once it is CLOSED and no queued key is below
        its cost. Without a source, propagation runs until the queue is
        empty.

        Parameters
        ----------
        max_steps : int, optional
            Stop after this many process_state() calls even if not settled.
            State stays consistent; call compute() again to resume.

        Returns
        -------
        float
            -1 when the queue is exhausted, otherwise the smallest queued key

        Raises
        ------
        NotInitializedError
            If no episode is active
        """
        self._require_initialized()

        steps = 0
        k_min = self._queue.min_key() if self._queue else -1.0
        while k_min >= 0 and not self._source_settled():
            if max_steps is not None and steps >= max_steps:
                break
            k_min = self.process_state()
            steps += 1

        self._last_step_count = steps
        return k_min

    def process_state(self) -> float:
        """
        Expand the queued node with the smallest key.

        Returns
        -------
        float
            The new smallest key, or -1 when the queue is empty
        """
        self._require_initialized()

        k_old = self._queue.min_key()
        x = self._queue.extract_min()
        if x is None:
            return -1.0

        neighbors = [
            self._states.state_of(n)
            for n in self._graph.neighbors(x.node)
            if n != x.node
        ]

        # Tighten x through already-settled neighbours before it propagates.
        for y in neighbors:
            if y.tag is Tag.CLOSED and y.cost <= k_old:
                via_y = y.cost + self._edge_cost(y, x)
                if x.cost > via_y:
                    x.backpointer = y.node
                    x.cost = via_y

        # Decided once per expansion; re-queueing x below must not flip it.
        lowering = x.prev_cost >= x.cost

        for y in neighbors:
            through_x = x.cost + self._edge_cost(x, y)

            if y.tag is Tag.NEW:
                y.backpointer = x.node
                y.cost = through_x
                y.prev_cost = through_x
                self._queue.insert(y)

            elif y.backpointer == x.node:
                if y.cost != through_x:
                    if y.tag is Tag.OPEN:
                        y.prev_cost = min(y.prev_cost, y.cost)
                    else:
                        # A raised node is queued at its old cost.
                        y.prev_cost = min(y.cost, through_x)
                    y.cost = through_x
                    self._queue.insert(y)

            elif y.cost > through_x:
                if lowering:
                    y.backpointer = x.node
                    y.cost = through_x
                    if y.tag is Tag.CLOSED:
                        y.prev_cost = through_x
                    self._queue.insert(y)
                else:
                    x.prev_cost = x.cost
                    self._queue.insert(x)

            elif (
                y.tag is Tag.CLOSED
                and y.cost > k_old
                and x.cost > y.cost + self._edge_cost(y, x)
            ):
                y.prev_cost = y.cost
                self._queue.insert(y)

        return self._queue.min_key() if self._queue else -1.0

    def modify_cost(self, u: Hashable, v: Hashable, value: float) -> None:
        """
        Set the weight of edge (u, v) through the graph.

        The change reaches the planner through the usual notification path,
        so this is equivalent to editing the attribute on the graph.
        """
        graph = self._require_initialized()
        graph.set_edge_attribute(u, v, self.config.weight_attribute, value)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def edge_cost(self, u: Hashable, v: Hashable) -> float:
        """
        Checked traversal cost between `u` and `v` on the bound graph.

        Raises
        ------
        NonPositiveWeightError
            If the edge weighs zero or less
        NumericInconsistencyError
            If the nodes are not adjacent and the config is strict
        """
        graph = self._require_initialized()
        return self._cost.checked(self._cost(graph, u, v))

    def state_of(self, node: Hashable) -> SearchState:
        """Search state of `node`, created as NEW if never seen."""
        return self._states.state_of(node)

    def extract_path(self, node: Optional[Hashable] = None) -> list[Hashable]:
        """
        Current best path from `node` (default: the source) to the goal.

        Raises
        ------
        UnknownNodeError
            If the start node is not in the graph
        NoPathError
            If no path is currently known
        """
        return list(self.shortest_path(node).nodes)

    def shortest_path(self, node: Optional[Hashable] = None) -> PlannedPath:
        """
        Like extract_path(), but returns the path with its cost.

        Raises
        ------
        UnknownNodeError
            If the start node is not in the graph
        NoPathError
            If no path is currently known
        """
        self._require_initialized()
        start = self._source if node is None else node
        if start is None:
            raise ValueError("No node given and the episode has no source")
        self._require_node(self._graph, start)
        return extract_path(self._states, start, self._target)

    def path_cost(self, node: Optional[Hashable] = None) -> float:
        """Cost of the current best path, or +inf if there is none."""
        try:
            return self.shortest_path(node).cost
        except NoPathError:
            return math.inf

    def snapshot(self) -> dict[Hashable, dict[str, Any]]:
        """All known search states, keyed by node."""
        return {state.node: state.to_dict() for state in self._states}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _edge_cost(self, a: SearchState, b: SearchState) -> float:
        return self.edge_cost(a.node, b.node)

    def _source_settled(self) -> bool:
        if self._source is None:
            return False
        state = self._states.get(self._source)
        if state is None or state.tag is not Tag.CLOSED:
            return False
        return self._queue.min_key() >= state.cost

    def _require_initialized(self) -> GraphSource:
        if self._graph is None:
            raise NotInitializedError("Call initialize() before using the planner")
        return self._graph

    @staticmethod
    def _require_node(graph: GraphSource, node: Hashable) -> None:
        if node is None or not graph.has_node(node):
            raise UnknownNodeError(node)

    def __repr__(self) -> str:
        return (
            f"DStarPlanner(source={self._source!r}, target={self._target!r}, "
            f"states={len(self._states)}, open={len(self._queue)})"
        )
