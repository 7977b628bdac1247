"""
Automatic recomputation driven by graph events.
"""

from __future__ import annotations

from enum import Enum

from dynroute.core.interface import DynamicAlgorithm, GraphListener
from dynroute.core.schema import GraphEvent, GraphEventType


class TriggerMode(str, Enum):
    """When a ComputationTrigger runs its algorithm."""

    BY_STEP = "by_step"
    """On every STEP_BEGINS event."""

    ON_CHANGE = "on_change"
    """On every topology or attribute change."""


class ComputationTrigger(GraphListener):
    """
    Listener that calls `algorithm.compute()` in response to graph events.

    Subscribe it after the algorithm itself, so the algorithm has absorbed
    a change before it is asked to recompute.

    Example
    -------
    >>> planner.initialize(graph, source="A", target="D")
    >>> trigger = ComputationTrigger(TriggerMode.BY_STEP, planner)
    >>> graph.subscribe(trigger)
    >>> graph.step_begins(1.0)      # planner.compute() runs here
    """

    def __init__(self, mode: TriggerMode, algorithm: DynamicAlgorithm):
        self.mode = TriggerMode(mode)
        self.algorithm = algorithm
        self.compute_count = 0
        self.last_result: float | None = None

    def on_graph_event(self, event: GraphEvent) -> None:
        if self.mode == TriggerMode.BY_STEP:
            fire = event.type == GraphEventType.STEP_BEGINS
        else:
            fire = event.is_change

        if fire:
            self.last_result = self.algorithm.compute()
            self.compute_count += 1

    def __repr__(self) -> str:
        return f"ComputationTrigger(mode={self.mode.value}, computes={self.compute_count})"
