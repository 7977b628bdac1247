"""
dynroute Core: Incremental Replanning over Dynamic Graphs
=========================================================

This package provides a D* planner that keeps its search state across graph
changes and repairs only the region a change touches.

Public API:
- DStarPlanner: The planning engine
- DynamicGraph: Observable networkx graph delivering change events
- ChangeAdapter: Graph events -> cost invalidations
- CostFunction: Edge attribute -> traversal cost
- StateTable / SearchState / OpenQueue: Search bookkeeping
- PlannedPath / extract_path: Backpointer walk to the goal
- PlannerConfig, GraphEvent, GraphEventType, Tag: Schema
- GraphSource, GraphListener, DynamicAlgorithm: Collaborator contracts
"""

from dynroute.core.schema import (
    CHANGE_EVENTS,
    GraphEvent,
    GraphEventType,
    PlannerConfig,
    Tag,
)
from dynroute.core.errors import (
    AnchorRemovedError,
    GraphClearedError,
    NoPathError,
    NonPositiveWeightError,
    NotInitializedError,
    NumericInconsistencyError,
    PlannerError,
    PreconditionError,
    UnknownNodeError,
)
from dynroute.core.interface import DynamicAlgorithm, GraphListener, GraphSource
from dynroute.core.graph import DynamicGraph
from dynroute.core.cost import CostFunction
from dynroute.core.state import SearchState, StateTable
from dynroute.core.queue import OpenQueue
from dynroute.core.path import PlannedPath, extract_path
from dynroute.core.adapter import ChangeAdapter
from dynroute.core.engine import DStarPlanner

__all__ = [
    "DStarPlanner",
    "DynamicGraph",
    "ChangeAdapter",
    "CostFunction",
    "StateTable",
    "SearchState",
    "OpenQueue",
    "PlannedPath",
    "extract_path",
    "PlannerConfig",
    "GraphEvent",
    "GraphEventType",
    "CHANGE_EVENTS",
    "Tag",
    "GraphSource",
    "GraphListener",
    "DynamicAlgorithm",
    "PlannerError",
    "PreconditionError",
    "NotInitializedError",
    "UnknownNodeError",
    "AnchorRemovedError",
    "GraphClearedError",
    "NonPositiveWeightError",
    "NoPathError",
    "NumericInconsistencyError",
]
