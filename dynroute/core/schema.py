"""
Planner Schema
==============

Data models shared by the planner, the change adapter and the observable
graph.

- Tag: lifecycle stage of a node's search state
- GraphEventType / GraphEvent: change notifications published by a graph
- PlannerConfig: cost lookup and numeric policy settings
"""

from enum import Enum
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tag(str, Enum):
    """Lifecycle stage of a node's search state."""

    NEW = "new"
    """Never visited."""

    OPEN = "open"
    """Queued for (re)expansion; cost is tentative."""

    CLOSED = "closed"
    """Expanded; cost settled until the next change."""

    LOWER = "lower"
    """Reserved marker for a pending cost decrease."""

    RAISE = "raise"
    """Reserved marker for a pending cost increase."""


class GraphEventType(str, Enum):
    """Kinds of mutation a graph source publishes to its listeners."""

    NODE_ADDED = "node_added"
    NODE_REMOVED = "node_removed"
    EDGE_ADDED = "edge_added"
    EDGE_REMOVED = "edge_removed"
    EDGE_ATTRIBUTE_CHANGED = "edge_attribute_changed"
    GRAPH_CLEARED = "graph_cleared"
    STEP_BEGINS = "step_begins"


CHANGE_EVENTS = frozenset({
    GraphEventType.NODE_ADDED,
    GraphEventType.NODE_REMOVED,
    GraphEventType.EDGE_ADDED,
    GraphEventType.EDGE_REMOVED,
    GraphEventType.EDGE_ATTRIBUTE_CHANGED,
    GraphEventType.GRAPH_CLEARED,
})
"""Event types that alter topology or edge attributes."""


class GraphEvent(BaseModel):
    """
    A single change notification.

    Events are published after the graph has been updated, so listeners
    always observe the post-change graph. Payload fields depend on type:

    - NODE_ADDED: node
    - NODE_REMOVED: node, neighbors (adjacency before removal)
    - EDGE_ADDED / EDGE_REMOVED: edge, attributes
    - EDGE_ATTRIBUTE_CHANGED: edge, attribute, value, old_value
      (value is None when the attribute was removed)
    - GRAPH_CLEARED: no payload
    - STEP_BEGINS: step
    """

    model_config = ConfigDict(frozen=True)

    type: GraphEventType
    node: Any = None
    edge: Optional[tuple[Any, Any]] = None
    attribute: Optional[str] = None
    value: Any = None
    old_value: Any = None
    neighbors: tuple[Any, ...] = ()
    attributes: dict[str, Any] = Field(default_factory=dict)
    step: Optional[float] = None

    @model_validator(mode="after")
    def _validate_payload(self) -> "GraphEvent":
        """Ensure each event type carries the element it refers to."""
        node_events = {GraphEventType.NODE_ADDED, GraphEventType.NODE_REMOVED}
        edge_events = {
            GraphEventType.EDGE_ADDED,
            GraphEventType.EDGE_REMOVED,
            GraphEventType.EDGE_ATTRIBUTE_CHANGED,
        }

        if self.type in node_events and self.node is None:
            raise ValueError(f"{self.type.value} event must include node")

        if self.type in edge_events and self.edge is None:
            raise ValueError(f"{self.type.value} event must include edge")

        if self.type == GraphEventType.EDGE_ATTRIBUTE_CHANGED and not self.attribute:
            raise ValueError("edge_attribute_changed event must include attribute")

        return self

    @property
    def is_change(self) -> bool:
        """True for events that alter topology or edge attributes."""
        return self.type in CHANGE_EVENTS

    def __repr__(self) -> str:
        target = self.edge if self.edge is not None else self.node
        return f"GraphEvent(type={self.type.value}, target={target!r})"


class PlannerConfig(BaseModel):
    """
    Settings for cost lookup and numeric checks.

    Example
    -------
    >>> config = PlannerConfig(weight_attribute="travel_time", default_weight=2.0)
    >>> config.strict_numeric
    True
    """

    weight_attribute: str = "weight"
    """Edge attribute holding the traversal cost."""

    default_weight: float = Field(default=1.0, gt=0.0)
    """Cost used when the attribute is absent or not numeric. Must be positive."""

    strict_numeric: bool = True
    """
    Raise on a NaN cost reaching a comparison. When False, NaN is read as
    an infinite cost.
    """

    @model_validator(mode="after")
    def _validate_attribute(self) -> "PlannerConfig":
        """Reject blank attribute names."""
        if not self.weight_attribute or not self.weight_attribute.strip():
            raise ValueError("weight_attribute must be a non-empty string")
        return self

    @classmethod
    def from_json_file(cls, path: Path | str) -> "PlannerConfig":
        """Load configuration from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls(**data)
