"""
Graph Collaborator Interface
============================

Defines the contract between the planner and the graph it searches.

Key Principle: the planner never owns the graph. It reads adjacency and edge
attributes through a GraphSource and learns about mutations through the
GraphListener callbacks the source delivers synchronously.
"""

from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Mapping
from typing import Optional

from dynroute.core.schema import GraphEvent


class GraphListener(ABC):
    """
    Receiver of graph change notifications.

    Example
    -------
    >>> class Recorder(GraphListener):
    ...     def __init__(self):
    ...         self.events = []
    ...
    ...     def on_graph_event(self, event):
    ...         self.events.append(event)
    """

    @abstractmethod
    def on_graph_event(self, event: GraphEvent) -> None:
        """
        Handle one change notification.

        Called synchronously by the graph right after the mutation. An
        exception raised here propagates to the code that mutated the graph.
        """


class GraphSource(ABC):
    """Read access to an undirected weighted graph plus change subscription."""

    @abstractmethod
    def neighbors(self, node: Hashable) -> Iterable[Hashable]:
        """Nodes sharing an edge with `node`."""

    @abstractmethod
    def edge_data(self, u: Hashable, v: Hashable) -> Optional[Mapping]:
        """Attribute mapping of the edge joining `u` and `v`, or None."""

    @abstractmethod
    def has_node(self, node: Hashable) -> bool:
        """Check if the node exists."""

    @abstractmethod
    def subscribe(self, listener: GraphListener) -> None:
        """Register a listener; listeners are notified in subscription order."""

    @abstractmethod
    def unsubscribe(self, listener: GraphListener) -> None:
        """Remove a listener. Unknown listeners are ignored."""


class DynamicAlgorithm(ABC):
    """An algorithm bound to a graph that keeps state between computations."""

    @abstractmethod
    def initialize(self, graph: GraphSource, *args, **kwargs) -> None:
        """
        Bind to `graph` and reset any previous state.

        Implementations take their own anchors (start, goal) as extra
        arguments.
        """

    @abstractmethod
    def compute(self) -> float:
        """Run (or resume) the computation on the bound graph."""

    @abstractmethod
    def terminate(self) -> None:
        """Detach from the graph."""
