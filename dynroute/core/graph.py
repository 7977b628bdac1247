"""
Dynamic Graph
=============

An undirected networkx graph that publishes every mutation to subscribed
listeners.

Key Design Principles:
1. All mutations go through this wrapper; editing `nx_graph` directly
   bypasses notifications
2. Events are delivered synchronously, after the graph is updated
3. A listener that raises aborts the remaining deliveries and surfaces the
   error to the caller that mutated the graph
"""

from collections.abc import Hashable, Iterator, Mapping
from typing import Any, Optional

import networkx as nx

from dynroute.core.interface import GraphListener, GraphSource
from dynroute.core.schema import GraphEvent, GraphEventType


class DynamicGraph(GraphSource):
    """
    Observable wrapper around an undirected `networkx.Graph`.

    Example
    -------
    >>> graph = DynamicGraph()
    >>> graph.add_edge("A", "B", weight=1.0)
    >>> graph.subscribe(listener)
    >>> graph.set_edge_attribute("A", "B", "weight", 10.0)  # listener notified
    """

    def __init__(self, graph: Optional[nx.Graph] = None):
        """
        Initialize the wrapper.

        Parameters
        ----------
        graph : nx.Graph, optional
            Existing undirected graph to wrap (not copied). If None, an
            empty graph is created.

        Raises
        ------
        ValueError
            If the graph is directed or a multigraph
        """
        if graph is None:
            graph = nx.Graph()

        if graph.is_directed():
            raise ValueError("DynamicGraph requires an undirected graph")
        if graph.is_multigraph():
            raise ValueError("DynamicGraph does not support multigraphs")

        self._graph = graph
        self._listeners: list[GraphListener] = []

    @property
    def nx_graph(self) -> nx.Graph:
        """The wrapped networkx graph (mutate only through this wrapper)."""
        return self._graph

    @property
    def listener_count(self) -> int:
        """Number of subscribed listeners."""
        return len(self._listeners)

    # -------------------------------------------------------------------------
    # GraphSource
    # -------------------------------------------------------------------------

    def neighbors(self, node: Hashable) -> Iterator[Hashable]:
        return iter(self._graph.adj[node])

    def edge_data(self, u: Hashable, v: Hashable) -> Optional[Mapping]:
        return self._graph.get_edge_data(u, v)

    def has_node(self, node: Hashable) -> bool:
        return self._graph.has_node(node)

    def subscribe(self, listener: GraphListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: GraphListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def nodes(self) -> list[Hashable]:
        return list(self._graph.nodes)

    def has_edge(self, u: Hashable, v: Hashable) -> bool:
        return self._graph.has_edge(u, v)

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_node(self, node: Hashable, **attrs: Any) -> None:
        """
        Add a node, or update the attributes of an existing one.

        Only a genuinely new node is announced.
        """
        is_new = not self._graph.has_node(node)
        self._graph.add_node(node, **attrs)
        if is_new:
            self._publish(GraphEvent(type=GraphEventType.NODE_ADDED, node=node))

    def remove_node(self, node: Hashable) -> None:
        """
        Remove a node and its incident edges.

        A single NODE_REMOVED event is published; it lists the node's former
        neighbours so listeners can invalidate the dropped edges.

        Raises
        ------
        KeyError
            If the node does not exist
        """
        if not self._graph.has_node(node):
            raise KeyError(f"Node {node!r} is not in the graph")

        neighbors = tuple(n for n in self._graph.adj[node] if n != node)
        self._graph.remove_node(node)
        self._publish(
            GraphEvent(
                type=GraphEventType.NODE_REMOVED,
                node=node,
                neighbors=neighbors,
            )
        )

    def add_edge(self, u: Hashable, v: Hashable, **attrs: Any) -> None:
        """
        Add an edge between `u` and `v`, creating missing endpoints.

        Raises
        ------
        ValueError
            If the edge already exists (use set_edge_attribute instead)
        """
        if self._graph.has_edge(u, v):
            raise ValueError(
                f"Edge ({u!r}, {v!r}) already exists; use set_edge_attribute()"
            )

        for endpoint in (u, v):
            if not self._graph.has_node(endpoint):
                self.add_node(endpoint)

        self._graph.add_edge(u, v, **attrs)
        self._publish(
            GraphEvent(
                type=GraphEventType.EDGE_ADDED,
                edge=(u, v),
                attributes=dict(attrs),
            )
        )

    def remove_edge(self, u: Hashable, v: Hashable) -> None:
        """
        Remove the edge between `u` and `v`.

        Raises
        ------
        KeyError
            If the edge does not exist
        """
        if not self._graph.has_edge(u, v):
            raise KeyError(f"Edge ({u!r}, {v!r}) is not in the graph")

        attrs = dict(self._graph.edges[u, v])
        self._graph.remove_edge(u, v)
        self._publish(
            GraphEvent(
                type=GraphEventType.EDGE_REMOVED,
                edge=(u, v),
                attributes=attrs,
            )
        )

    def set_edge_attribute(self, u: Hashable, v: Hashable, name: str, value: Any) -> None:
        """
        Set one attribute of an existing edge.

        Raises
        ------
        KeyError
            If the edge does not exist
        """
        data = self._edge_attrs(u, v)
        old_value = data.get(name)
        data[name] = value
        self._publish(
            GraphEvent(
                type=GraphEventType.EDGE_ATTRIBUTE_CHANGED,
                edge=(u, v),
                attribute=name,
                value=value,
                old_value=old_value,
            )
        )

    def remove_edge_attribute(self, u: Hashable, v: Hashable, name: str) -> None:
        """
        Remove one attribute of an existing edge. Missing attributes are a no-op.

        Raises
        ------
        KeyError
            If the edge does not exist
        """
        data = self._edge_attrs(u, v)
        if name not in data:
            return

        old_value = data.pop(name)
        self._publish(
            GraphEvent(
                type=GraphEventType.EDGE_ATTRIBUTE_CHANGED,
                edge=(u, v),
                attribute=name,
                value=None,
                old_value=old_value,
            )
        )

    def clear(self) -> None:
        """Drop every node and edge."""
        self._graph.clear()
        self._publish(GraphEvent(type=GraphEventType.GRAPH_CLEARED))

    def step_begins(self, step: float) -> None:
        """Announce the start of a simulation step; the graph is unchanged."""
        self._publish(GraphEvent(type=GraphEventType.STEP_BEGINS, step=step))

    def _edge_attrs(self, u: Hashable, v: Hashable) -> dict[str, Any]:
        """Live attribute dict of an edge."""
        if not self._graph.has_edge(u, v):
            raise KeyError(f"Edge ({u!r}, {v!r}) is not in the graph")
        return self._graph.edges[u, v]

    def _publish(self, event: GraphEvent) -> None:
        """Deliver an event to every listener, in subscription order."""
        for listener in list(self._listeners):
            listener.on_graph_event(event)

    def __repr__(self) -> str:
        return (
            f"DynamicGraph(nodes={self.number_of_nodes()}, "
            f"edges={self.number_of_edges()}, listeners={self.listener_count})"
        )
