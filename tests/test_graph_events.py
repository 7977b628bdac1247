"""
Tests for the observable graph and the change adapter.
"""

import math

import pytest
import networkx as nx

from dynroute.core import (
    DStarPlanner,
    DynamicGraph,
    GraphEventType,
    GraphListener,
    NonPositiveWeightError,
    PlannerConfig,
    Tag,
)


# =============================================================================
# Fixtures
# =============================================================================

class Recorder(GraphListener):
    """Listener that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def on_graph_event(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [e.type for e in self.events]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def diamond() -> DynamicGraph:
    """
    A ---- B
    |      |
    C ---- D      (unit weights)
    """
    graph = DynamicGraph()
    graph.add_edge("A", "B", weight=1.0)
    graph.add_edge("B", "D", weight=1.0)
    graph.add_edge("A", "C", weight=1.0)
    graph.add_edge("C", "D", weight=1.0)
    return graph


@pytest.fixture
def converged(diamond) -> DStarPlanner:
    """Planner over the whole diamond, run to exhaustion."""
    p = DStarPlanner()
    p.initialize(diamond, source=None, target="D")
    p.compute()
    return p


# =============================================================================
# DynamicGraph Tests
# =============================================================================

class TestDynamicGraph:
    """Tests for DynamicGraph notifications."""

    def test_rejects_directed_graph(self):
        with pytest.raises(ValueError):
            DynamicGraph(nx.DiGraph())

    def test_rejects_multigraph(self):
        with pytest.raises(ValueError):
            DynamicGraph(nx.MultiGraph())

    def test_add_edge_announces_new_endpoints(self, recorder):
        graph = DynamicGraph()
        graph.add_node("A")
        graph.subscribe(recorder)

        graph.add_edge("A", "B", weight=2.0)

        assert recorder.types == [GraphEventType.NODE_ADDED, GraphEventType.EDGE_ADDED]
        assert recorder.events[0].node == "B"
        assert recorder.events[1].edge == ("A", "B")
        assert recorder.events[1].attributes == {"weight": 2.0}

    def test_add_existing_edge_fails(self, diamond):
        with pytest.raises(ValueError):
            diamond.add_edge("A", "B")

    def test_remove_node_lists_neighbors(self, diamond, recorder):
        diamond.subscribe(recorder)
        diamond.remove_node("B")

        assert recorder.types == [GraphEventType.NODE_REMOVED]
        assert set(recorder.events[0].neighbors) == {"A", "D"}
        assert not diamond.has_node("B")

    def test_remove_missing_elements(self, diamond):
        with pytest.raises(KeyError):
            diamond.remove_node("Z")
        with pytest.raises(KeyError):
            diamond.remove_edge("A", "D")

    def test_attribute_events_carry_old_value(self, diamond, recorder):
        diamond.subscribe(recorder)

        diamond.set_edge_attribute("A", "B", "weight", 4.0)
        diamond.remove_edge_attribute("A", "B", "weight")
        diamond.remove_edge_attribute("A", "B", "weight")

        assert len(recorder.events) == 2
        changed, removed = recorder.events
        assert changed.old_value == 1.0 and changed.value == 4.0
        assert removed.old_value == 4.0 and removed.value is None

    def test_step_and_clear(self, diamond, recorder):
        diamond.subscribe(recorder)

        diamond.step_begins(3.0)
        diamond.clear()

        assert recorder.types == [GraphEventType.STEP_BEGINS, GraphEventType.GRAPH_CLEARED]
        assert recorder.events[0].step == 3.0
        assert diamond.number_of_nodes() == 0

    def test_unsubscribe(self, diamond, recorder):
        diamond.subscribe(recorder)
        diamond.subscribe(recorder)
        assert diamond.listener_count == 1

        diamond.unsubscribe(recorder)
        diamond.add_node("Z")
        assert recorder.events == []


# =============================================================================
# ChangeAdapter Tests
# =============================================================================

class TestChangeAdapter:
    """Tests for cost invalidation on graph changes."""

    def test_weight_change_reopens_settled_endpoints(self, diamond, converged):
        diamond.set_edge_attribute("B", "D", "weight", 10.0)

        for node in ("B", "D"):
            state = converged.state_of(node)
            assert state.tag is Tag.OPEN
            assert state.prev_cost == state.cost
        assert len(converged.queue) == 2

    def test_unrelated_attribute_is_ignored(self, diamond, converged):
        diamond.set_edge_attribute("B", "D", "color", "red")
        assert len(converged.queue) == 0

    def test_custom_weight_attribute(self, diamond):
        p = DStarPlanner(PlannerConfig(weight_attribute="travel_time"))
        p.initialize(diamond, source=None, target="D")
        p.compute()

        diamond.set_edge_attribute("B", "D", "weight", 10.0)
        assert len(p.queue) == 0

        diamond.set_edge_attribute("B", "D", "travel_time", 10.0)
        p.compute()
        assert p.path_cost("B") == 3.0

    def test_removed_weight_attribute_uses_default(self, diamond):
        p = DStarPlanner(PlannerConfig(default_weight=0.5))
        p.initialize(diamond, source=None, target="D")
        p.compute()

        diamond.remove_edge_attribute("B", "D", "weight")
        p.compute()

        assert p.path_cost("B") == 0.5
        assert p.path_cost("A") == 1.5

    def test_edge_removal_raises_dependent_endpoint(self, diamond, converged):
        a_before = converged.state_of("A").cost
        via = converged.state_of("A").backpointer

        diamond.remove_edge("A", via)

        a = converged.state_of("A")
        assert a.backpointer is None
        assert a.cost == math.inf
        assert a.prev_cost == a_before
        assert a.tag is Tag.OPEN

        converged.compute()
        assert converged.path_cost("A") == 2.0
        assert via not in converged.extract_path("A")

    def test_added_edge_shortcut(self, diamond, converged):
        diamond.add_edge("A", "D", weight=0.5)
        converged.compute()

        assert converged.extract_path("A") == ["A", "D"]
        assert converged.path_cost("A") == 0.5

    def test_new_node_is_discovered(self, diamond, converged):
        diamond.add_edge("C", "F", weight=2.0)
        converged.compute()

        assert converged.extract_path("F") == ["F", "C", "D"]
        assert converged.path_cost("F") == 3.0

    def test_node_removal_drops_state(self, diamond, converged):
        via = converged.state_of("A").backpointer

        diamond.remove_node(via)
        converged.compute()

        assert via not in converged.states
        assert via not in converged.queue
        assert converged.path_cost("A") == 2.0
        assert len(converged.extract_path("A")) == 3

    def test_isolated_node_removal(self, diamond, converged):
        diamond.add_node("E")
        diamond.remove_node("E")
        assert converged.compute() == -1

    @pytest.mark.parametrize("weight", [0.0, -1.0])
    def test_non_positive_weight_change_is_rejected(self, diamond, converged, weight):
        with pytest.raises(NonPositiveWeightError):
            diamond.set_edge_attribute("B", "D", "weight", weight)
        assert len(converged.queue) == 0

    def test_zero_weight_edge_is_rejected(self, diamond, converged):
        with pytest.raises(NonPositiveWeightError):
            diamond.add_edge("A", "D", weight=0.0)

    def test_modify_cost_goes_through_graph(self, diamond, converged, recorder):
        diamond.subscribe(recorder)

        converged.modify_cost("A", "B", 7.0)

        assert diamond.edge_data("A", "B")["weight"] == 7.0
        assert recorder.types == [GraphEventType.EDGE_ATTRIBUTE_CHANGED]
        converged.compute()
        assert converged.extract_path("A") == ["A", "C", "D"]
