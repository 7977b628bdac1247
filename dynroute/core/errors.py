"""
Planner exceptions.

PreconditionError and its subclasses are fatal for the current episode.
NoPathError is expected while a search is incomplete or the goal is cut off.
"""


class PlannerError(Exception):
    """Base class for all planner failures."""


class PreconditionError(PlannerError):
    """The planner was used in a state where it cannot make progress."""


class NotInitializedError(PreconditionError):
    """An operation was called before initialize()."""


class UnknownNodeError(PreconditionError):
    """A node passed to the planner is not part of the graph."""

    def __init__(self, node):
        super().__init__(f"Node {node!r} is not in the graph")
        self.node = node


class AnchorRemovedError(PreconditionError):
    """The goal or the current position was removed from the graph."""

    def __init__(self, node, role: str):
        super().__init__(f"The {role} node {node!r} was removed from the graph")
        self.node = node
        self.role = role


class GraphClearedError(PreconditionError):
    """The graph was cleared while an episode was active."""


class NonPositiveWeightError(PreconditionError):
    """An edge resolved to a cost of zero or less."""

    def __init__(self, u, v, weight: float):
        super().__init__(
            f"Edge ({u!r}, {v!r}) has weight {weight!r}; costs must be positive"
        )
        self.edge = (u, v)
        self.weight = weight


class NoPathError(PlannerError):
    """No path from the requested node to the goal is currently known."""

    def __init__(self, node, reason: str):
        super().__init__(f"No path from {node!r}: {reason}")
        self.node = node
        self.reason = reason


class NumericInconsistencyError(PlannerError):
    """A NaN cost reached a comparison."""
