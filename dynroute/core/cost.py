"""
Cost Function
=============

Resolves the traversal cost between adjacent nodes from an edge attribute.

The attribute name and the fallback weight come from PlannerConfig, so the
same graph can be planned over "weight", "length" or "travel_time" without
touching the data.
"""

import math
from collections.abc import Hashable
from typing import Any, Optional

from dynroute.core.errors import NonPositiveWeightError, NumericInconsistencyError
from dynroute.core.interface import GraphSource
from dynroute.core.schema import PlannerConfig


class CostFunction:
    """
    Maps edges to traversal costs.

    Example
    -------
    >>> cost = CostFunction(PlannerConfig(default_weight=1.0))
    >>> cost(graph, "A", "B")         # edge with weight=3.0
    3.0
    >>> cost(graph, "A", "Z")         # no edge
    nan
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """
        Initialize with configuration.

        Parameters
        ----------
        config : PlannerConfig, optional
            Attribute name, default weight and numeric policy.
            If None, uses PlannerConfig().
        """
        self.config = config or PlannerConfig()

    def cost(self, graph: GraphSource, x: Hashable, y: Hashable) -> float:
        """
        Cost of moving between `x` and `y`.

        Returns
        -------
        float
            The edge's weight attribute, the configured default weight when
            the attribute is missing or not numeric, or NaN when no edge
            joins the two nodes.

        Raises
        ------
        NonPositiveWeightError
            If the edge weighs zero or less. Propagation only converges
            over strictly positive costs.
        """
        data = graph.edge_data(x, y)
        if data is None:
            return math.nan

        weight = self.weight_of(data.get(self.config.weight_attribute))
        if weight <= 0:
            raise NonPositiveWeightError(x, y, weight)
        return weight

    __call__ = cost

    def weight_of(self, value: Any) -> float:
        """Convert a raw attribute value to a weight."""
        if value is None or isinstance(value, bool):
            return self.config.default_weight

        try:
            weight = float(value)
        except (TypeError, ValueError):
            return self.config.default_weight

        if math.isnan(weight):
            return self.config.default_weight
        return weight

    def checked(self, value: float) -> float:
        """
        Guard a cost before it is compared.

        Raises
        ------
        NumericInconsistencyError
            If `value` is NaN and the config is strict
        """
        if not math.isnan(value):
            return value

        if self.config.strict_numeric:
            raise NumericInconsistencyError(
                "NaN cost reached a comparison; the nodes are not adjacent"
            )
        return math.inf
