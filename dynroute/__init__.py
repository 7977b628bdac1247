"""
dynroute: incremental shortest-path replanning over dynamic graphs.
"""

__version__ = "0.1.0"
