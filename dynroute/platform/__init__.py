"""
Platform primitives for driving planners from graph event streams.
"""

from dynroute.platform.trigger import ComputationTrigger, TriggerMode

__all__ = [
    "ComputationTrigger",
    "TriggerMode",
]
