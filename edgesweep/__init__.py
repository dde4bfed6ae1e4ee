"""
edgesweep: sweep-line candidate pair discovery for polyline edge sets

Finds the segment pairs of one or two edge collections whose extents overlap
along the sweep axis and hands each one to an intersection test collaborator,
avoiding an all-pairs comparison in the average case.
"""

from .edge_sweep import EdgeSweep
from .config import SweepConfig
from .data_structures import Edge, GroupTag, SegmentInterval, SweepEvent, SweepResult
from .errors import SweepError, InvalidConfigurationError, EngineStateError
from .segment_intersector import SegmentIntersector, PairCollector, CountingIntersector, ShapelySegmentIntersector
from .sweep_intersector import SimpleSweepLineIntersector, find_all, find_between

__version__ = "0.1.0"
__all__ = [
    "EdgeSweep", "SweepConfig", "Edge", "GroupTag", "SegmentInterval", "SweepEvent", "SweepResult",
    "SweepError", "InvalidConfigurationError", "EngineStateError",
    "SegmentIntersector", "PairCollector", "CountingIntersector", "ShapelySegmentIntersector",
    "SimpleSweepLineIntersector", "find_all", "find_between",
]
