"""
Intersection test collaborators that receive candidate pairs from the sweep.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

import numpy as np
from shapely.geometry import LineString, Point

from .data_structures import Edge, EdgeIntersection, SegmentInterval, SegmentKey


class SegmentIntersector:
    """
    Base class for pair sinks. The sweep calls test(seg0, seg1) once per
    candidate pair and stops early once is_done becomes True.
    """

    def __init__(self):
        self.is_done = False
        self.num_tests = 0

    def test(self, seg0: SegmentInterval, seg1: SegmentInterval) -> None:
        raise NotImplementedError()


class PairCollector(SegmentIntersector):
    """Records every reported pair in report order."""

    def __init__(self):
        super().__init__()
        self.pairs: List[Tuple[SegmentInterval, SegmentInterval]] = []

    def test(self, seg0, seg1):
        self.num_tests += 1
        self.pairs.append((seg0, seg1))

    def pair_keys(self) -> List[Tuple[SegmentKey, SegmentKey]]:
        return [(s0.key, s1.key) for s0, s1 in self.pairs]

    def unordered_keys(self) -> Set[Tuple[SegmentKey, SegmentKey]]:
        """Pairs as sorted key tuples, for order-independent comparison."""
        return {tuple(sorted((s0.key, s1.key))) for s0, s1 in self.pairs}


class CountingIntersector(SegmentIntersector):
    """Counts invocations only."""

    def test(self, seg0, seg1):
        self.num_tests += 1


def _segment_geometry(p: np.ndarray, q: np.ndarray):
    if np.array_equal(p[:2], q[:2]):
        return Point(p[0], p[1])
    return LineString([(p[0], p[1]), (q[0], q[1])])


def intersection_points(geom) -> List[Tuple[float, float]]:
    """Flatten a shapely intersection result to a list of points."""
    if geom.is_empty:
        return []
    if geom.geom_type == 'Point':
        return [(geom.x, geom.y)]
    if geom.geom_type == 'LineString':
        # collinear overlap: keep the ends of the shared stretch
        coords = list(geom.coords)
        return [tuple(coords[0]), tuple(coords[-1])]
    points = []
    for part in geom.geoms:
        points.extend(intersection_points(part))
    return points


class ShapelySegmentIntersector(SegmentIntersector):
    """
    Computes actual segment intersections with shapely and records them per edge.

    Args:
        tolerance: Distance under which an intersection counts as an endpoint hit
        include_proper: Record proper (interior-interior) intersections as well
        stop_on_first: Set is_done on the first proper intersection
    """

    def __init__(self, tolerance: float = 1e-6, include_proper: bool = True,
                 stop_on_first: bool = False):
        super().__init__()
        self.tolerance = tolerance
        self.include_proper = include_proper
        self.stop_on_first = stop_on_first

        self.has_intersection = False
        self.has_proper = False
        self.proper_intersection_point: Optional[Tuple[float, float]] = None
        self.num_intersections = 0
        self.intersections: Dict[Edge, List[EdgeIntersection]] = defaultdict(list)

    def test(self, seg0, seg1):
        if seg0.edge is seg1.edge and seg0.segment_index == seg1.segment_index:
            return
        self.num_tests += 1

        p1, p2 = seg0.endpoints
        q1, q2 = seg1.endpoints
        geom = _segment_geometry(p1, p2).intersection(_segment_geometry(q1, q2))
        points = intersection_points(geom)
        if not points:
            return

        self.num_intersections += 1
        if self.is_trivial_intersection(seg0, seg1, points):
            return
        self.has_intersection = True

        is_proper = len(points) == 1 and not self._is_endpoint(points[0], (p1, p2, q1, q2))
        if self.include_proper or not is_proper:
            for point in points:
                self.intersections[seg0.edge].append(
                    EdgeIntersection(seg0.edge_index, seg0.segment_index, point, is_proper))
                self.intersections[seg1.edge].append(
                    EdgeIntersection(seg1.edge_index, seg1.segment_index, point, is_proper))

        if is_proper:
            self.has_proper = True
            self.proper_intersection_point = points[0]
            if self.stop_on_first:
                self.is_done = True

    def is_trivial_intersection(self, seg0: SegmentInterval, seg1: SegmentInterval,
                                points: List[Tuple[float, float]]) -> bool:
        """
        A trivial intersection is the vertex shared by consecutive segments of
        the same edge, including the closing vertex of a closed edge.
        """
        if seg0.edge is not seg1.edge or len(points) != 1:
            return False
        i, j = seg0.segment_index, seg1.segment_index
        if abs(i - j) == 1:
            return True
        if seg0.edge.is_closed:
            last = seg0.edge.num_segments - 1
            if (i == 0 and j == last) or (j == 0 and i == last):
                return True
        return False

    def _is_endpoint(self, point, endpoints) -> bool:
        for end in endpoints:
            if abs(point[0] - end[0]) < self.tolerance and abs(point[1] - end[1]) < self.tolerance:
                return True
        return False

    def intersections_for(self, edge: Edge) -> List[EdgeIntersection]:
        return list(self.intersections.get(edge, []))

    def unique_points(self) -> List[Tuple[float, float]]:
        """All recorded intersection points, de-duplicated within tolerance."""
        points = []
        for records in self.intersections.values():
            for record in records:
                if not any(abs(record.point[0] - px) < self.tolerance and
                           abs(record.point[1] - py) < self.tolerance for px, py in points):
                    points.append(record.point)
        return points
