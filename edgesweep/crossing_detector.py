"""
Reference crossing detection using shapely's STR-tree.
"""

from shapely.geometry import LineString
from shapely.strtree import STRtree
from typing import Iterable, List, Optional, Set, Tuple

from .data_structures import as_edge
from .segment_intersector import intersection_points


class CrossingDetector:
    """
    Independent crossing detection built on shapely's STR-tree index.
    Used to cross-check results obtained through the sweep.
    """

    def __init__(self, tolerance: float = 1e-6):
        """Initialize crossing detector."""
        self.tolerance = tolerance

    def find_intersections_from_segments(self, segments: List[Tuple[Tuple[float, float], Tuple[float, float]]],
                                         excluded_points: Optional[Set[Tuple[float, float]]] = None) -> List[Tuple[float, float]]:
        """
        Find intersections from a list of line segments, excluding given points.

        Args:
            segments: List of line segments ((x1,y1), (x2,y2))
            excluded_points: Set of (x, y) positions to ignore, e.g. polyline vertices

        Returns:
            List of (x, y) intersection coordinates
        """
        if len(segments) < 2:
            return []

        # Filter out degenerate segments
        normalized = [((float(a[0]), float(a[1])), (float(b[0]), float(b[1]))) for a, b in segments]
        valid_segments = [seg for seg in normalized if seg[0] != seg[1]]
        if len(valid_segments) < 2:
            return []

        lines = [LineString(seg) for seg in valid_segments]
        tree = STRtree(lines)

        found_points = []
        seen_points = set()

        for i, line in enumerate(lines):
            for j in tree.query(line):
                j = int(j)
                if j <= i:
                    continue

                for coord in intersection_points(line.intersection(lines[j])):
                    key = (round(coord[0], 9), round(coord[1], 9))

                    # Avoid duplicates
                    if key in seen_points:
                        continue
                    seen_points.add(key)

                    if excluded_points and self._is_excluded_point(coord, excluded_points):
                        continue

                    found_points.append((float(coord[0]), float(coord[1])))

        return found_points

    def find_edge_crossings(self, edges: Iterable, exclude_vertices: bool = True) -> List[Tuple[float, float]]:
        """
        Find crossing points among the segments of a set of polylines.

        Args:
            edges: Edges or raw coordinate sequences
            exclude_vertices: Ignore intersections that fall on a polyline vertex

        Returns:
            List of (x, y) intersection coordinates
        """
        segments = []
        vertices = set()
        for edge in edges:
            coords = as_edge(edge).coords
            for i in range(len(coords) - 1):
                segments.append((tuple(coords[i][:2]), tuple(coords[i + 1][:2])))
            vertices.update((float(c[0]), float(c[1])) for c in coords)

        return self.find_intersections_from_segments(segments, vertices if exclude_vertices else None)

    def _is_excluded_point(self, point: Tuple[float, float], excluded_points: Set[Tuple[float, float]]) -> bool:
        """
        Check if an intersection point matches one of the excluded points.

        Args:
            point: The intersection point to check
            excluded_points: Set of (x, y) positions

        Returns:
            True if this point is within tolerance of an excluded point
        """
        x, y = point

        for qx, qy in excluded_points:
            if abs(x - qx) < self.tolerance and abs(y - qy) < self.tolerance:
                return True
        return False
