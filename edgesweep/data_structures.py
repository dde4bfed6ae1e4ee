"""
Core data structures for the edge sweep.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Hashable, List, Optional, Tuple
import numpy as np


SegmentKey = Tuple[int, int]  # (edge index within its collection, segment index)


@dataclass(eq=False)
class Edge:
    """Polyline contributed by the caller; compared and hashed by identity."""
    coords: np.ndarray  # (n, 2) or (n, 3) array of vertex coordinates
    label: Optional[str] = None

    def __post_init__(self):
        coords = np.asarray(self.coords, dtype=float)
        if coords.size == 0:
            coords = np.empty((0, 2), dtype=float)
        elif coords.ndim != 2 or coords.shape[1] < 2:
            raise ValueError(f"edge coordinates must have shape (n, 2) or (n, 3), got {coords.shape}")
        self.coords = coords

    @property
    def num_points(self) -> int:
        return len(self.coords)

    @property
    def num_segments(self) -> int:
        return max(len(self.coords) - 1, 0)

    @property
    def is_closed(self) -> bool:
        """True if the polyline ends where it starts."""
        if len(self.coords) < 2:
            return False
        return bool(np.array_equal(self.coords[0], self.coords[-1]))

    def segment(self, index: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return the two endpoints of segment ``index``."""
        return self.coords[index], self.coords[index + 1]


def as_edge(edge: Any) -> Edge:
    """Wrap a raw coordinate sequence in an Edge; Edge instances pass through unchanged."""
    if isinstance(edge, Edge):
        return edge
    coords = getattr(edge, 'coords', edge)
    return Edge(coords)


@dataclass(frozen=True)
class GroupTag:
    """
    Value-compared group identity attached to sweep events.

    Two events are only tested against each other when the current event has
    no group, or when the groups differ.
    """
    kind: str  # 'none', 'own' or 'named'
    key: Hashable = None

    NONE = 'none'
    OWN = 'own'
    NAMED = 'named'

    @classmethod
    def none(cls) -> 'GroupTag':
        return cls(cls.NONE)

    @classmethod
    def own(cls, serial: int) -> 'GroupTag':
        """Singleton group for one edge, keyed by the engine's serial number for that edge."""
        return cls(cls.OWN, serial)

    @classmethod
    def named(cls, name: str) -> 'GroupTag':
        return cls(cls.NAMED, name)

    @property
    def is_none(self) -> bool:
        return self.kind == self.NONE


class EventKind(IntEnum):
    """Sweep event kinds; the integer values order activate before deactivate at equal coordinates."""
    ACTIVATE = 1
    DEACTIVATE = 2


@dataclass
class SegmentInterval:
    """Extent of one edge segment along the sweep axis."""
    edge: Edge
    edge_index: int
    segment_index: int
    min_x: float
    max_x: float
    source: int = 0  # 0 for a single collection or collection A, 1 for collection B

    @classmethod
    def from_edge(cls, edge: Edge, edge_index: int, segment_index: int,
                  axis: int = 0, source: int = 0) -> 'SegmentInterval':
        x1 = float(edge.coords[segment_index, axis])
        x2 = float(edge.coords[segment_index + 1, axis])
        if x1 < x2:
            return cls(edge, edge_index, segment_index, x1, x2, source)
        return cls(edge, edge_index, segment_index, x2, x1, source)

    @property
    def key(self) -> SegmentKey:
        return (self.edge_index, self.segment_index)

    @property
    def endpoints(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.edge.segment(self.segment_index)

    def overlaps(self, other: 'SegmentInterval') -> bool:
        """True if the closed sweep-axis extents of both segments share a point."""
        return self.min_x <= other.max_x and other.min_x <= self.max_x

    def compute_intersections(self, other: 'SegmentInterval', collaborator) -> None:
        collaborator.test(self, other)


@dataclass(eq=False)
class SweepEvent:
    """Activate or deactivate marker for one segment interval."""
    kind: EventKind
    x: float
    group: GroupTag
    interval: SegmentInterval
    partner: Optional['SweepEvent'] = None  # activate <-> deactivate link
    span_end: int = -1  # sorted index of the deactivate partner (activate events only)

    @property
    def is_activate(self) -> bool:
        return self.kind == EventKind.ACTIVATE

    @property
    def is_deactivate(self) -> bool:
        return self.kind == EventKind.DEACTIVATE

    def sort_key(self) -> Tuple[float, int]:
        return (self.x, int(self.kind))


@dataclass
class EdgeIntersection:
    """Intersection point found on one segment of an edge."""
    edge_index: int
    segment_index: int
    point: Tuple[float, float]
    is_proper: bool = False


@dataclass
class SweepResult:
    """Outcome of one sweep call."""
    pairs: List[Tuple[SegmentKey, SegmentKey]]  # reported candidate pairs, in report order
    n_segments: int
    n_events: int
    n_overlaps: int  # raw span overlaps examined, before group filtering
    n_reported: int
    elapsed: float = 0.0
    mode: str = ''
    metrics: dict = field(default_factory=dict)
