"""
Static matplotlib views of sweep inputs and results.
"""

import matplotlib.pyplot as plt
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import SweepConfig
from .data_structures import SegmentKey, SweepResult, as_edge


class SweepVisualizer:
    """Plot edges, candidate pairs and sweep-axis intervals."""

    def __init__(self, config: SweepConfig = None):
        self.config = config or SweepConfig()

    def plot_candidates(self, edges: Sequence, result: SweepResult,
                        edges_b: Optional[Sequence] = None,
                        points: Optional[Iterable[Tuple[float, float]]] = None,
                        show: bool = False):
        """
        Draw all edges and highlight the segments involved in candidate pairs.

        Args:
            edges: Edges of the single collection, or collection A
            result: SweepResult whose pairs index into ``edges`` (and ``edges_b``)
            edges_b: Collection B for results of find_between
            points: Optional intersection points to mark

        Returns:
            The matplotlib Figure
        """
        fig, ax = plt.subplots(figsize=(10, 8))
        collections = [[as_edge(e) for e in edges]]
        if edges_b is not None:
            collections.append([as_edge(e) for e in edges_b])

        colors = ['black', 'steelblue']
        for source, collection in enumerate(collections):
            for edge in collection:
                if edge.num_points < 2:
                    continue
                ax.plot(edge.coords[:, 0], edge.coords[:, 1], color=colors[source],
                        linewidth=1, alpha=0.6)

        # Highlight segments that take part in at least one candidate pair
        highlighted = self._candidate_segments(result.pairs, between=edges_b is not None)
        for source, (edge_index, seg_index) in highlighted:
            p, q = collections[source][edge_index].segment(seg_index)
            ax.plot([p[0], q[0]], [p[1], q[1]], color='orange', linewidth=2.5, alpha=0.9)

        if points:
            points = list(points)
            if points:
                ax.scatter([p[0] for p in points], [p[1] for p in points], c='magenta', s=40,
                           marker='o', zorder=10, edgecolor='black', linewidth=1)

        ax.set_title(f'{result.n_reported} candidate pairs from {result.n_segments} segments')
        ax.set_aspect('equal')
        plt.tight_layout()
        if show:
            plt.show()
        return fig

    def plot_intervals(self, edges: Sequence, result: Optional[SweepResult] = None, show: bool = False):
        """
        Draw each segment's extent along the sweep axis as a horizontal bar,
        one row per segment in registration order.
        """
        axis = self.config.sweep_axis
        fig, ax = plt.subplots(figsize=(10, 6))

        rows = []
        for edge_index, edge in enumerate(edges):
            edge = as_edge(edge)
            for i in range(edge.num_segments):
                a, b = edge.coords[i, axis], edge.coords[i + 1, axis]
                rows.append(((edge_index, i), min(a, b), max(a, b)))

        paired = set()
        if result is not None:
            for key0, key1 in result.pairs:
                paired.add(key0)
                paired.add(key1)

        for row, (key, lo, hi) in enumerate(rows):
            color = 'orange' if key in paired else 'gray'
            # zero-length extents still get a visible tick
            ax.barh(row, max(hi - lo, 1e-9), left=lo, height=0.6, color=color, edgecolor='black')

        ax.set_xlabel('x' if axis == 0 else 'y')
        ax.set_ylabel('segment')
        ax.set_title('Segment extents along the sweep axis')
        plt.tight_layout()
        if show:
            plt.show()
        return fig

    @staticmethod
    def _candidate_segments(pairs: List[Tuple[SegmentKey, SegmentKey]], between: bool):
        """Segments appearing in pairs as (collection, key); between-pairs are oriented (A, B)."""
        segments = set()
        for key0, key1 in pairs:
            segments.add((0, key0))
            segments.add((1 if between else 0, key1))
        return sorted(segments)
