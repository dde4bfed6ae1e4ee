"""
Candidate pair graphs and synthetic edge generators.
"""

import networkx as nx
import numpy as np
from typing import Dict, Iterable, List, Optional, Tuple

from .data_structures import Edge, SegmentKey


def build_candidate_graph(pairs: Iterable[Tuple[SegmentKey, SegmentKey]]) -> nx.Graph:
    """
    Build an undirected graph whose nodes are segment keys and whose edges are
    candidate pairs reported by a sweep.

    Args:
        pairs: Iterable of ((edge_index, segment_index), (edge_index, segment_index))

    Returns:
        NetworkX graph; repeated pairs collapse into a single graph edge
    """
    graph = nx.Graph()
    for key0, key1 in pairs:
        graph.add_edge(key0, key1)
    return graph


def candidate_graph_summary(graph: nx.Graph) -> Dict[str, float]:
    """Node and edge counts, connected components and degree statistics."""
    if graph.number_of_nodes() == 0:
        return {'nodes': 0, 'edges': 0, 'components': 0, 'max_degree': 0, 'avg_degree': 0.0}

    degrees = [d for _, d in graph.degree()]
    return {
        'nodes': graph.number_of_nodes(),
        'edges': graph.number_of_edges(),
        'components': nx.number_connected_components(graph),
        'max_degree': max(degrees),
        'avg_degree': float(np.mean(degrees)),
    }


def random_uniform_edges(n: int, extent: float = 1000.0, max_length: float = 10.0,
                         seed: Optional[int] = 42) -> List[Edge]:
    """
    Generate n two-point edges with start points uniform over a square of side
    ``extent`` and lengths bounded by ``max_length``.
    """
    rng = np.random.default_rng(seed)
    starts = rng.uniform(0.0, extent, size=(n, 2))
    angles = rng.uniform(0.0, 2.0 * np.pi, size=n)
    lengths = rng.uniform(0.0, max_length, size=n)
    ends = starts + np.column_stack((np.cos(angles), np.sin(angles))) * lengths[:, None]
    return [Edge(np.vstack((s, e))) for s, e in zip(starts, ends)]


def shared_extent_edges(n: int, x0: float = 0.0, x1: float = 1.0,
                        seed: Optional[int] = 42) -> List[Edge]:
    """
    Generate n two-point edges that all span exactly [x0, x1] on the x-axis.
    Every pair overlaps, so the sweep degrades to quadratic work.
    """
    rng = np.random.default_rng(seed)
    y_start = rng.uniform(0.0, 1.0, size=n)
    y_end = rng.uniform(0.0, 1.0, size=n)
    return [Edge([(x0, ya), (x1, yb)]) for ya, yb in zip(y_start, y_end)]


def polyline_edges(n_edges: int, points_per_edge: int = 5, extent: float = 100.0,
                   step: float = 5.0, seed: Optional[int] = 42) -> List[Edge]:
    """Generate random-walk polylines with ``points_per_edge`` vertices each."""
    rng = np.random.default_rng(seed)
    edges = []
    for _ in range(n_edges):
        start = rng.uniform(0.0, extent, size=2)
        steps = rng.uniform(-step, step, size=(points_per_edge - 1, 2))
        coords = np.vstack((start, start + np.cumsum(steps, axis=0)))
        edges.append(Edge(coords))
    return edges


def brute_force_overlaps(edges: Iterable, axis: int = 0) -> List[Tuple[SegmentKey, SegmentKey]]:
    """
    All pairs of distinct segments whose closed extents along ``axis`` overlap,
    found by testing every pair. Reference for checking the sweep.
    """
    intervals = []
    for edge_index, edge in enumerate(edges):
        coords = edge.coords if isinstance(edge, Edge) else Edge(edge).coords
        for i in range(len(coords) - 1):
            a, b = coords[i, axis], coords[i + 1, axis]
            intervals.append(((edge_index, i), min(a, b), max(a, b)))

    pairs = []
    for i in range(len(intervals)):
        key0, lo0, hi0 = intervals[i]
        for j in range(i + 1, len(intervals)):
            key1, lo1, hi1 = intervals[j]
            if lo0 <= hi1 and lo1 <= hi0:
                pairs.append((key0, key1))
    return pairs
