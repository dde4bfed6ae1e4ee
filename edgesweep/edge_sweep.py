"""
Main entry point: runs sweeps, collects results and reports on them.
"""

import time
from typing import Dict, List, Optional, Sequence

from .config import SweepConfig
from .data_structures import SweepResult, as_edge
from .crossing_detector import CrossingDetector
from .graph_utils import (build_candidate_graph, candidate_graph_summary, polyline_edges,
                          random_uniform_edges, shared_extent_edges)
from .metrics import SweepMetricsCalculator
from .segment_intersector import PairCollector, ShapelySegmentIntersector
from .sweep_intersector import SimpleSweepLineIntersector, check_collaborator
from .visualizer import SweepVisualizer


class _RecordingIntersector:
    """Records pair keys before forwarding each pair to the caller's collaborator."""

    def __init__(self, inner, between: bool = False):
        self.inner = inner
        self.between = between
        self.pairs = []
        self.num_tests = 0

    @property
    def is_done(self):
        return bool(getattr(self.inner, 'is_done', False))

    def test(self, seg0, seg1):
        self.num_tests += 1
        # between-collection pairs are stored as (A key, B key)
        if self.between and seg0.source > seg1.source:
            self.pairs.append((seg1.key, seg0.key))
        else:
            self.pairs.append((seg0.key, seg1.key))
        self.inner.test(seg0, seg1)


EDGE_GENERATORS = {
    'uniform': random_uniform_edges,
    'polyline': polyline_edges,
    'shared_extent': shared_extent_edges,
}


class EdgeSweep:
    """
    Candidate pair discovery for polyline edge sets.

    Each call builds a fresh sweep engine, so one EdgeSweep can serve any
    number of calls.
    """

    def __init__(self, config: Optional[SweepConfig] = None):
        """
        Initialize with configuration.

        Args:
            config: SweepConfig object, uses defaults if None
        """
        self.config = config or SweepConfig()
        self.config.validate()

        self.metrics_calculator = SweepMetricsCalculator()
        self.visualizer = SweepVisualizer(self.config)

    def _new_engine(self) -> SimpleSweepLineIntersector:
        return SimpleSweepLineIntersector(self.config.sweep_axis, self.config.stop_when_done)

    def make_intersector(self, include_proper: bool = True, stop_on_first: bool = False) -> ShapelySegmentIntersector:
        """Shapely collaborator using the configured point tolerance."""
        return ShapelySegmentIntersector(self.config.tolerance, include_proper, stop_on_first)

    def find_crossings(self, edges: Sequence, exclude_vertices: bool = True):
        """Reference crossing points of ``edges`` from the STR-tree detector."""
        return CrossingDetector(self.config.tolerance).find_edge_crossings(edges, exclude_vertices)

    def generate_edges(self, family: str, n: int, **kwargs):
        """
        Build a synthetic edge set seeded from the configuration.

        Args:
            family: One of 'uniform', 'polyline' or 'shared_extent'
            n: Number of edges
            **kwargs: Passed through to the generator
        """
        if family not in EDGE_GENERATORS:
            raise ValueError(f"Unknown edge family: {family}")
        kwargs.setdefault('seed', self.config.random_seed)
        return EDGE_GENERATORS[family](n, **kwargs)

    def find_all(self, edges: Sequence, collaborator, exhaustive: bool = False,
                 verbose: Optional[bool] = None) -> SweepResult:
        """
        Report candidate pairs within one edge collection.

        Args:
            edges: Edges or raw coordinate sequences
            collaborator: Receives each pair through test(seg0, seg1)
            exhaustive: Also pair segments of the same edge (self-intersection testing)
            verbose: Whether to print progress information; defaults to config.verbose

        Returns:
            SweepResult with the reported pairs as segment keys
        """
        check_collaborator(collaborator)
        verbose = self.config.verbose if verbose is None else verbose
        edges = [as_edge(e) for e in edges]
        mode = 'self-topology' if exhaustive else 'per-edge'

        if verbose:
            print(f"Sweeping {len(edges)} edges ({mode} mode)")

        recorder = _RecordingIntersector(collaborator)
        engine = self._new_engine()
        start_time = time.time()
        engine.compute_self_intersections(edges, recorder, test_all_segments=exhaustive)
        elapsed = time.time() - start_time

        return self._make_result(engine, recorder, elapsed, mode, verbose)

    def find_between(self, edges_a: Sequence, edges_b: Sequence, collaborator,
                     verbose: Optional[bool] = None) -> SweepResult:
        """
        Report candidate pairs between two edge collections.

        Pairs in the result are oriented (key in edges_a, key in edges_b).
        """
        check_collaborator(collaborator)
        verbose = self.config.verbose if verbose is None else verbose
        edges_a = [as_edge(e) for e in edges_a]
        edges_b = [as_edge(e) for e in edges_b]

        if verbose:
            print(f"Sweeping {len(edges_a)} edges against {len(edges_b)} edges")

        recorder = _RecordingIntersector(collaborator, between=True)
        engine = self._new_engine()
        start_time = time.time()
        engine.compute_intersections(edges_a, edges_b, recorder)
        elapsed = time.time() - start_time

        return self._make_result(engine, recorder, elapsed, 'between', verbose)

    def _make_result(self, engine: SimpleSweepLineIntersector, recorder: _RecordingIntersector,
                     elapsed: float, mode: str, verbose: bool) -> SweepResult:
        result = SweepResult(
            pairs=recorder.pairs,
            n_segments=engine.n_segments,
            n_events=len(engine.events),
            n_overlaps=engine.n_overlaps,
            n_reported=engine.n_reported,
            elapsed=elapsed,
            mode=mode,
        )
        result.metrics = self.metrics_calculator.calculate_metrics(result)

        if verbose:
            print(f"  Events: {result.n_events} for {result.n_segments} segments")
            print(f"  Overlaps examined: {result.n_overlaps}")
            print(f"  Pairs reported: {result.n_reported}")
            print(f"  Sweep completed in {elapsed:.3f}s")

        return result

    def batch_find_all(self, edge_sets: List[Sequence],
                       labels: Optional[List[str]] = None,
                       exhaustive: bool = False,
                       verbose: Optional[bool] = None,
                       parallel: bool = False,
                       n_processes: Optional[int] = None) -> Dict[str, SweepResult]:
        """
        Run find_all on several edge sets, collecting pairs with a PairCollector.
        Supports both sequential and parallel processing.

        Args:
            edge_sets: List of edge collections
            labels: Optional labels for each edge set
            exhaustive: Passed through to find_all
            verbose: Whether to print progress information
            parallel: Enable parallel processing using multiprocessing
            n_processes: Number of processes for parallel execution

        Returns:
            Dictionary mapping labels to SweepResult
        """
        verbose = self.config.verbose if verbose is None else verbose
        if labels is None:
            labels = [f"Set_{i+1}" for i in range(len(edge_sets))]

        results = {}

        if parallel:
            from .parallel import ParallelSweep

            edge_set_infos = [
                {'label': label, 'edges': [as_edge(e) for e in edges], 'exhaustive': exhaustive}
                for edges, label in zip(edge_sets, labels)
            ]

            parallel_sweep = ParallelSweep(n_processes=n_processes or self.config.n_processes,
                                           verbose=verbose, config=self.config)
            for record in parallel_sweep.process_batch(edge_set_infos):
                label = record['edge_set_info']['label']
                if record['success']:
                    results[label] = record['result']
                elif verbose:
                    print(f"Failed to process {label}: {record['error']}")
        else:
            for i, (edges, label) in enumerate(zip(edge_sets, labels)):
                if verbose:
                    print(f"[{i+1}/{len(edge_sets)}] {label}")
                results[label] = self.find_all(edges, PairCollector(), exhaustive, verbose)

        if verbose:
            print("\nReported pairs per set:")
            for label, result in results.items():
                print(f"  {label}: {result.n_reported}")

        return results

    def analyze_run(self, result: SweepResult, detailed: bool = False) -> Dict[str, object]:
        """
        Summarize how much work a sweep avoided.

        Args:
            result: SweepResult to analyze
            detailed: Whether to include the candidate graph summary

        Returns:
            Dictionary with analysis results
        """
        metrics = result.metrics or self.metrics_calculator.calculate_metrics(result)
        analysis = {
            'mode': result.mode,
            'metrics': dict(metrics),
            'elapsed': result.elapsed,
            'suggestions': self.metrics_calculator.suggest_improvements(metrics),
        }

        if detailed:
            graph = build_candidate_graph(result.pairs)
            analysis['candidate_graph'] = candidate_graph_summary(graph)

        return analysis

    def visualize(self, edges: Sequence, result: SweepResult, edges_b: Optional[Sequence] = None,
                  points=None, show: bool = False):
        """Plot edges with candidate segments highlighted."""
        return self.visualizer.plot_candidates(edges, result, edges_b, points, show)
