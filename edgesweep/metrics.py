"""
Pruning statistics for sweep results.
"""

from typing import Dict, List

from .data_structures import SweepResult


class SweepMetricsCalculator:
    """Compare the work done by a sweep with the all-pairs baseline."""

    def calculate_metrics(self, result: SweepResult) -> Dict[str, float]:
        """
        Compute pruning metrics for one sweep.

        The baseline is n(n-1)/2 for n segments, the number of pairs a
        brute-force comparison would test. The overlap ratio is the share of
        that baseline whose sweep-axis extents actually overlap.

        Args:
            result: SweepResult from EdgeSweep

        Returns:
            Dictionary with 'segments', 'brute_force_pairs', 'overlaps',
            'reported', 'overlap_ratio', 'report_ratio', 'pruned_pairs'
        """
        n = result.n_segments
        brute_force_pairs = n * (n - 1) // 2

        if brute_force_pairs == 0:
            overlap_ratio = 0.0
            report_ratio = 0.0
        else:
            overlap_ratio = result.n_overlaps / brute_force_pairs
            report_ratio = result.n_reported / brute_force_pairs

        return {
            'segments': n,
            'events': result.n_events,
            'brute_force_pairs': brute_force_pairs,
            'overlaps': result.n_overlaps,
            'reported': result.n_reported,
            'filtered': result.n_overlaps - result.n_reported,
            'overlap_ratio': overlap_ratio,
            'report_ratio': report_ratio,
            'pruned_pairs': brute_force_pairs - result.n_overlaps,
        }

    def suggest_improvements(self, metrics: Dict[str, float]) -> List[str]:
        """Suggest input or configuration changes based on pruning metrics."""
        suggestions = []

        if metrics['segments'] >= 100 and metrics['overlap_ratio'] > 0.5:
            suggestions.append("Most segment extents overlap on the sweep axis; "
                               "sweeping along the other axis may prune more pairs")

        if metrics['overlaps'] > 0 and metrics['reported'] == 0:
            suggestions.append("Every overlapping pair was filtered by group; "
                               "check that the intended registration mode was used")

        if metrics['segments'] < 2:
            suggestions.append("Fewer than two segments were registered; "
                               "edges with fewer than two coordinates contribute nothing")

        return suggestions
