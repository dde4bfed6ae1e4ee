#!/usr/bin/env python3
"""
Parallel processing utilities for the edge sweep.
Enables batch processing of many edge sets with multiprocessing.
"""

from multiprocessing import Pool, cpu_count
import time
from typing import List, Dict, Any, Optional

from .config import SweepConfig
from .edge_sweep import EdgeSweep
from .segment_intersector import PairCollector


def process_single_edge_set_worker(work_item: tuple) -> Dict[str, Any]:
    """
    Worker function to sweep a single edge set.
    Designed for parallel execution in multiprocessing.

    Args:
        work_item: Tuple of (edge_set_info, config, index, total)

    Returns:
        Dictionary with processing results
    """
    edge_set_info, config, index, total = work_item
    try:
        # Each worker builds its own EdgeSweep and collector
        sweeper = EdgeSweep(config)
        collector = PairCollector()

        start_time = time.time()
        edges_b = edge_set_info.get('edges_b')
        if edges_b is None:
            result = sweeper.find_all(edge_set_info['edges'], collector,
                                      exhaustive=edge_set_info.get('exhaustive', False),
                                      verbose=False)
        else:
            result = sweeper.find_between(edge_set_info['edges'], edges_b, collector, verbose=False)
        processing_time = time.time() - start_time

        return {
            'index': index,
            'success': True,
            'edge_set_info': edge_set_info,
            'result': result,
            'processing_time': processing_time,
        }

    except Exception as e:
        return {
            'index': index,
            'success': False,
            'error': str(e),
            'edge_set_info': edge_set_info
        }


class ParallelSweep:
    """
    Parallel processing wrapper for EdgeSweep.
    Each edge set is swept by a separate engine in a worker process.
    """

    def __init__(self, n_processes: Optional[int] = None, verbose: bool = True,
                 config: Optional[SweepConfig] = None):
        """
        Initialize parallel sweep processor.

        Args:
            n_processes: Number of parallel processes (default: CPU count)
            verbose: Enable progress reporting
            config: SweepConfig passed to every worker
        """
        self.n_processes = n_processes or cpu_count()
        self.verbose = verbose
        self.config = config or SweepConfig()

    def process_batch(self,
                      edge_sets: List[Dict[str, Any]],
                      chunk_size: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Sweep multiple edge sets in parallel.

        Args:
            edge_sets: List of dictionaries with 'label', 'edges' and optionally
                'edges_b' (sweep between two collections) or 'exhaustive'
            chunk_size: Size of work chunks for multiprocessing

        Returns:
            List of processing results, in input order
        """
        if not edge_sets:
            return []

        if self.verbose:
            print(f"Processing {len(edge_sets)} edge sets using {self.n_processes} processes...")

        work_items = [
            (info, self.config, i, len(edge_sets))
            for i, info in enumerate(edge_sets)
        ]

        if chunk_size is None:
            chunk_size = max(1, len(edge_sets) // (self.n_processes * 4))

        start_time = time.time()

        with Pool(processes=self.n_processes) as pool:
            if self.verbose:
                print(f"Starting parallel processing with chunk size {chunk_size}...")
            results = pool.map(process_single_edge_set_worker, work_items, chunksize=chunk_size)

        total_time = time.time() - start_time
        successful_results = [r for r in results if r['success']]

        if self.verbose:
            print(f"Parallel processing completed in {total_time:.2f}s")
            print(f"Successfully processed: {len(successful_results)}/{len(edge_sets)} edge sets")
            print(f"Average time per edge set: {total_time/len(edge_sets):.3f}s")

        return results

    def get_processing_stats(self, results: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Calculate processing statistics from results.

        Args:
            results: List of processing results

        Returns:
            Dictionary with comprehensive statistics
        """
        successful_results = [r for r in results if r['success']]
        failed_results = [r for r in results if not r['success']]

        if not successful_results:
            return {
                'total_sets': len(results),
                'successful': 0,
                'failed': len(failed_results),
                'success_rate': 0.0 if results else 1.0
            }

        processing_times = [r['processing_time'] for r in successful_results]
        reported = [r['result'].n_reported for r in successful_results]
        overlap_ratios = [r['result'].metrics.get('overlap_ratio', 0.0) for r in successful_results]

        return {
            'total_sets': len(results),
            'successful': len(successful_results),
            'failed': len(failed_results),
            'success_rate': len(successful_results) / len(results),
            'processing_time': {
                'total': sum(processing_times),
                'mean': sum(processing_times) / len(processing_times),
                'min': min(processing_times),
                'max': max(processing_times)
            },
            'reported_pairs': {
                'total': sum(reported),
                'mean': sum(reported) / len(reported),
                'min': min(reported),
                'max': max(reported)
            },
            'overlap_ratio': {
                'mean': sum(overlap_ratios) / len(overlap_ratios),
                'min': min(overlap_ratios),
                'max': max(overlap_ratios)
            },
            'failed_sets': [r['edge_set_info'].get('label') for r in failed_results]
        }
