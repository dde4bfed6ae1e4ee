#!/usr/bin/env python3
"""
Parallel sweep benchmark over synthetic edge sets.
Compares the work done on uniform inputs with the shared-extent worst case.
"""

import numpy as np
import matplotlib.pyplot as plt
import json
import os
import time
from datetime import datetime
from edgesweep.config import SweepConfig
from edgesweep.graph_utils import random_uniform_edges, shared_extent_edges, polyline_edges
from edgesweep.parallel import ParallelSweep


EDGE_SET_FAMILIES = {
    'Uniform': lambda n, seed: random_uniform_edges(n, extent=1000.0, max_length=10.0, seed=seed),
    'Polyline': lambda n, seed: polyline_edges(max(n // 4, 1), points_per_edge=5, seed=seed),
    'Shared extent': lambda n, seed: shared_extent_edges(n, seed=seed),
}


def create_edge_sets(sizes, families=None, seed=42):
    """Generate one edge set per (family, size) combination."""
    families = families or list(EDGE_SET_FAMILIES.keys())
    edge_sets = []

    for family in families:
        creator = EDGE_SET_FAMILIES[family]
        for n in sizes:
            edge_sets.append({
                'family': family,
                'label': f'{family} n={n}',
                'size': n,
                'edges': creator(n, seed),
                'exhaustive': family == 'Polyline',
            })

    print(f"Created {len(edge_sets)} edge sets from {len(families)} families")
    return edge_sets


def process_edge_sets_parallel(edge_sets, n_processes=None, config=None,
                               output_file='results/sweep_results_parallel.json'):
    """Sweep all edge sets using parallel processing."""

    print(f"Starting parallel processing of {len(edge_sets)} edge sets...")

    parallel_sweep = ParallelSweep(n_processes=n_processes, verbose=True, config=config or SweepConfig())

    start_time = time.time()
    results = parallel_sweep.process_batch(edge_sets)
    total_time = time.time() - start_time

    processed_results = []
    for result in results:
        if result['success']:
            info = result['edge_set_info']
            processed_results.append({
                'family': info['family'],
                'label': info['label'],
                'size': info['size'],
                'metrics': result['result'].metrics,
                'processing_time': result['processing_time'],
            })
        else:
            print(f"Failed: {result['edge_set_info']['label']}: {result['error']}")

    os.makedirs(os.path.dirname(output_file) or '.', exist_ok=True)
    with open(output_file, 'w') as f:
        json.dump(processed_results, f, indent=2)

    print(f"\nParallel Processing Summary:")
    print(f"Total time: {total_time:.2f}s")
    print(f"Successfully processed: {len(processed_results)}/{len(edge_sets)} edge sets")
    print(f"Results saved to {output_file}")

    return processed_results


def create_visualization(results, output_image='results/sweep_overlap_ratio.png'):
    """Plot overlap ratio and sweep time against input size for each family."""

    families = {}
    for result in results:
        data = families.setdefault(result['family'], {'sizes': [], 'ratios': [], 'times': []})
        data['sizes'].append(result['metrics']['segments'])
        data['ratios'].append(result['metrics']['overlap_ratio'])
        data['times'].append(result['processing_time'])

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    for family, data in families.items():
        ax1.plot(data['sizes'], data['ratios'], marker='o', label=family)
        ax2.plot(data['sizes'], data['times'], marker='o', label=family)

    ax1.set_xlabel('Segments')
    ax1.set_ylabel('Overlaps / all pairs')
    ax1.set_title('Share of pairs examined')
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.set_xlabel('Segments')
    ax2.set_ylabel('Processing time (s)')
    ax2.set_title('Sweep time vs input size')
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    os.makedirs(os.path.dirname(output_image) or '.', exist_ok=True)
    plt.savefig(output_image, dpi=150, bbox_inches='tight')
    print(f"Visualization saved to {output_image}")

    print(f"\nDetailed Statistics:")
    for family, data in families.items():
        print(f"\n{family}:")
        print(f"  Sets: {len(data['sizes'])}")
        print(f"  Avg overlap ratio: {np.mean(data['ratios']):.4f}")
        print(f"  Avg processing time: {np.mean(data['times']):.3f}s")

    return families


def main():
    """Main parallel benchmark pipeline."""
    print("Parallel Edge Sweep Benchmark")
    print("=" * 45)

    import multiprocessing
    max_cores = multiprocessing.cpu_count()

    while True:
        try:
            n_processes_input = input(f"\nNumber of parallel processes (1-{max_cores}): ").strip()
            n_processes = int(n_processes_input)
            if 1 <= n_processes <= max_cores:
                break
            else:
                print(f"Error: Please enter a number between 1 and {max_cores}")
        except ValueError:
            print("Error: Please enter a valid integer")

    config = SweepConfig()
    edge_sets = create_edge_sets(sizes=[250, 500, 1000, 2000], seed=config.random_seed)
    results = process_edge_sets_parallel(edge_sets, n_processes=n_processes, config=config)

    if results:
        families = create_visualization(results)

        summary = {
            'timestamp': datetime.now().isoformat(),
            'processing_mode': 'parallel',
            'total_sets_processed': len(results),
            'families': {family: len(data['sizes']) for family, data in families.items()},
            'avg_processing_time_per_set': float(np.mean([r['processing_time'] for r in results])),
        }

        with open('results/parallel_sweep_summary.json', 'w') as f:
            json.dump(summary, f, indent=2)

        print(f"Summary saved to results/parallel_sweep_summary.json")

    return results


if __name__ == "__main__":
    main()
