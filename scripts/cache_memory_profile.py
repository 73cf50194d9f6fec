#!/usr/bin/env python3
"""
Memory profiling for the expiring neighborhood cache.

Simulates a stream of short-lived grid regions whose neighbor counts are
memoized in an ExpiringCache, drops the regions each cycle and checks that
neither the cache size nor process memory keeps growing. A growing trend
means the cache is keeping its key subjects alive.
"""

import gc
import json
import logging
import os
import sys
import time
from typing import Dict, List

import numpy as np
import psutil

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from src.caching import ExpiringCache, cached_compute
from src.config import CacheConfig


class Region:
    """A square patch of cells standing in for a simulation grid chunk."""

    def __init__(self, size: int, rng: np.random.Generator):
        self.cells = rng.random((size, size)) < 0.3


def count_region_neighbors(region: Region) -> np.ndarray:
    """Moore-neighborhood live counts with toroidal wrap."""
    cells = region.cells.astype(np.uint8)
    counts = np.zeros_like(cells)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += np.roll(np.roll(cells, dy, axis=0), dx, axis=1)
    return counts


def measure_memory_mb() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


def run_cycle(cache: ExpiringCache, regions_per_cycle: int, region_size: int,
              rng: np.random.Generator) -> Dict[str, int]:
    """Cache neighbor counts for a batch of regions, then drop the regions."""
    regions = [Region(region_size, rng) for _ in range(regions_per_cycle)]

    for region in regions:
        cached_compute(cache, region, lambda r=region: count_region_neighbors(r))
        # Second lookup within the TTL is a hit
        cached_compute(cache, region, lambda r=region: count_region_neighbors(r))

    cached_during_cycle = cache.size
    del regions
    gc.collect()

    return {
        'cached_during_cycle': cached_during_cycle,
        'cached_after_release': cache.size
    }


def profile_cache_memory(cycles: int = 20, regions_per_cycle: int = 200,
                         region_size: int = 64) -> Dict:
    """Profile cache memory over repeated region lifetimes."""
    gc.collect()
    baseline_memory = measure_memory_mb()
    logger.info(f"Baseline memory: {baseline_memory:.1f} MB")

    rng = np.random.default_rng(42)
    measurements: List[Dict] = []

    with CacheConfig.from_env().build_cache() as cache:
        for cycle in range(cycles):
            start_memory = measure_memory_mb()
            stats = run_cycle(cache, regions_per_cycle, region_size, rng)
            end_memory = measure_memory_mb()

            measurements.append({
                'cycle': cycle + 1,
                'start_memory_mb': start_memory,
                'end_memory_mb': end_memory,
                'delta_mb': end_memory - start_memory,
                **stats
            })
            logger.info(f"Cycle {cycle + 1:2d}: cached {stats['cached_during_cycle']:4d} -> "
                        f"{stats['cached_after_release']:4d} after release | "
                        f"Memory: {start_memory:.1f}MB -> {end_memory:.1f}MB")

        cache_stats = cache.get_stats()

    deltas = [m['delta_mb'] for m in measurements]
    avg_delta = sum(deltas) / len(deltas) if deltas else 0.0
    retained = max((m['cached_after_release'] for m in measurements), default=0)

    results = {
        'timestamp': time.strftime('%Y-%m-%d %H:%M:%S'),
        'cycles': cycles,
        'regions_per_cycle': regions_per_cycle,
        'region_size': region_size,
        'memory_baseline_mb': baseline_memory,
        'peak_memory_mb': max((m['end_memory_mb'] for m in measurements), default=baseline_memory),
        'avg_memory_delta_mb': avg_delta,
        'max_entries_retained': retained,
        'leak_detected': retained > 0 or avg_delta > 0.5,
        'cache_stats': cache_stats,
        'all_measurements': measurements
    }

    logger.info(f"Hit rate: {cache_stats['hit_rate']:.2f}")
    logger.info(f"Max entries retained after release: {retained}")
    logger.info(f"Leak detection: {'LEAK SUSPECTED' if results['leak_detected'] else 'NO LEAK'}")
    return results


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Memory profiling for the expiring neighborhood cache")
    parser.add_argument("--cycles", type=int, default=20, help="Number of profiling cycles")
    parser.add_argument("--regions", type=int, default=200, help="Regions cached per cycle")
    parser.add_argument("--size", type=int, default=64, help="Region edge length in cells")
    parser.add_argument("--output", type=str, default="logs/cache_memory_profile.json", help="Output file")
    args = parser.parse_args()

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)

    results = profile_cache_memory(cycles=args.cycles, regions_per_cycle=args.regions,
                                   region_size=args.size)

    with open(args.output, 'w') as f:
        json.dump(results, f, indent=2, default=str)

    logger.info(f"Detailed results saved to: {args.output}")
    sys.exit(1 if results['leak_detected'] else 0)
