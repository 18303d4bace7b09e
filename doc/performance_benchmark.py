"""
Performance Benchmark
=====================

Timing and peak memory for:
- Solinas parameter search at several sizes
- each protocol phase (setup, enrollment, discovery, exchange, extraction)

Usage:
    python doc/performance_benchmark.py
"""

import json
import os
import sys
import time
import tracemalloc
from typing import Dict, List, Tuple

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pairing_auth import generate_params, pairing_group_from_params
from pairing_auth.rng import RandomSource
from auth_gateway import Gateway
from auth_protocol import DEFAULT_PLAINTEXT, exchange, extract, verify


class PerformanceBenchmark:
    """Benchmark runner."""

    def __init__(self, seed: int = 1):
        self.seed = seed
        self.results = {}
        self.memory_results = {}

    def measure_time(self, func, *args, num_runs=10, **kwargs) -> Tuple[float, float, object]:
        """
        Mean and standard deviation (seconds) of ``num_runs`` calls.

        Returns
        -------
        (mean, std_dev, last result)
        """
        times = []
        result = None
        for _ in range(num_runs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            times.append(time.perf_counter() - start)

        avg_time = sum(times) / len(times)
        std_dev = (sum((t - avg_time) ** 2 for t in times) / len(times)) ** 0.5
        return avg_time, std_dev, result

    def measure_memory(self, func, *args, **kwargs) -> Tuple[float, object]:
        """Peak memory of one call, in MB."""
        tracemalloc.start()
        result = func(*args, **kwargs)
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        return peak / 1024 / 1024, result

    def benchmark_param_search(self, sizes: List[Tuple[int, int]], num_runs=3) -> Dict:
        print(f"\nParameter search ({num_runs} runs each)")
        print("=" * 60)
        results = {}
        for rbits, qbits in sizes:
            print(f"  rbits={rbits} qbits={qbits}...", end=" ", flush=True)
            avg, std, _ = self.measure_time(generate_params, rbits, qbits, self.seed, num_runs=num_runs)
            peak, _ = self.measure_memory(generate_params, rbits, qbits, self.seed)
            key = f"{rbits}/{qbits}"
            results[key] = {'mean': avg, 'std': std}
            self.memory_results[f"param_search_{key}"] = peak
            print(f"{avg * 1000:.1f} ± {std * 1000:.1f} ms, peak {peak:.2f} MB")
        self.results['param_search'] = results
        return results

    def benchmark_protocol(self, rbits=512, qbits=1024, num_runs=10) -> Dict:
        print(f"\nProtocol phases (rbits={rbits}, qbits={qbits}, {num_runs} runs each)")
        print("=" * 60)
        rng = RandomSource(self.seed)
        group = pairing_group_from_params(generate_params(rbits, qbits, rng=rng))

        t_setup, s_setup, gateway = self.measure_time(Gateway, group, rng, num_runs=num_runs)
        counter = iter(range(10 ** 9))
        t_enroll, s_enroll, _ = self.measure_time(
            lambda: gateway.enroll(f"bench-{next(counter)}"), num_runs=num_runs)
        vehicle_a = gateway.enroll('vehicle-A')
        vehicle_b = gateway.enroll('vehicle-B')
        t_disc, s_disc, session_a = self.measure_time(vehicle_a.discover, rng, num_runs=num_runs)
        session_b = vehicle_b.discover(rng)
        t_exch, s_exch, (msg, sender) = self.measure_time(
            exchange, vehicle_a, session_a, vehicle_b, session_b, DEFAULT_PLAINTEXT, rng, num_runs=num_runs)
        t_extr, s_extr, receiver = self.measure_time(extract, vehicle_b, session_b, msg, num_runs=num_runs)

        if not verify(sender, receiver).ok:
            raise RuntimeError("benchmark run did not verify")

        results = {
            'setup': {'mean': t_setup, 'std': s_setup},
            'enrollment': {'mean': t_enroll, 'std': s_enroll},
            'discovery': {'mean': t_disc, 'std': s_disc},
            'exchange': {'mean': t_exch, 'std': s_exch},
            'extraction': {'mean': t_extr, 'std': s_extr},
        }
        for phase, r in results.items():
            print(f"  {phase:<11} {r['mean'] * 1000:.2f} ± {r['std'] * 1000:.2f} ms")
        self.results['protocol'] = results
        return results

    def save_results(self, filename='benchmark_results.json'):
        """Write timing and memory results as JSON."""
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        with open(filename, 'w') as f:
            json.dump({'timing': self.results, 'memory': self.memory_results}, f, indent=2)
        print(f"\nResults saved to {filename}")


if __name__ == '__main__':
    benchmark = PerformanceBenchmark(seed=1)
    benchmark.benchmark_param_search([(100, 200), (160, 512), (512, 1024)])
    benchmark.benchmark_protocol()
    benchmark.save_results()
