"""Benchmark: registry construction throughput.

Builds a PermissionRegistry from the packaged matrix repeatedly.  Build time
covers alias indexing and the per-membership closure precomputation.
"""
from __future__ import annotations

import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gigvora_access.matrix.schema import PermissionMatrix
from gigvora_access.registry.registry import PermissionRegistry

_ITERATIONS: int = 500


def bench_registry_build() -> dict[str, object]:
    """Benchmark PermissionRegistry construction.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    matrix = PermissionMatrix.default()

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        PermissionRegistry(matrix)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "registry_build",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1) if total else 0.0,
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_registry_build] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} builds/sec  "
        f"avg={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_registry_build()


if __name__ == "__main__":
    run_benchmark()
