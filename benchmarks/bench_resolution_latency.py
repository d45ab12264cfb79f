"""Benchmark: authorization resolution latency, per-call p50/p99.

Resolves a rotating set of realistic membership and grant combinations
against the packaged matrix.  After the first pass every call is served
from the resolution cache, so the numbers reflect the request-time cost.
"""
from __future__ import annotations

import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gigvora_access.matrix.schema import PermissionMatrix
from gigvora_access.registry.registry import PermissionRegistry

_WARMUP: int = 100
_ITERATIONS: int = 20_000

_COMBINATIONS: list[tuple[list[str], list[str]]] = [
    (["user"], []),
    (["freelancer"], ["escrow:release"]),
    (["company", "mentor"], []),
    (["agency", "agency_admin"], ["wallet:ledger:view"]),
    (["headhunter", "recruiter"], []),
    (["volunteer", "ghost"], ["unknown:permission"]),
    (["platform_admin"], []),
    ([], ["calendar:manage"]),
]


def bench_resolution_latency() -> dict[str, object]:
    """Benchmark PermissionRegistry.resolve() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_latency_ms, p99_latency_ms, cache_hit_ratio.
    """
    registry = PermissionRegistry(PermissionMatrix.default())
    count = len(_COMBINATIONS)

    for i in range(_WARMUP):
        memberships, grants = _COMBINATIONS[i % count]
        registry.resolve(memberships, grants)

    latencies_ms: list[float] = []
    for i in range(_ITERATIONS):
        memberships, grants = _COMBINATIONS[i % count]
        t0 = time.perf_counter()
        registry.resolve(memberships, grants)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000
    info = registry.cache_info()

    result: dict[str, object] = {
        "operation": "resolution_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1) if total else 0.0,
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_latency_ms": round(sorted_lats[n // 2], 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "cache_hit_ratio": round(info.hits / (info.hits + info.misses), 4),
    }
    print(
        f"[bench_resolution_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms  "
        f"hits={result['cache_hit_ratio']:.2%}"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_resolution_latency()


if __name__ == "__main__":
    run_benchmark()
