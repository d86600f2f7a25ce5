"""Benchmark: module.xml generation latency, per-call mean/p99.

Measures ManifestGenerator.generate() for a descriptor with a realistic
number of jars, hooks and dependencies.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from modl_packager.bundler.manifest import ManifestGenerator
from modl_packager.descriptor.model import (
    ArchiveEntry,
    Dependency,
    EntryPoint,
    ModuleDescriptor,
)

_WARMUP: int = 100
_ITERATIONS: int = 3_000
_SCOPES: tuple[str, ...] = ("G", "D", "C")


def _make_descriptor(entries: int = 30) -> ModuleDescriptor:
    """Build a descriptor with *entries* items in each scoped collection."""
    return ModuleDescriptor(
        id="com.example.bench",
        name="Benchmark Module",
        description="Synthetic module for latency measurement",
        version="1.0.0",
        license="license.html",
        archives=[
            ArchiveEntry(path=f"libs/{i}/module-{i}.jar", scope=_SCOPES[i % 3])
            for i in range(entries)
        ],
        entry_points=[
            EntryPoint(class_name=f"com.example.Hook{i}", scope=_SCOPES[i % 3])
            for i in range(entries)
        ],
        dependencies=[
            Dependency(module_id=f"com.example.dep{i}", scope=_SCOPES[i % 3])
            for i in range(entries)
        ],
    )


def bench_manifest_generation_latency() -> dict[str, object]:
    """Benchmark ManifestGenerator.generate() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms.
    """
    generator = ManifestGenerator()
    descriptor = _make_descriptor()

    for _ in range(_WARMUP):
        generator.generate(descriptor)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        generator.generate(descriptor)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "manifest_generation_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
    }
    print(
        f"[bench_manifest_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_manifest_generation_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "manifest_latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
