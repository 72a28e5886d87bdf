# This is free software for the public good of a permacomputer hosted at
# permacomputer.com, an always-on computer by the people, for the people.
# One which is durable, easy to repair, & distributed like tap water
# for machine learning intelligence.
#
# The permacomputer is community-owned infrastructure optimized around
# four values:
#
#   TRUTH      First principles, math & science, open source code freely distributed
#   FREEDOM    Voluntary partnerships, freedom from tyranny & corporate control
#   HARMONY    Minimal waste, self-renewing systems with diverse thriving connections
#   LOVE       Be yourself without hurting others, cooperation through natural law
#
# This software contributes to that vision by enabling code execution across 42+ programming languages through a unified interface, accessible to all.
# Code is seeds to sprout on any abandoned technology.

"""
Run details: every raw benchmark run as its own point.

Unlike the daily timeline, nothing is binned or filled here. Stable and
dev runs of a (library, operation) become separate series; dev series are
only produced when requested and are drawn lighter and dashed.
"""

from typing import List

from .colors import dev_color, rgba
from .libraries import LIBRARIES, RAW_METRIC_INDEX
from .models import RawBenchmark
from .projection import DEV_DASH, ChartModel
from .store import Store, all_operations

RUN_FILL_ALPHA = 0.2


class RunPoint(ChartModel):
    x: int
    y: float
    time: int
    version: str
    dev: bool
    ns_op: float
    bytes: float
    alloc: float


class RunDataset(ChartModel):
    label: str
    data: List[RunPoint]
    border_color: str
    background_color: str
    border_dash: List[int]
    point_style: str = "circle"


class RunRow(ChartModel):
    library: str
    version: str
    dev: bool
    operation: str
    ns_op: float
    bytes: float
    alloc: float
    time: int


def _libraries(store: Store, library: str):
    return [lib for lib in LIBRARIES if lib.name in store and library in ("all", lib.name)]


def _operations(store: Store, operation: str) -> List[str]:
    return all_operations(store) if operation == "all" else [operation]


def _run_point(benchmark: RawBenchmark, sample, metric: str) -> RunPoint:
    return RunPoint(
        x=benchmark.time * 1000,
        y=sample[RAW_METRIC_INDEX[metric]],
        time=benchmark.time,
        version=benchmark.version,
        dev=benchmark.dev,
        ns_op=sample[0],
        bytes=sample[1],
        alloc=sample[2],
    )


def project_runs(
    store: Store,
    library: str = "all",
    operation: str = "all",
    metric: str = "time",
    show_dev: bool = False,
) -> List[RunDataset]:
    """
    Series of raw runs per (library, operation).

    Args:
        store: Loaded results
        library: Library name or "all"
        operation: Operation key (e.g. "MarshalMainnetState") or "all"
        metric: "time", "memory" or "alloc" (selects y)
        show_dev: Also emit the dev-run series

    Returns:
        List of datasets, stable series before dev series for each pair
    """
    datasets = []
    operations = _operations(store, operation)

    for lib in _libraries(store, library):
        runs = sorted(store[lib.name].raw_benchmarks, key=lambda b: b.time)
        for op in operations:
            stable = []
            dev = []
            for benchmark in runs:
                sample = benchmark.results.get(op)
                if sample is None:
                    continue
                point = _run_point(benchmark, sample, metric)
                (dev if benchmark.dev else stable).append(point)

            if stable:
                datasets.append(RunDataset(
                    label=f"{lib.display_name} - {op}",
                    data=stable,
                    border_color=rgba(lib.base_color, 1),
                    background_color=rgba(lib.base_color, RUN_FILL_ALPHA),
                    border_dash=[],
                ))
            if dev and show_dev:
                color = dev_color(lib.base_color)
                datasets.append(RunDataset(
                    label=f"{lib.display_name} - {op} (dev)",
                    data=dev,
                    border_color=rgba(color, 1),
                    background_color=rgba(color, RUN_FILL_ALPHA),
                    border_dash=DEV_DASH,
                    point_style="triangle",
                ))
    return datasets


def latest_runs(
    store: Store,
    library: str = "all",
    operation: str = "all",
    show_dev: bool = False,
) -> List[RunRow]:
    """Table rows taken from the most recent run of each library."""
    rows = []
    operations = _operations(store, operation)

    for lib in _libraries(store, library):
        runs = [b for b in store[lib.name].raw_benchmarks if show_dev or not b.dev]
        if not runs:
            continue
        latest = max(runs, key=lambda b: b.time)
        for op in operations:
            sample = latest.results.get(op)
            if sample is None:
                continue
            rows.append(RunRow(
                library=lib.display_name,
                version=latest.version,
                dev=latest.dev,
                operation=op,
                ns_op=sample[0],
                bytes=sample[1],
                alloc=sample[2],
                time=latest.time,
            ))
    return rows
