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
Daily timeline points for one version of one library.

A version is drawn as one point per UTC day across its active period
[first, last]. Days with raw samples use the day's own average
(isRaw=True); days without fall back to the version's precomputed
aggregate (isRaw=False), so a run of isRaw=False points is filler and not
a daily measurement.
"""

import time
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Optional

from .libraries import RAW_METRIC_INDEX
from .models import DailyPoint, MetricResult, RawBenchmark, VersionAggregate

DAY_IN_SECONDS = 86400


class RawAggregate(NamedTuple):
    avg: float
    min: float
    max: float
    samples: int


def day_start(timestamp: int) -> int:
    """Start of the UTC day containing a unix timestamp, in seconds."""
    return (timestamp // DAY_IN_SECONDS) * DAY_IN_SECONDS


def time_range_cutoff(range_days: Optional[int], now: Optional[float] = None) -> int:
    """Earliest timestamp shown for a range of N days; None means all time (0)."""
    if range_days is None:
        return 0
    if now is None:
        now = time.time()
    return int(now) - range_days * DAY_IN_SECONDS


def aggregate_raw_values(values: List[float]) -> Optional[RawAggregate]:
    if not values:
        return None
    return RawAggregate(
        avg=sum(values) / len(values),
        min=min(values),
        max=max(values),
        samples=len(values),
    )


def raw_values_by_day(
    raw_benchmarks: Iterable[RawBenchmark],
    version: str,
    key: str,
    metric: str,
) -> Dict[int, List[float]]:
    """Group one version's raw samples for an operation key by UTC day."""
    index = RAW_METRIC_INDEX[metric]
    by_day = defaultdict(list)
    for benchmark in sorted((b for b in raw_benchmarks if b.version == version), key=lambda b: b.time):
        sample = benchmark.results.get(key)
        if sample is None:
            continue
        by_day[day_start(benchmark.time)].append(sample[index])
    return by_day


def build_daily_points(
    aggregate: VersionAggregate,
    result: MetricResult,
    key: str,
    raw_benchmarks: Iterable[RawBenchmark],
    metric: str,
    cutoff: int = 0,
) -> List[DailyPoint]:
    """
    Build one DailyPoint per day of a version's active period.

    Args:
        aggregate: The version whose period is drawn
        result: The version's precomputed result for `key` (day fallback)
        key: Operation key, e.g. "UnmarshalMainnetBlock"
        raw_benchmarks: All raw samples of the library; other versions are ignored
        metric: "time", "memory" or "alloc"
        cutoff: Unix seconds; days before it are not drawn

    Returns:
        Points ordered by day, x in milliseconds. Empty when the version has
        no period or ended before the cutoff.
    """
    first = aggregate.first if aggregate.first is not None else aggregate.last
    last = aggregate.last if aggregate.last is not None else aggregate.first
    if first is None:
        return []

    if last < cutoff:
        return []
    clipped_first = max(first, cutoff)

    fallback_value, fallback_min, fallback_max = result.triple(metric)
    by_day = raw_values_by_day(raw_benchmarks, aggregate.version, key, metric)

    points = []
    for day in range(day_start(clipped_first), day_start(last) + 1, DAY_IN_SECONDS):
        local = aggregate_raw_values(by_day.get(day, []))
        if local is not None:
            points.append(DailyPoint(
                x=day * 1000,
                y=local.avg,
                version=aggregate.version,
                samples=local.samples,
                min=local.min,
                max=local.max,
                is_dev=aggregate.dev,
                is_raw=True,
            ))
        else:
            points.append(DailyPoint(
                x=day * 1000,
                y=fallback_value,
                version=aggregate.version,
                samples=result.samples,
                min=fallback_min,
                max=fallback_max,
                is_dev=aggregate.dev,
                is_raw=False,
            ))
    return points
