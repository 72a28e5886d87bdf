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

"""Human readable values for axis ticks, tooltips and badges."""

from datetime import datetime, timezone
from typing import List, Optional

METRIC_AXIS_LABELS = {
    "time": "Time (ns/op)",
    "memory": "Memory (bytes/op)",
    "alloc": "Allocations",
}


def _scaled(value: float, units, decimals: int) -> str:
    for threshold, divisor, suffix in units:
        if value >= threshold:
            return f"{value / divisor:.{decimals}f}{suffix}"
    return f"{value:.{decimals}f}{units[-1][2]}"


_TIME_UNITS = ((1e9, 1e9, " s"), (1e6, 1e6, " ms"), (1e3, 1e3, " us"), (0, 1, " ns"))
_BYTE_UNITS = ((1e9, 1e9, " GB"), (1e6, 1e6, " MB"), (1e3, 1e3, " KB"), (0, 1, " B"))
_COUNT_UNITS = ((1e9, 1e9, " G"), (1e6, 1e6, " M"), (1e3, 1e3, " K"), (0, 1, ""))


def format_time(ns: float) -> str:
    return _scaled(ns, _TIME_UNITS, 2)


def format_bytes(value: float) -> str:
    return _scaled(value, _BYTE_UNITS, 2)


def format_count(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return _scaled(value, _COUNT_UNITS, 2)


def format_number(value: Optional[float], metric: str) -> str:
    """Format a metric value for tooltips and axis ticks."""
    if value is None:
        return "N/A"
    if metric == "time":
        return format_time(value)
    if metric == "memory":
        return format_bytes(value)
    return f"{value:.2f}"


def format_time_compact(ns: float) -> str:
    if ns >= 1e9:
        return f"{ns / 1e9:.1f}s"
    if ns >= 1e6:
        return f"{ns / 1e6:.1f}ms"
    if ns >= 1e3:
        return f"{ns / 1e3:.0f}µs"
    return f"{ns:.0f}ns"


def format_memory_compact(value: float) -> str:
    if value >= 1e9:
        return f"{value / 1e9:.1f}GB"
    if value >= 1e6:
        return f"{value / 1e6:.1f}MB"
    if value >= 1e3:
        return f"{value / 1e3:.0f}KB"
    return f"{value:.0f}B"


def format_timestamp(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def bar_tooltip_lines(meta, metric: str) -> List[str]:
    """Tooltip for one snapshot bar (a BarMetadata)."""
    return [
        f"Value: {format_number(meta.value, metric)}",
        f"Min: {format_number(meta.min, metric)}",
        f"Max: {format_number(meta.max, metric)}",
        f"Samples: {meta.samples}",
        f"Version: {meta.version}",
    ]


def point_tooltip_lines(label: str, point, metric: str) -> List[str]:
    """Tooltip for one timeline point (a DailyPoint) of the series `label`."""
    source = "(exact)" if point.is_raw else "(aggregated)"
    return [
        label + (" (dev)" if point.is_dev else ""),
        f"Value: {format_number(point.y, metric)} {source}",
        f"Min: {format_number(point.min, metric)}",
        f"Max: {format_number(point.max, metric)}",
        f"Samples: {point.samples}",
    ]
