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
SSZ benchmark charts

Loads SSZ library benchmark results and projects them into chart data:
latest-version bar charts, per-version daily timelines, raw-run details
and static README images.

Example usage:
    import asyncio
    from sszbench import ViewState, load, project

    store = asyncio.run(load(source="results"))
    charts = project(ViewState(payload_type="State"), store)
    print(charts.bars["time-unmarshal"].labels)
"""

from .errors import BenchmarkDataError, NoDataLoaded, ResourceMalformed, ResourceMissing
from .projection import (
    ChartData,
    ViewState,
    project,
    project_snapshot,
    project_timeline,
    toggle_library,
    toggle_mode,
    with_changes,
)
from .selector import select_latest
from .semver import compare_versions, parse_semver
from .store import load, load_aggregations
from .timeline import build_daily_points

__version__ = "1.2.0"
__all__ = [
    "load",
    "load_aggregations",
    "select_latest",
    "compare_versions",
    "parse_semver",
    "build_daily_points",
    "ViewState",
    "ChartData",
    "project",
    "project_snapshot",
    "project_timeline",
    "toggle_library",
    "toggle_mode",
    "with_changes",
    "BenchmarkDataError",
    "NoDataLoaded",
    "ResourceMalformed",
    "ResourceMissing",
]
