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
Render projected chart data to PNG with matplotlib.

Only the serialisable chart shapes from projection/details are read here
(labels, data, colours, dashes, metadata), the same contract a browser
charting library gets from write_chart_json().
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

import matplotlib

matplotlib.use("Agg")  # headless

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import FuncFormatter

from .colors import parse_rgba
from .formatting import METRIC_AXIS_LABELS, bar_tooltip_lines, format_number, point_tooltip_lines
from .libraries import METRICS, OPERATIONS
from .projection import ChartData, ChartModel, SnapshotChart, TimelineChart, chart_key

BACKGROUND = "#1a1a2e"
PANEL = "#16213e"
TEXT = "#eee"
MUTED = "#888"

METRIC_TITLES = {
    "time": "Time",
    "memory": "Memory",
    "alloc": "Allocations",
}


def apply_dark_theme():
    plt.rcParams["figure.facecolor"] = BACKGROUND
    plt.rcParams["axes.facecolor"] = PANEL
    plt.rcParams["text.color"] = TEXT
    plt.rcParams["axes.labelcolor"] = TEXT
    plt.rcParams["xtick.color"] = TEXT
    plt.rcParams["ytick.color"] = TEXT
    plt.rcParams["axes.edgecolor"] = "#444"
    plt.rcParams["grid.color"] = "#333"
    plt.rcParams["font.size"] = 10


def _metric_formatter(metric: str) -> FuncFormatter:
    return FuncFormatter(lambda value, _pos: format_number(value, metric))


def _no_data(ax, message: str = "No data available for the selected filters."):
    ax.text(0.5, 0.5, message, ha="center", va="center", color=MUTED, transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def _to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def draw_snapshot(ax, chart: SnapshotChart, metric: str, title: str = ""):
    """Draw one bar chart with min/max whiskers onto an axes."""
    dataset = chart.datasets[0] if chart.datasets else None
    if title:
        ax.set_title(title, fontsize=11, color="#fff", fontweight="bold")
    if dataset is None or not dataset.data:
        _no_data(ax)
        return

    x_pos = np.arange(len(chart.labels))
    values = np.array(dataset.data)
    lows = np.array([meta.min for meta in dataset.metadata])
    highs = np.array([meta.max for meta in dataset.metadata])
    yerr = np.vstack([np.clip(values - lows, 0, None), np.clip(highs - values, 0, None)])

    ax.bar(
        x_pos,
        values,
        color=[parse_rgba(c) for c in dataset.background_color],
        edgecolor=[parse_rgba(c) for c in dataset.border_color],
        linewidth=dataset.border_width,
        yerr=yerr,
        ecolor=MUTED,
        capsize=3,
    )
    ax.set_xticks(x_pos)
    ax.set_xticklabels(chart.labels, rotation=45, ha="right", fontsize=8)
    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(_metric_formatter(metric))


def draw_timeline(ax, datasets: List[ChartModel], metric: str, title: str = "", legend: bool = True):
    """Draw line datasets (timeline or run details) onto an axes with a UTC date axis."""
    if title:
        ax.set_title(title, fontsize=12, color="#fff", fontweight="bold")
    if not datasets:
        _no_data(ax)
        return

    for dataset in datasets:
        times = [_to_datetime(point.x) for point in dataset.data]
        values = [point.y for point in dataset.data]
        line_kwargs = {"dashes": dataset.border_dash} if dataset.border_dash else {}
        marker = "^" if getattr(dataset, "point_style", "circle") == "triangle" else "o"
        ax.plot(
            times,
            values,
            color=parse_rgba(dataset.border_color),
            marker=marker,
            markersize=4,
            linewidth=2,
            label=dataset.label,
            **line_kwargs,
        )

    ax.set_ylim(bottom=0)
    ax.set_xlabel("Time")
    ax.set_ylabel(METRIC_AXIS_LABELS.get(metric, metric))
    ax.yaxis.set_major_formatter(_metric_formatter(metric))
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %d"))
    ax.grid(True, alpha=0.3)
    if legend:
        ax.legend(fontsize=7, facecolor=BACKGROUND, edgecolor="#444", labelcolor=TEXT, loc="best")


def _save(fig, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(path), dpi=150, facecolor=BACKGROUND, bbox_inches="tight")
    plt.close(fig)
    return path


def render_snapshot(chart: SnapshotChart, metric: str, path: Union[str, Path], title: str = "") -> Path:
    apply_dark_theme()
    fig, ax = plt.subplots(figsize=(8, 5))
    draw_snapshot(ax, chart, metric, title)
    return _save(fig, path)


def render_timeline(chart: TimelineChart, metric: str, path: Union[str, Path], title: str = "") -> Path:
    apply_dark_theme()
    fig, ax = plt.subplots(figsize=(14, 6))
    draw_timeline(ax, chart.datasets, metric, title)
    return _save(fig, path)


def render_runs(datasets: List[ChartModel], metric: str, path: Union[str, Path], title: str = "") -> Path:
    apply_dark_theme()
    fig, ax = plt.subplots(figsize=(14, 6))
    draw_timeline(ax, datasets, metric, title or f"{METRIC_AXIS_LABELS[metric]} Over Benchmark Runs")
    return _save(fig, path)


def render_dashboard(data: ChartData, path: Union[str, Path], title: str, timeline_metric: str = "time") -> Path:
    """
    Render the whole dashboard to one image.

    Layout: metrics as rows, operations as columns (3x3 bar charts), then
    the timeline across the full width.
    """
    apply_dark_theme()
    fig = plt.figure(figsize=(18, 20))
    gs = fig.add_gridspec(len(METRICS) + 1, len(OPERATIONS), hspace=0.6, wspace=0.25)

    subtitle = ""
    if data.fork:
        subtitle = f"\n{data.fork}"
        if data.payload_size:
            subtitle += f" • {format_number(data.payload_size, 'memory')}"
    fig.suptitle(f"{title}{subtitle}", fontsize=18, fontweight="bold", color="#fff", y=0.99)

    for row, metric in enumerate(METRICS):
        for col, operation in enumerate(OPERATIONS):
            ax = fig.add_subplot(gs[row, col])
            draw_snapshot(ax, data.bars[chart_key(metric, operation)], metric,
                          f"{METRIC_TITLES[metric]} - {operation}")

    ax_timeline = fig.add_subplot(gs[len(METRICS), :])
    draw_timeline(ax_timeline, data.timeline.datasets, timeline_metric, "Timeline")

    return _save(fig, path)


def write_chart_json(data: Union[ChartModel, List[ChartModel]], path: Union[str, Path]) -> Path:
    """Write chart data with camelCase keys, ready for a browser charting library."""
    if isinstance(data, list):
        payload = [item.model_dump(by_alias=True) for item in data]
    else:
        payload = data.model_dump(by_alias=True)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))
    return path


def chart_tooltips(data: ChartData, timeline_metric: str = "time") -> dict:
    """
    Tooltip text for every bar and timeline point, in chart order.

    Bars are keyed like ChartData.bars; timeline entries follow the
    dataset order, one list of lines per point.
    """
    bars = {}
    for metric in METRICS:
        for operation in OPERATIONS:
            key = chart_key(metric, operation)
            chart = data.bars.get(key)
            metadata = chart.datasets[0].metadata if chart and chart.datasets else []
            bars[key] = [bar_tooltip_lines(meta, metric) for meta in metadata]

    timeline = [
        {
            "label": dataset.label,
            "points": [point_tooltip_lines(dataset.label, point, timeline_metric) for point in dataset.data],
        }
        for dataset in data.timeline.datasets
    ]
    return {"bars": bars, "timeline": timeline}


def write_tooltips(data: ChartData, path: Union[str, Path], timeline_metric: str = "time") -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(chart_tooltips(data, timeline_metric), indent=2, ensure_ascii=False))
    return path
