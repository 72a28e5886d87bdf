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
Static SVG images of the latest stable results, for a README.

Two images, each written in a dark variant and a light variant:

    table      libraries x (Unmarshal, Marshal, HTR) x (Time, Mem), Mainnet
    streaming  reader/writer results of the streaming libraries as bar charts

Only aggregation files are read. The latest version of a library is picked
with the strict comparator: a tagged release always beats a pseudo-version.
"""

import logging
import math
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

import matplotlib

matplotlib.use("Agg")  # headless

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .colors import parse_rgba
from .formatting import format_memory_compact, format_time_compact
from .libraries import (
    LIBRARIES,
    OPERATIONS,
    RGB,
    STREAM_OPERATION_MAP,
    TYPES,
    Library,
    operation_key,
    payload_metadata,
    supports_streaming,
)
from .models import MetricResult, VersionAggregate
from .selector import select_latest
from .semver import format_version
from .store import DEFAULT_SOURCE, load_aggregations

logger = logging.getLogger(__name__)

BADGE_PRESET = "Mainnet"
DEFAULT_TABLE_OUTPUT = "benchmark-table.svg"
DEFAULT_STREAMING_OUTPUT = "benchmark-streaming.svg"

# anything within 2us of the fastest counts as fastest
BEST_TIME_MARGIN_NS = 2000
BEST_MEMORY_TOLERANCE = 0.01

EMPTY_CELL = "—"

STREAM_OPERATION_LABELS = {
    "UnmarshalReader": "Unmarshal (Stream)",
    "MarshalWriter": "Marshal (Stream)",
}
STREAM_OPERATIONS = tuple(op for op in STREAM_OPERATION_MAP.values() if op is not None)

# (metric, row label, value field)
STREAM_METRICS = (
    ("time", "Time", "ns_op"),
    ("memory", "Memory", "bytes"),
)

FONT = "DejaVu Sans"

COLOR_SCHEMES = {
    "dark": {
        "background": "#0d1117",
        "title": "rgba(248, 250, 252, 0.95)",
        "subtitle": "rgba(148, 163, 184, 0.8)",
        "header_bg": "rgba(30, 41, 59, 0.9)",
        "header_text": "rgba(248, 250, 252, 0.9)",
        "sub_header_text": "rgba(148, 163, 184, 0.7)",
        "type_bg": "rgba(51, 65, 85, 0.7)",
        "type_text": "rgba(248, 250, 252, 0.85)",
        "row_even_bg": "rgba(30, 41, 59, 0.5)",
        "row_odd_bg": "rgba(30, 41, 59, 0.3)",
        "library_name": "rgba(248, 250, 252, 0.9)",
        "version_text": "rgba(148, 163, 184, 0.7)",
        "value_text": "rgba(203, 213, 225, 0.9)",
        "best_time_indicator": "rgba(74, 222, 128, 0.6)",
        "best_time_text": "rgba(134, 239, 172, 1)",
        "best_mem_indicator": "rgba(96, 165, 250, 0.6)",
        "best_mem_text": "rgba(147, 197, 253, 1)",
        "empty_text": "rgba(100, 116, 139, 0.6)",
        "chart_bg": "rgba(30, 41, 59, 0.8)",
        "chart_border": "rgba(148, 163, 184, 0.2)",
        "glow_alpha": 0.5,
    },
    "light": {
        "background": "#ffffff",
        "title": "rgba(15, 23, 42, 0.95)",
        "subtitle": "rgba(71, 85, 105, 0.9)",
        "header_bg": "rgba(241, 245, 249, 1)",
        "header_text": "rgba(15, 23, 42, 0.9)",
        "sub_header_text": "rgba(71, 85, 105, 0.8)",
        "type_bg": "rgba(226, 232, 240, 1)",
        "type_text": "rgba(15, 23, 42, 0.85)",
        "row_even_bg": "rgba(248, 250, 252, 1)",
        "row_odd_bg": "rgba(241, 245, 249, 1)",
        "library_name": "rgba(15, 23, 42, 0.9)",
        "version_text": "rgba(71, 85, 105, 0.8)",
        "value_text": "rgba(51, 65, 85, 0.9)",
        "best_time_indicator": "rgba(34, 197, 94, 0.7)",
        "best_time_text": "rgba(22, 163, 74, 1)",
        "best_mem_indicator": "rgba(59, 130, 246, 0.7)",
        "best_mem_text": "rgba(37, 99, 235, 1)",
        "empty_text": "rgba(148, 163, 184, 0.7)",
        "chart_bg": "rgba(241, 245, 249, 1)",
        "chart_border": "rgba(71, 85, 105, 0.2)",
        "glow_alpha": 0.7,
    },
}


class BadgeEntry(NamedTuple):
    library: Library
    version: str
    results: Dict[str, MetricResult]


class TableCell(NamedTuple):
    time: float
    memory: float
    best_time: bool
    best_memory: bool


class StreamBar(NamedTuple):
    short_name: str
    version: str
    color: RGB
    value: float
    best: bool


class StreamChart(NamedTuple):
    title: str
    metric: str
    bars: List[StreamBar]


class StreamRow(NamedTuple):
    payload_type: str
    label: str
    charts: List[StreamChart]


def light_variant_path(path: Union[str, Path]) -> Path:
    """benchmark-table.svg -> benchmark-table-light.svg"""
    path = Path(path)
    return path.with_name(f"{path.stem}-light{path.suffix}")


def latest_stable(
    aggregations: Dict[str, List[VersionAggregate]],
    libraries: Iterable[Library] = LIBRARIES,
) -> List[BadgeEntry]:
    """Latest stable aggregate of each library, in registry order."""
    entries = []
    for lib in libraries:
        latest = select_latest(aggregations.get(lib.name, []), include_dev=False, prefer_real_semver=True)
        if latest is None:
            logger.info("No stable version for %s", lib.name)
            continue
        entries.append(BadgeEntry(lib, latest.version, latest.results))
    return entries


def best_values(entries: List[BadgeEntry], key: str) -> Tuple[float, float]:
    """Lowest (time, memory) among entries that have `key`; inf when none do."""
    present = [entry.results[key] for entry in entries if key in entry.results]
    best_time = min((result.ns_op[0] for result in present), default=math.inf)
    best_memory = min((result.bytes[0] for result in present), default=math.inf)
    return best_time, best_memory


def table_rows(entries: List[BadgeEntry], payload_type: str) -> List[List[Optional[TableCell]]]:
    """One row per entry, one cell per operation (None when not benchmarked)."""
    keys = [operation_key(op, BADGE_PRESET, payload_type) for op in OPERATIONS]
    bests = {key: best_values(entries, key) for key in keys}

    rows = []
    for entry in entries:
        cells = []
        for key in keys:
            result = entry.results.get(key)
            if result is None:
                cells.append(None)
                continue
            best_time, best_memory = bests[key]
            time_value = result.ns_op[0]
            memory_value = result.bytes[0]
            cells.append(TableCell(
                time=time_value,
                memory=memory_value,
                best_time=time_value - best_time <= BEST_TIME_MARGIN_NS,
                best_memory=abs(memory_value - best_memory) < BEST_MEMORY_TOLERANCE,
            ))
        rows.append(cells)
    return rows


def streaming_rows(entries: List[BadgeEntry]) -> List[StreamRow]:
    """
    Bar chart data for the streaming image.

    Rows are payload type x metric, columns the reader/writer operations.
    Charts without any bar and rows without any chart are left out. A bar
    is marked best when it is within BEST_TIME_MARGIN_NS of the lowest
    value of its chart, for either metric.
    """
    entries = [entry for entry in entries if supports_streaming(entry.library.name)]
    rows = []
    for payload_type in TYPES:
        for metric, label, field in STREAM_METRICS:
            charts = []
            for operation in STREAM_OPERATIONS:
                key = operation_key(operation, BADGE_PRESET, payload_type)
                values = [
                    (entry, getattr(entry.results[key], field)[0])
                    for entry in entries
                    if key in entry.results
                ]
                if not values:
                    continue
                lowest = min(value for _, value in values)
                bars = [
                    StreamBar(
                        short_name=entry.library.short_name,
                        version=format_version(entry.version),
                        color=entry.library.svg_color,
                        value=value,
                        best=value - lowest <= BEST_TIME_MARGIN_NS,
                    )
                    for entry, value in values
                ]
                charts.append(StreamChart(STREAM_OPERATION_LABELS[operation], metric, bars))
            if charts:
                rows.append(StreamRow(payload_type, label, charts))
    return rows


def _color(value: str):
    return parse_rgba(value) if value.startswith("rgba") else value


def _rgb(color: RGB, alpha: float):
    return tuple(c / 255 for c in color) + (alpha,)


def _canvas(width: float, height: float, colors: dict):
    """Figure whose data coordinates are pixels, origin top-left."""
    plt.rcParams["svg.fonttype"] = "none"
    fig = plt.figure(figsize=(width / 100, height / 100), dpi=100)
    fig.patch.set_facecolor(colors["background"])
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis("off")
    return fig, ax


def _text(ax, x, y, text, color, size, weight="normal", ha="center", **kwargs):
    ax.text(x, y, text, color=_color(color), fontsize=size, fontweight=weight,
            ha=ha, va="center", family=FONT, **kwargs)


def _rect(ax, x, y, width, height, color, **kwargs):
    ax.add_patch(Rectangle((x, y), width, height, facecolor=_color(color), edgecolor="none", **kwargs))


def _save_svg(fig, path: Union[str, Path], colors: dict) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(path), format="svg", facecolor=colors["background"], metadata={"Date": None})
    plt.close(fig)
    return path


def _generated_stamp(now: Optional[datetime]) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M")


def render_table_badge(
    entries: List[BadgeEntry],
    path: Union[str, Path],
    scheme: str = "dark",
    now: Optional[datetime] = None,
) -> Path:
    """Draw the results table as SVG."""
    colors = COLOR_SCHEMES[scheme]

    lib_col_width = 230
    op_col_width = 95
    cell_height = 38
    header_height = 44
    type_header_height = 28
    padding = 15
    section_gap = 12
    table_x = padding
    table_y = 56

    table_width = lib_col_width + len(OPERATIONS) * op_col_width * 2
    section_height = type_header_height + len(entries) * cell_height
    table_height = header_height + len(TYPES) * section_height + (len(TYPES) - 1) * section_gap
    width = table_width + padding * 2
    height = table_y + table_height + padding

    fig, ax = _canvas(width, height, colors)

    _text(ax, width / 2, 20, "SSZ Benchmark Results", colors["title"], 13, "bold")
    _text(ax, width / 2, 40,
          f"{BADGE_PRESET} • Latest Stable • Lower is Better • ● = Best • Generated: {_generated_stamp(now)}",
          colors["subtitle"], 8)

    _rect(ax, table_x, table_y, table_width, header_height, colors["header_bg"])
    _text(ax, table_x + lib_col_width / 2, table_y + header_height / 2, "Library", colors["header_text"], 9.5, "bold")
    for index, operation in enumerate(OPERATIONS):
        x = table_x + lib_col_width + index * op_col_width * 2
        title = "HTR" if operation == "HashTreeRoot" else operation
        _text(ax, x + op_col_width, table_y + 15, title, colors["header_text"], 9, "bold")
        _text(ax, x + op_col_width / 2, table_y + 33, "Time", colors["sub_header_text"], 7.5)
        _text(ax, x + op_col_width * 1.5, table_y + 33, "Mem", colors["sub_header_text"], 7.5)

    y = table_y + header_height
    for type_index, payload_type in enumerate(TYPES):
        if type_index > 0:
            y += section_gap

        metadata = payload_metadata(payload_type, BADGE_PRESET)
        title = payload_type
        if metadata and metadata.size:
            title += f"  ({metadata.fork} · {format_memory_compact(metadata.size)})"
        _rect(ax, table_x, y, table_width, type_header_height, colors["type_bg"])
        _text(ax, table_x + table_width / 2, y + type_header_height / 2, title, colors["type_text"], 9, "bold")
        y += type_header_height

        for row_index, (entry, cells) in enumerate(zip(entries, table_rows(entries, payload_type))):
            row_y = y + row_index * cell_height
            background = colors["row_even_bg"] if row_index % 2 == 0 else colors["row_odd_bg"]
            _rect(ax, table_x, row_y, table_width, cell_height, background)
            ax.add_patch(Rectangle((table_x + 6, row_y + 8), 10, 20,
                                   facecolor=_rgb(entry.library.svg_color, 0.9), edgecolor="none"))
            _text(ax, table_x + 22, row_y + 14, entry.library.display_name, colors["library_name"], 8, ha="left")
            _text(ax, table_x + 22, row_y + 27, format_version(entry.version), colors["version_text"], 6, ha="left")

            for op_index, cell in enumerate(cells):
                cell_x = table_x + lib_col_width + op_index * op_col_width * 2
                center_y = row_y + cell_height / 2
                if cell is None:
                    _text(ax, cell_x + op_col_width, center_y, EMPTY_CELL, colors["empty_text"], 8)
                    continue

                if cell.best_time:
                    ax.plot(cell_x + op_col_width / 2 - 26, center_y, "o", markersize=5,
                            color=_color(colors["best_time_indicator"]))
                _text(ax, cell_x + op_col_width / 2, center_y, format_time_compact(cell.time),
                      colors["best_time_text"] if cell.best_time else colors["value_text"], 8,
                      "bold" if cell.best_time else "normal")

                if cell.best_memory:
                    ax.plot(cell_x + op_col_width * 1.5 - 26, center_y, "o", markersize=5,
                            color=_color(colors["best_mem_indicator"]))
                _text(ax, cell_x + op_col_width * 1.5, center_y, format_memory_compact(cell.memory),
                      colors["best_mem_text"] if cell.best_memory else colors["value_text"], 8,
                      "bold" if cell.best_memory else "normal")
        y += len(entries) * cell_height

    return _save_svg(fig, path, colors)


def _draw_stream_chart(ax, chart: StreamChart, left: float, top: float, colors: dict):
    chart_width = 252
    chart_height = 210
    pad_top, pad_right, pad_bottom, pad_left = 36, 12, 72, 12
    bar_width = 36

    inner_width = chart_width - pad_left - pad_right
    inner_height = chart_height - pad_top - pad_bottom
    spacing = inner_width / len(chart.bars)
    actual_width = min(bar_width, spacing - 2)
    max_value = max(bar.value for bar in chart.bars)
    format_value = format_time_compact if chart.metric == "time" else format_memory_compact

    _rect(ax, left, top, chart_width, chart_height, colors["chart_bg"])
    _text(ax, left + chart_width / 2, top + 18, chart.title, colors["title"], 9.5, "bold")

    baseline = top + pad_top + inner_height
    for index, bar in enumerate(chart.bars):
        x = left + pad_left + index * spacing + (spacing - actual_width) / 2
        bar_height = (bar.value / max_value) * inner_height if max_value > 0 else 0
        y = baseline - bar_height

        if bar.best:
            ax.add_patch(Rectangle((x - 1, y - 1), actual_width + 2, bar_height + 2, facecolor="none",
                                   edgecolor=_rgb(bar.color, colors["glow_alpha"]), linewidth=2))
        ax.add_patch(Rectangle((x, y), actual_width, max(bar_height, 2),
                               facecolor=_rgb(bar.color, 0.85), edgecolor="none"))

        center_x = x + actual_width / 2
        _text(ax, center_x, y - 7, format_value(bar.value), colors["header_text"], 6.5)
        ax.text(center_x, baseline + 8, f"{bar.short_name}\n{bar.version}", color=_rgb(bar.color, 0.95),
                fontsize=7, ha="right", va="top", rotation=55, rotation_mode="anchor", family=FONT)


def render_streaming_badge(
    entries: List[BadgeEntry],
    path: Union[str, Path],
    scheme: str = "dark",
    now: Optional[datetime] = None,
) -> Path:
    """Draw the reader/writer bar charts as SVG."""
    colors = COLOR_SCHEMES[scheme]
    rows = streaming_rows(entries)

    chart_width = 252
    chart_height = 210
    chart_gap = 10
    row_gap = 12
    padding = 15
    label_width = 24 + 28
    top = 56

    columns = max((len(row.charts) for row in rows), default=1)
    width = padding * 2 + label_width + columns * chart_width + (columns - 1) * chart_gap
    height = top + len(rows) * (chart_height + row_gap) + padding

    fig, ax = _canvas(width, height, colors)
    _text(ax, width / 2, 20, "SSZ Streaming Benchmark", colors["title"], 13, "bold")
    _text(ax, width / 2, 40,
          f"{BADGE_PRESET} • Reader/Writer APIs • Lower is Better • Generated: {_generated_stamp(now)}",
          colors["subtitle"], 8)

    for row_index, row in enumerate(rows):
        row_top = top + row_index * (chart_height + row_gap)
        center_y = row_top + chart_height / 2
        _text(ax, padding + 12, center_y, row.payload_type, colors["header_text"], 9, "bold", rotation=90)
        _text(ax, padding + 38, center_y, row.label, colors["sub_header_text"], 8, rotation=90)
        for chart_index, chart in enumerate(row.charts):
            left = padding + label_width + chart_index * (chart_width + chart_gap)
            _draw_stream_chart(ax, chart, left, row_top, colors)

    return _save_svg(fig, path, colors)


def _write_variants(render, entries: List[BadgeEntry], output: Union[str, Path], label: str) -> List[Path]:
    written = []
    for scheme, path in (("dark", Path(output)), ("light", light_variant_path(output))):
        print(f"Generating {scheme} mode {label}...")
        written.append(render(entries, path, scheme))
        print(f"✓ {path}")
    return written


def _report(entries: List[BadgeEntry]):
    print(f"Found {len(entries)} libraries with benchmark data")
    for entry in entries:
        print(f"  - {entry.library.display_name}: {entry.version}")


def generate_table(results_dir: Union[str, Path] = DEFAULT_SOURCE, output: Union[str, Path] = DEFAULT_TABLE_OUTPUT) -> int:
    """Write the table image (dark and light). Returns the process exit code."""
    print("Loading aggregation data...")
    entries = latest_stable(load_aggregations(results_dir))
    if not entries:
        print("Error: No aggregation data found!", file=sys.stderr)
        return 1

    _report(entries)
    _write_variants(render_table_badge, entries, output, "SVG table")
    return 0


def generate_streaming(
    results_dir: Union[str, Path] = DEFAULT_SOURCE,
    output: Union[str, Path] = DEFAULT_STREAMING_OUTPUT,
) -> int:
    """Write the streaming image (dark and light). Returns the process exit code."""
    print("Loading aggregation data...")
    libraries = [lib for lib in LIBRARIES if supports_streaming(lib.name)]
    entries = latest_stable(load_aggregations(results_dir, libraries), libraries)
    if not entries:
        print("Error: No aggregation data found!", file=sys.stderr)
        return 1

    _report(entries)
    _write_variants(render_streaming_badge, entries, output, "streaming SVG charts")
    return 0
