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
Chart projection: ViewState + loaded results -> chart data.

The output models serialise (model_dump(by_alias=True)) to the shapes a
Chart.js-style renderer consumes:

    snapshot: {labels, datasets: [{data, backgroundColor, borderColor, borderWidth, metadata}]}
    timeline: {datasets: [{label, data: [{x, y, ...}], borderColor, backgroundColor, borderDash}]}

Everything is recomputed from scratch on every call; a UI change is a new
ViewState followed by another project() call.
"""

from typing import Dict, FrozenSet, List, Literal, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .colors import rgba, stream_color, version_color
from .libraries import (
    LIBRARIES,
    METRICS,
    MODES,
    OPERATIONS,
    Library,
    operation_key,
    payload_metadata,
    stream_operation_key,
    supports_streaming,
)
from .models import DailyPoint, LibraryResults
from .selector import select_latest
from .store import Store
from .timeline import build_daily_points, time_range_cutoff

# ZTYP is far slower than the rest and flattens every chart
DEFAULT_LIBRARIES = tuple(lib.name for lib in LIBRARIES if lib.name != "ztyp")

BAR_ALPHA = 0.8
LINE_FILL_ALPHA = 0.3
DEV_DASH = [5, 5]


class ChartModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class BarMetadata(ChartModel):
    value: float
    min: float
    max: float
    samples: int
    version: str
    mode: str


class BarDataset(ChartModel):
    data: List[float]
    background_color: List[str]
    border_color: List[str]
    border_width: int = 1
    metadata: List[BarMetadata]


class SnapshotChart(ChartModel):
    labels: List[str]
    datasets: List[BarDataset]


class LineDataset(ChartModel):
    label: str
    data: List[DailyPoint]
    border_color: str
    background_color: str
    border_dash: List[int]
    is_dev: bool = False
    is_stream: bool = False


class TimelineChart(ChartModel):
    datasets: List[LineDataset]


class ChartData(ChartModel):
    bars: Dict[str, SnapshotChart]
    timeline: TimelineChart
    fork: Optional[str] = None
    payload_size: Optional[int] = None


class ViewState(BaseModel):
    """Immutable UI selection. Build new states with with_changes/toggle_*."""

    model_config = ConfigDict(frozen=True)

    preset: Literal["Mainnet", "Minimal"] = "Mainnet"
    payload_type: Literal["Block", "State"] = "Block"
    libraries: Tuple[str, ...] = DEFAULT_LIBRARIES
    modes: FrozenSet[Literal["buffer", "stream"]] = frozenset({"buffer"})
    timeline_operation: Literal["Unmarshal", "Marshal", "HashTreeRoot"] = "Unmarshal"
    timeline_metric: Literal["time", "memory", "alloc"] = "time"
    timeline_range_days: Optional[int] = 30
    show_dev: bool = False

    @field_validator("modes")
    @classmethod
    def _at_least_one_mode(cls, value):
        return value or frozenset({"buffer"})


def with_changes(state: ViewState, **changes) -> ViewState:
    """Return a validated copy of `state` with some fields replaced."""
    return ViewState.model_validate({**state.model_dump(), **changes})


def toggle_library(state: ViewState, name: str) -> ViewState:
    if name in state.libraries:
        libraries = tuple(n for n in state.libraries if n != name)
    else:
        libraries = state.libraries + (name,)
    return with_changes(state, libraries=libraries)


def toggle_mode(state: ViewState, mode: str) -> ViewState:
    """Flip a mode; removing the last one falls back to buffer."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    return with_changes(state, modes=state.modes ^ {mode})


class ModePlan(NamedTuple):
    buffer_key: str
    stream_key: Optional[str]
    show_buffer: bool
    show_stream: bool

    @property
    def show_both(self) -> bool:
        return self.show_buffer and self.show_stream


def mode_plan(state: ViewState, operation: str) -> ModePlan:
    """
    Decide which result keys to draw for an operation.

    Operations without a reader/writer variant always show buffer results,
    whatever modes are selected.
    """
    buffer_key = operation_key(operation, state.preset, state.payload_type)
    stream_key = stream_operation_key(operation, state.preset, state.payload_type)
    has_stream = stream_key is not None
    return ModePlan(
        buffer_key=buffer_key,
        stream_key=stream_key,
        show_buffer="buffer" in state.modes or not has_stream,
        show_stream="stream" in state.modes and has_stream,
    )


def _selected_libraries(state: ViewState, store: Store) -> List[Tuple[Library, LibraryResults]]:
    """Selected libraries with loaded data, in declaration order."""
    return [
        (lib, store[lib.name])
        for lib in LIBRARIES
        if lib.name in state.libraries and lib.name in store
    ]


def project_snapshot(state: ViewState, store: Store, operation: str, metric: str) -> SnapshotChart:
    """Bar chart of the latest stable version of each selected library."""
    plan = mode_plan(state, operation)

    labels = []
    data = []
    colors = []
    border_colors = []
    metadata = []

    def add_bar(version, result, label, color, mode):
        value, low, high = result.triple(metric)
        labels.append(label)
        data.append(value)
        colors.append(rgba(color, BAR_ALPHA))
        border_colors.append(rgba(color, 1))
        metadata.append(BarMetadata(
            value=value, min=low, max=high, samples=result.samples, version=version, mode=mode,
        ))

    for lib, results in _selected_libraries(state, store):
        latest = select_latest(results.aggregations)
        if latest is None:
            continue

        if plan.show_buffer:
            result = latest.results.get(plan.buffer_key)
            if result is not None:
                label = f"{lib.display_name} (Buf)" if plan.show_both else lib.display_name
                add_bar(latest.version, result, label, lib.base_color, "buffer")

        if plan.show_stream and supports_streaming(lib.name):
            result = latest.results.get(plan.stream_key)
            if result is not None:
                label = f"{lib.display_name} (Str)" if plan.show_both else lib.display_name
                color = stream_color(lib.base_color) if plan.show_both else lib.base_color
                add_bar(latest.version, result, label, color, "stream")

    return SnapshotChart(
        labels=labels,
        datasets=[BarDataset(
            data=data,
            background_color=colors,
            border_color=border_colors,
            metadata=metadata,
        )],
    )


def _version_series(
    lib: Library,
    results: LibraryResults,
    key: str,
    is_stream: bool,
    show_both: bool,
    state: ViewState,
    cutoff: int,
) -> List[LineDataset]:
    if is_stream and not supports_streaming(lib.name):
        return []

    versions = sorted(
        (agg for agg in results.aggregations
         if key in agg.results and (state.show_dev or not agg.dev)),
        key=lambda agg: agg.first if agg.first is not None else 0,
    )

    datasets = []
    for index, agg in enumerate(versions):
        points = build_daily_points(
            agg, agg.results[key], key, results.raw_benchmarks, state.timeline_metric, cutoff,
        )
        if not points:
            continue

        color = version_color(lib.base_color, index, len(versions))
        if is_stream and show_both:
            color = stream_color(color)

        mode_label = (" (Str)" if is_stream else " (Buf)") if show_both else ""
        datasets.append(LineDataset(
            label=f"{lib.display_name}{mode_label} {agg.version}",
            data=points,
            border_color=rgba(color, 1),
            background_color=rgba(color, LINE_FILL_ALPHA),
            border_dash=DEV_DASH if agg.dev else [],
            is_dev=agg.dev,
            is_stream=is_stream,
        ))
    return datasets


def project_timeline(state: ViewState, store: Store, now: Optional[float] = None) -> TimelineChart:
    """One daily series per (library, version, mode) for the timeline operation."""
    cutoff = time_range_cutoff(state.timeline_range_days, now)
    plan = mode_plan(state, state.timeline_operation)

    datasets = []
    for lib, results in _selected_libraries(state, store):
        if plan.show_buffer:
            datasets.extend(_version_series(
                lib, results, plan.buffer_key, False, plan.show_both, state, cutoff,
            ))
        if plan.show_stream:
            datasets.extend(_version_series(
                lib, results, plan.stream_key, True, plan.show_both, state, cutoff,
            ))
    return TimelineChart(datasets=datasets)


def chart_key(metric: str, operation: str) -> str:
    return f"{metric}-{operation.lower()}"


def project(state: ViewState, store: Store, now: Optional[float] = None) -> ChartData:
    """Project the whole dashboard: the metric x operation bar matrix and the timeline."""
    bars = {
        chart_key(metric, operation): project_snapshot(state, store, operation, metric)
        for metric in METRICS
        for operation in OPERATIONS
    }
    metadata = payload_metadata(state.payload_type, state.preset)
    return ChartData(
        bars=bars,
        timeline=project_timeline(state, store, now),
        fork=metadata.fork if metadata else None,
        payload_size=metadata.size if metadata else None,
    )
