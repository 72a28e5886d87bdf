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
Tests for the static README images
"""

from pathlib import Path

from sszbench.badges import (
    BadgeEntry,
    best_values,
    generate_streaming,
    generate_table,
    latest_stable,
    light_variant_path,
    streaming_rows,
    table_rows,
)
from sszbench.libraries import LIBRARIES, get_library
from sszbench.models import MetricResult, VersionAggregate
from sszbench.store import load_aggregations


def _entries(results_dir):
    return latest_stable(load_aggregations(results_dir))


class TestLatestStable:
    """Test version selection for the images."""

    def test_strict_selection(self, results_dir):
        """Test dev builds are skipped and releases beat pseudo-versions."""
        entries = _entries(results_dir)

        assert [(e.library.name, e.version) for e in entries] == [
            ("fastssz-v1", "v1.1.0"),
            ("dynamicssz-codegen", "v1.0.0"),
            ("karalabessz", "v0.3.0"),
        ]

    def test_prereleases_tie(self):
        """Test prereleases of one version keep the first one listed."""
        aggregations = {"ztyp": [VersionAggregate(version="v1.0.0-alpha"), VersionAggregate(version="v1.0.0-beta")]}

        entries = latest_stable(aggregations, LIBRARIES)

        assert entries[0].version == "v1.0.0-alpha"

    def test_libraries_without_stable_versions(self):
        """Test libraries with only dev builds are left out."""
        aggregations = {"ztyp": [VersionAggregate(version="v1.0.0", dev=True)]}
        assert latest_stable(aggregations) == []


class TestTable:
    """Test the table cells."""

    def test_best_values(self, results_dir):
        """Test the lowest time and memory per key."""
        entries = _entries(results_dir)

        assert best_values(entries, "UnmarshalMainnetBlock") == (3200, 900)
        assert best_values(entries, "UnmarshalMinimalBlock") == (float("inf"), float("inf"))

    def test_block_rows(self, results_dir):
        """Test best markers within 2us for time, exact for memory."""
        rows = table_rows(_entries(results_dir), "Block")
        fastssz, dynamic, karalabe = rows

        assert fastssz[0] == (4000, 900, True, True)
        assert dynamic[0] == (3200, 1100, True, False)
        assert karalabe[0] == (6500, 1200, False, False)

    def test_missing_operation(self, results_dir):
        """Test an operation without results gives an empty cell."""
        rows = table_rows(_entries(results_dir), "Block")
        assert rows[1][1] is None
        assert rows[2][1] == (2000, 600, True, True)
        assert rows[0][1] == (2500, 700, True, False)

    def test_state_rows(self, results_dir):
        """Test State only has the one benchmarked cell."""
        rows = table_rows(_entries(results_dir), "State")

        assert rows[0][0].best_time is True
        assert rows[0][1:] == [None, None]
        assert rows[1] == [None, None, None]


class TestStreaming:
    """Test the streaming bar chart data."""

    def test_rows(self, results_dir):
        """Test only payload/metric rows with data are kept."""
        rows = streaming_rows(_entries(results_dir))

        assert [(r.payload_type, r.label) for r in rows] == [("Block", "Time"), ("Block", "Memory")]
        assert [c.title for c in rows[0].charts] == ["Unmarshal (Stream)", "Marshal (Stream)"]

    def test_streaming_libraries_only(self, results_dir):
        """Test non-streaming libraries never get a bar."""
        rows = streaming_rows(_entries(results_dir))

        names = {bar.short_name for row in rows for chart in row.charts for bar in chart.bars}
        assert names == {"Dyn Code", "Karalabe"}

    def test_best_bars(self, results_dir):
        """Test bars within 2000 of the lowest value are marked best."""
        time_row = streaming_rows(_entries(results_dir))[0]
        reader, writer = time_row.charts

        assert [(bar.value, bar.best) for bar in reader.bars] == [(5500, True), (9000, False)]
        assert all(bar.best for bar in writer.bars)

    def test_bar_colors_and_versions(self):
        """Test bars use the image colour and short pseudo-versions."""
        lib = get_library("dynamicssz-codegen")
        result = MetricResult(ns_op=(1, 1, 1), bytes=(1, 1, 1), alloc=(1, 1, 1))
        entry = BadgeEntry(lib, "v0.0.0-20250301000000-aaaaaaaaaaaa", {"UnmarshalReaderMainnetBlock": result})

        bar = streaming_rows([entry])[0].charts[0].bars[0]

        assert bar.color == lib.svg_color
        assert bar.version == "v0.0.0-aaaaaa"


class TestGenerate:
    """Test the image generators end to end."""

    def test_light_variant_path(self):
        """Test -light goes before the suffix."""
        assert light_variant_path("docs/benchmark-table.svg") == Path("docs/benchmark-table-light.svg")

    def test_generate_table(self, results_dir, tmp_path, capsys):
        """Test dark and light tables are written."""
        output = tmp_path / "benchmark-table.svg"

        assert generate_table(results_dir, output) == 0

        light = tmp_path / "benchmark-table-light.svg"
        assert output.exists() and light.exists()
        dark_svg = output.read_text()
        assert "<svg" in dark_svg
        assert "Karalabe SSZ" in dark_svg
        assert dark_svg != light.read_text()
        assert "Found 3 libraries with benchmark data" in capsys.readouterr().out

    def test_generate_streaming(self, results_dir, tmp_path):
        """Test dark and light streaming charts are written."""
        output = tmp_path / "benchmark-streaming.svg"

        assert generate_streaming(results_dir, output) == 0

        assert output.exists()
        assert (tmp_path / "benchmark-streaming-light.svg").exists()
        assert "Unmarshal (Stream)" in output.read_text()

    def test_no_data(self, tmp_path, capsys):
        """Test an empty results directory fails with exit status 1."""
        assert generate_table(tmp_path, tmp_path / "t.svg") == 1
        assert "Error:" in capsys.readouterr().err
        assert not (tmp_path / "t.svg").exists()

    def test_streaming_without_streaming_libraries(self, results_dir, tmp_path):
        """Test only non-streaming data is not enough for the streaming image."""
        for name in ("dynamicssz-codegen", "karalabessz"):
            (results_dir / f"{name}-aggregation.json").unlink()

        assert generate_streaming(results_dir, tmp_path / "s.svg") == 1
