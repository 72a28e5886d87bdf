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
Tests for value formatting
"""

import pytest

from sszbench.formatting import (
    bar_tooltip_lines,
    format_bytes,
    format_count,
    format_memory_compact,
    format_number,
    format_time,
    format_time_compact,
    format_timestamp,
    point_tooltip_lines,
)
from sszbench.models import DailyPoint
from sszbench.projection import BarMetadata


class TestTooltipFormatters:
    """Test the two-decimal tooltip formatters."""

    @pytest.mark.parametrize("ns,expected", [
        (999, "999.00 ns"),
        (1500, "1.50 us"),
        (2500000, "2.50 ms"),
        (2500000000, "2.50 s"),
    ])
    def test_format_time(self, ns, expected):
        """Test time units."""
        assert format_time(ns) == expected

    def test_format_bytes(self):
        """Test byte units."""
        assert format_bytes(512) == "512.00 B"
        assert format_bytes(2500000) == "2.50 MB"

    def test_format_count(self):
        """Test plain counts."""
        assert format_count(12) == "12.00"
        assert format_count(1500) == "1.50 K"
        assert format_count(None) == "N/A"

    def test_format_number(self):
        """Test dispatch on metric."""
        assert format_number(1500, "time") == "1.50 us"
        assert format_number(1500, "memory") == "1.50 KB"
        assert format_number(12.5, "alloc") == "12.50"
        assert format_number(None, "time") == "N/A"


class TestCompactFormatters:
    """Test the badge formatters."""

    def test_format_time_compact(self):
        """Test short time values."""
        assert format_time_compact(500) == "500ns"
        assert format_time_compact(12000) == "12µs"
        assert format_time_compact(2500000) == "2.5ms"
        assert format_time_compact(1500000000) == "1.5s"

    def test_format_memory_compact(self):
        """Test short memory values."""
        assert format_memory_compact(512) == "512B"
        assert format_memory_compact(129952) == "130KB"
        assert format_memory_compact(16784725) == "16.8MB"

    def test_format_timestamp(self):
        """Test run times are shown in UTC."""
        assert format_timestamp(0) == "1970-01-01 00:00:00 UTC"


class TestTooltips:
    """Test tooltip lines."""

    def test_bar_tooltip(self):
        """Test a bar tooltip lists value, range, samples and version."""
        meta = BarMetadata(value=1500, min=1000, max=2000, samples=3, version="v1.0.0", mode="buffer")

        assert bar_tooltip_lines(meta, "time") == [
            "Value: 1.50 us",
            "Min: 1.00 us",
            "Max: 2.00 us",
            "Samples: 3",
            "Version: v1.0.0",
        ]

    def test_point_tooltip(self):
        """Test exact and aggregated points are told apart."""
        point = DailyPoint(x=0, y=1500, version="v1.0.0", samples=2, min=1000, max=2000,
                           is_dev=True, is_raw=True)
        lines = point_tooltip_lines("FastSSZ v1 v1.0.0", point, "time")

        assert lines[0] == "FastSSZ v1 v1.0.0 (dev)"
        assert lines[1] == "Value: 1.50 us (exact)"

        filler = point.model_copy(update={"is_raw": False, "is_dev": False})
        lines = point_tooltip_lines("FastSSZ v1 v1.0.0", filler, "time")
        assert lines[0] == "FastSSZ v1 v1.0.0"
        assert lines[1] == "Value: 1.50 us (aggregated)"
