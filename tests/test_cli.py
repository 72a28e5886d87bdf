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
Tests for the sszbench command line
"""

import json

import pytest

from sszbench.cli import _async_main, _build_parser


class TestParser:
    """Test argument parsing."""

    def test_table_default_output(self):
        """Test the table image path defaults."""
        args = _build_parser().parse_args(["table"])
        assert args.output == "benchmark-table.svg"
        assert args.results == "results"

    def test_dashboard_defaults(self):
        """Test dashboard flags mirror the initial view state."""
        args = _build_parser().parse_args(["dashboard"])

        assert args.preset == "Mainnet"
        assert args.payload_type == "Block"
        assert args.range_days == 30
        assert args.modes is None
        assert "ztyp" not in args.libraries

    def test_range_and_libraries(self):
        """Test 'all' and comma separated library lists."""
        args = _build_parser().parse_args([
            "dashboard", "--range", "all", "--libraries", "ztyp,karalabessz", "--mode", "stream",
        ])

        assert args.range_days is None
        assert args.libraries == ["ztyp", "karalabessz"]
        assert args.modes == ["stream"]

    @pytest.mark.parametrize("argv", [
        ["dashboard", "--range", "0"],
        ["dashboard", "--range", "week"],
        ["dashboard", "--libraries", "serde"],
        ["dashboard", "--preset", "Testnet"],
    ])
    def test_invalid_flags(self, argv):
        """Test bad values are usage errors."""
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(argv)
        assert exc_info.value.code == 2


class TestCommands:
    """Test commands end to end against a results directory."""

    @pytest.mark.asyncio
    async def test_no_command(self):
        """Test no command prints help and exits 2."""
        with pytest.raises(SystemExit) as exc_info:
            await _async_main([])
        assert exc_info.value.code == 2

    @pytest.mark.asyncio
    async def test_dashboard(self, results_dir, tmp_path, capsys):
        """Test the dashboard image and chart data are written."""
        out = tmp_path / "charts"

        await _async_main([
            "--results", str(results_dir), "dashboard", "--range", "all", "--mode", "buffer",
            "--mode", "stream", "-o", str(out), "--json",
        ])

        assert (out / "dashboard.png").exists()
        data = json.loads((out / "chart-data.json").read_text())
        assert "Karalabe SSZ (Str)" in data["bars"]["time-unmarshal"]["labels"]
        tooltips = json.loads((out / "tooltips.json").read_text())
        assert len(tooltips["bars"]["time-unmarshal"]) == len(data["bars"]["time-unmarshal"]["labels"])
        assert "✓" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_dashboard_no_data(self, tmp_path, capsys):
        """Test no loadable library exits 1 with an error line."""
        with pytest.raises(SystemExit) as exc_info:
            await _async_main(["--results", str(tmp_path), "dashboard", "-o", str(tmp_path / "out")])

        assert exc_info.value.code == 1
        assert "Error: " in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_details(self, results_dir, tmp_path, capsys):
        """Test the run details image and latest run table."""
        out = tmp_path / "charts"

        await _async_main(["--results", str(results_dir), "details", "--dev", "-o", str(out)])

        assert (out / "details.png").exists()
        printed = capsys.readouterr().out
        assert "FastSSZ v1" in printed
        assert "v1.2.0 (dev)" in printed

    @pytest.mark.asyncio
    async def test_table(self, results_dir, tmp_path):
        """Test the table command writes both variants."""
        output = tmp_path / "table.svg"

        await _async_main(["--results", str(results_dir), "table", str(output)])

        assert output.exists()
        assert (tmp_path / "table-light.svg").exists()

    @pytest.mark.asyncio
    async def test_streaming_no_data(self, tmp_path):
        """Test the streaming command exits 1 without data."""
        with pytest.raises(SystemExit) as exc_info:
            await _async_main(["--results", str(tmp_path), "streaming", str(tmp_path / "s.svg")])
        assert exc_info.value.code == 1
