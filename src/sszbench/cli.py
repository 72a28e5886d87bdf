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
Command line entry point.

    sszbench dashboard [--preset P] [--type T] [--libraries a,b] [--mode M] ...
    sszbench details [--library L] [--operation OP] [--metric M] [--dev]
    sszbench table [OUTPUT]
    sszbench streaming [OUTPUT]

Exit codes: 0 success, 1 no data or failure, 2 usage.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .badges import DEFAULT_STREAMING_OUTPUT, DEFAULT_TABLE_OUTPUT, generate_streaming, generate_table
from .details import latest_runs, project_runs
from .errors import BenchmarkDataError, NoDataLoaded
from .formatting import format_bytes, format_count, format_time, format_timestamp
from .libraries import LIBRARIES, METRICS, MODES, OPERATIONS, PRESETS, TYPES, get_library
from .projection import DEFAULT_LIBRARIES, ViewState, project
from .render import render_dashboard, render_runs, write_chart_json, write_tooltips
from .store import DEFAULT_SOURCE, load

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "charts"


def _range_days(value: str) -> Optional[int]:
    if value == "all":
        return None
    try:
        days = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number of days or 'all', got {value!r}")
    if days <= 0:
        raise argparse.ArgumentTypeError("range must be a positive number of days")
    return days


def _library_list(value: str) -> List[str]:
    names = [name.strip() for name in value.split(",") if name.strip()]
    unknown = [name for name in names if get_library(name) is None]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown libraries: {', '.join(unknown)}")
    return names


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sszbench",
        description="SSZ benchmark charts - dashboards, run details and README images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sszbench dashboard                              Latest Mainnet Block results
  sszbench dashboard --type State --mode stream   Streaming State results
  sszbench dashboard --range all --dev            Whole history incl. dev builds
  sszbench details --library karalabessz          Every run of one library
  sszbench table docs/benchmark-table.svg         README table (dark + light)
  sszbench streaming                              README streaming charts
""",
    )

    parser.add_argument("-r", "--results", metavar="SOURCE", default=DEFAULT_SOURCE,
                        help=f"Results directory or http(s) base URL (default: {DEFAULT_SOURCE})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    dashboard_parser = subparsers.add_parser("dashboard", help="Render the dashboard charts")
    dashboard_parser.add_argument("--preset", choices=PRESETS, default="Mainnet")
    dashboard_parser.add_argument("--type", choices=TYPES, default="Block", dest="payload_type")
    dashboard_parser.add_argument("--libraries", type=_library_list, metavar="A,B",
                                  default=list(DEFAULT_LIBRARIES),
                                  help="Comma separated libraries (default: all but ztyp)")
    dashboard_parser.add_argument("--mode", action="append", choices=MODES, dest="modes",
                                  help="buffer and/or stream (repeatable, default: buffer)")
    dashboard_parser.add_argument("--operation", choices=OPERATIONS, default="Unmarshal",
                                  help="Timeline operation")
    dashboard_parser.add_argument("--metric", choices=METRICS, default="time",
                                  help="Timeline metric")
    dashboard_parser.add_argument("--range", type=_range_days, default=30, dest="range_days",
                                  metavar="DAYS", help="Timeline range in days or 'all' (default: 30)")
    dashboard_parser.add_argument("--dev", action="store_true",
                                  help="Include dev versions in the timeline")
    dashboard_parser.add_argument("-o", "--output", metavar="DIR", default=DEFAULT_OUTPUT_DIR,
                                  help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})")
    dashboard_parser.add_argument("--json", action="store_true",
                                  help="Also write the chart data and tooltip text as JSON")

    details_parser = subparsers.add_parser("details", help="Render every raw run")
    details_parser.add_argument("--library", default="all",
                                choices=["all"] + [lib.name for lib in LIBRARIES])
    details_parser.add_argument("--operation", default="all", metavar="OP",
                                help="Operation key, e.g. UnmarshalMainnetBlock (default: all)")
    details_parser.add_argument("--metric", choices=METRICS, default="time")
    details_parser.add_argument("--dev", action="store_true",
                                help="Include dev runs")
    details_parser.add_argument("-o", "--output", metavar="DIR", default=DEFAULT_OUTPUT_DIR,
                                help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})")
    details_parser.add_argument("--json", action="store_true",
                                help="Also write the run series as JSON")

    table_parser = subparsers.add_parser("table", help="Write the README results table")
    table_parser.add_argument("output", nargs="?", default=DEFAULT_TABLE_OUTPUT,
                              help=f"SVG path (default: {DEFAULT_TABLE_OUTPUT})")

    streaming_parser = subparsers.add_parser("streaming", help="Write the README streaming charts")
    streaming_parser.add_argument("output", nargs="?", default=DEFAULT_STREAMING_OUTPUT,
                                  help=f"SVG path (default: {DEFAULT_STREAMING_OUTPUT})")

    return parser


async def _handle_dashboard_command(args):
    """Handle dashboard command."""
    store = await load(source=args.results)
    state = ViewState(
        preset=args.preset,
        payload_type=args.payload_type,
        libraries=tuple(args.libraries),
        modes=frozenset(args.modes or ["buffer"]),
        timeline_operation=args.operation,
        timeline_metric=args.metric,
        timeline_range_days=args.range_days,
        show_dev=args.dev,
    )
    data = project(state, store)

    output = Path(args.output)
    title = f"SSZ Benchmarks - {args.preset} {args.payload_type}"
    path = render_dashboard(data, output / "dashboard.png", title, timeline_metric=args.metric)
    print(f"✓ {path}")

    if args.json:
        path = write_chart_json(data, output / "chart-data.json")
        print(f"✓ {path}")
        path = write_tooltips(data, output / "tooltips.json", timeline_metric=args.metric)
        print(f"✓ {path}")


async def _handle_details_command(args):
    """Handle details command."""
    store = await load(source=args.results)
    datasets = project_runs(store, args.library, args.operation, args.metric, args.dev)

    output = Path(args.output)
    path = render_runs(datasets, args.metric, output / "details.png")
    print(f"✓ {path}")

    if args.json:
        path = write_chart_json(datasets, output / "details.json")
        print(f"✓ {path}")

    rows = latest_runs(store, args.library, args.operation, args.dev)
    if rows:
        print(f"\n{'LIBRARY':<24} {'VERSION':<32} {'OPERATION':<32} {'TIME':>12} {'MEMORY':>12} {'ALLOCS':>10}  RUN")
    for row in rows:
        version = f"{row.version} (dev)" if row.dev else row.version
        print(f"{row.library:<24} {version:<32} {row.operation:<32} "
              f"{format_time(row.ns_op):>12} {format_bytes(row.bytes):>12} "
              f"{format_count(row.alloc):>10}  {format_timestamp(row.time)}")


async def _async_main(argv: Optional[List[str]] = None):
    """Async main entry point for CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "dashboard":
            await _handle_dashboard_command(args)
        elif args.command == "details":
            await _handle_details_command(args)
        elif args.command == "table":
            code = generate_table(args.results, args.output)
            if code:
                sys.exit(code)
        elif args.command == "streaming":
            code = generate_streaming(args.results, args.output)
            if code:
                sys.exit(code)
        else:
            parser.print_help()
            sys.exit(2)
    except NoDataLoaded as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except BenchmarkDataError as e:
        print(f"Error: Invalid benchmark data - {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main():
    """Main entry point for CLI - wraps async main."""
    asyncio.run(_async_main())


if __name__ == "__main__":
    cli_main()
