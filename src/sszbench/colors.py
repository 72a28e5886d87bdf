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

"""Colour shades shared by the chart projections."""

import math
import re
from typing import Tuple

from .libraries import RGB

# added to each channel of stream series drawn next to buffer series
STREAM_BRIGHTEN = 40
# dev runs in the details view keep 60% of the base colour
DEV_COLOR_FACTOR = 0.6

RGBA_RE = re.compile(r"^rgba?\(\s*(\d+),\s*(\d+),\s*(\d+)(?:,\s*([\d.]+))?\s*\)$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rgba(color: RGB, alpha: float) -> str:
    return f"rgba({color[0]}, {color[1]}, {color[2]}, {alpha})"


def parse_rgba(value: str) -> Tuple[float, float, float, float]:
    """'rgba(r, g, b, a)' -> matplotlib (r, g, b, a) tuple in 0..1."""
    match = RGBA_RE.match(value.strip())
    if not match:
        raise ValueError(f"Not an rgba() colour: {value}")
    r, g, b = (int(match.group(i)) / 255 for i in (1, 2, 3))
    alpha = float(match.group(4)) if match.group(4) is not None else 1.0
    return r, g, b, alpha


def lighten(color: RGB, amount: float) -> RGB:
    """Move each channel `amount` (0..1) of the way towards white."""
    return tuple(_round_half_up(c + (255 - c) * amount) for c in color)


def version_color(base: RGB, index: int, total: int) -> RGB:
    """Index 0 keeps the base colour; each later position moves further towards white, never past half way."""
    factor = 1 - (index / (total + 1)) * 0.5
    return lighten(base, 1 - factor)


def stream_color(color: RGB) -> RGB:
    return tuple(min(255, c + STREAM_BRIGHTEN) for c in color)


def dev_color(base: RGB) -> RGB:
    return lighten(base, 1 - DEV_COLOR_FACTOR)
