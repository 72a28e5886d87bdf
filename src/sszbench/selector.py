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

"""Pick the latest version aggregate of a library."""

from typing import Iterable, Optional

from .models import VersionAggregate
from .semver import compare_versions


def select_latest(
    aggregates: Iterable[VersionAggregate],
    include_dev: bool = False,
    prefer_real_semver: bool = False,
) -> Optional[VersionAggregate]:
    """
    Return the newest aggregate, or None if nothing qualifies.

    Args:
        aggregates: Version aggregates of one library (not modified)
        include_dev: Consider aggregates flagged dev=True
        prefer_real_semver: Rank with the strict comparator used by the
            static badges instead of the lenient dashboard one

    A candidate must compare strictly greater than the current pick, so on
    ties the first one wins and versions that do not parse are never
    picked.
    """
    latest = None
    for agg in aggregates:
        if agg.dev and not include_dev:
            continue
        current = latest.version if latest is not None else None
        if compare_versions(agg.version, current, prefer_real_semver) > 0:
            latest = agg
    return latest
