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
Version string parsing and ordering.

Accepted form: [v]MAJOR.MINOR.PATCH[-PRERELEASE]

Two orderings share one comparator, selected by `prefer_real_semver`:

    lenient (False, dashboard):
        release > prerelease of the same MAJOR.MINOR.PATCH;
        a 14-digit prerelease (YYYYMMDDHHMMSS) is a build timestamp, newer
        than any other prerelease, and timestamps compare numerically;
        other prereleases compare as strings.

    strict (True, static badges):
        Go pseudo-versions (v0.0.0-<14 digits>-<hex>) form their own class
        below every real version and are ordered by embedded timestamp;
        real versions compare by MAJOR.MINOR.PATCH, release > prerelease,
        two prereleases of the same triple are equal.

Strings that do not parse sort below everything and never raise.
"""

import re
from typing import NamedTuple, Optional

SEMVER_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:-(.+))?$")
TIMESTAMP_RE = re.compile(r"^\d{14}$")
PSEUDO_VERSION_RE = re.compile(r"^v0\.0\.0-(\d{14})-[a-f0-9]+$")
PSEUDO_DISPLAY_RE = re.compile(r"^(v\d+\.\d+\.\d+)-\d{14}-([a-f0-9]+)$")


class Semver(NamedTuple):
    major: int
    minor: int
    patch: int
    prerelease: Optional[str]
    timestamp: Optional[int]
    original: str


def parse_semver(version: Optional[str]) -> Optional[Semver]:
    """Parse a version string; returns None when it does not match."""
    if not version:
        return None
    match = SEMVER_RE.match(version)
    if not match:
        return None
    prerelease = match.group(4)
    timestamp = int(prerelease) if prerelease and TIMESTAMP_RE.match(prerelease) else None
    return Semver(
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
        prerelease=prerelease,
        timestamp=timestamp,
        original=version,
    )


def is_pseudo_version(version: Optional[str]) -> bool:
    return bool(version) and PSEUDO_VERSION_RE.match(version) is not None


def pseudo_version_timestamp(version: str) -> Optional[int]:
    match = PSEUDO_VERSION_RE.match(version)
    return int(match.group(1)) if match else None


def format_version(version: Optional[str]) -> str:
    """Shorten pseudo-versions for display: v0.0.0-<ts>-<hash> -> v0.0.0-<hash[:6]>."""
    if not version:
        return ""
    match = PSEUDO_DISPLAY_RE.match(version)
    if match:
        return f"{match.group(1)}-{match.group(2)[:6]}"
    return version


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_triples(a: Semver, b: Semver) -> int:
    for left, right in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if left != right:
            return _sign(left - right)
    # release sorts above prerelease
    if a.prerelease is None and b.prerelease is not None:
        return 1
    if a.prerelease is not None and b.prerelease is None:
        return -1
    return 0


def compare_semver(a: Optional[Semver], b: Optional[Semver]) -> int:
    """Lenient ordering of parsed versions, missing values first."""
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1

    result = _compare_triples(a, b)
    if result or a.prerelease is None:
        return result

    if a.timestamp is not None and b.timestamp is not None:
        return _sign(a.timestamp - b.timestamp)
    if a.timestamp is not None:
        return 1
    if b.timestamp is not None:
        return -1
    if a.prerelease == b.prerelease:
        return 0
    return 1 if a.prerelease > b.prerelease else -1


def _compare_strict(a: Optional[str], b: Optional[str]) -> int:
    a_ts = pseudo_version_timestamp(a) if a else None
    b_ts = pseudo_version_timestamp(b) if b else None
    a_ver = None if a_ts is not None else parse_semver(a)
    b_ver = None if b_ts is not None else parse_semver(b)

    if a_ver is not None or b_ver is not None:
        if a_ver is None:
            return -1
        if b_ver is None:
            return 1
        return _compare_triples(a_ver, b_ver)

    # neither is a real version: pseudo-versions by timestamp, unparseable last
    if a_ts is None and b_ts is None:
        return 0
    if a_ts is None:
        return -1
    if b_ts is None:
        return 1
    return _sign(a_ts - b_ts)


def compare_versions(a: Optional[str], b: Optional[str], prefer_real_semver: bool = False) -> int:
    """
    Compare two version strings, returning -1, 0 or 1.

    Args:
        a, b: Version strings; None or unparseable values sort lowest
        prefer_real_semver: Use the strict ordering where real releases
            always beat Go pseudo-versions

    Returns:
        1 if a is newer, -1 if b is newer, 0 if they rank equally
    """
    if prefer_real_semver:
        return _compare_strict(a, b)
    return compare_semver(parse_semver(a), parse_semver(b))
