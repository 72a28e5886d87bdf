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

"""Exceptions raised while loading benchmark results."""


class BenchmarkDataError(Exception):
    """Base class for result loading failures."""
    pass


class ResourceMissing(BenchmarkDataError):
    """Raised when a result file or URL does not exist or cannot be fetched."""

    def __init__(self, resource: str, reason: str = "not found"):
        super().__init__(f"{resource}: {reason}")
        self.resource = resource
        self.reason = reason


class ResourceMalformed(BenchmarkDataError):
    """Raised when a result resource is not valid JSON or has the wrong shape."""

    def __init__(self, resource: str, reason: str = "invalid JSON"):
        super().__init__(f"{resource}: {reason}")
        self.resource = resource
        self.reason = reason


class NoDataLoaded(BenchmarkDataError):
    """Raised when no library produced usable benchmark data."""
    pass
