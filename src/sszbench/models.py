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
Schemas for benchmark result files.

Aggregation file (<library>-aggregation.json):
    {"aggregations": [
        {"version": "v1.0.0", "dev": false, "first": 1732000000, "last": 1732600000,
         "results": {"UnmarshalMainnetBlock": {
             "ns_op": [value, min, max], "bytes": [value, min, max],
             "alloc": [value, min, max], "samples": 12}}}]}

Raw samples file (<library>.json):
    {"benchmarks": [
        {"time": 1732000000, "version": "v1.0.0", "dev": false,
         "results": {"UnmarshalMainnetBlock": [ns_per_op, bytes_alloc, num_allocs]}}]}

Records are validated once, here. Anything that fails validation is dropped
before it can reach the selector, the timeline or the projections.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ResourceMalformed
from .libraries import METRIC_FIELDS

logger = logging.getLogger(__name__)

Triple = Tuple[float, float, float]


class MetricResult(BaseModel):
    """Precomputed value/min/max summaries for one operation of one version."""

    model_config = ConfigDict(frozen=True)

    ns_op: Triple
    bytes: Triple
    alloc: Triple
    samples: int = 0

    def triple(self, metric: str) -> Triple:
        """Return (value, min, max) for 'time', 'memory' or 'alloc'."""
        return getattr(self, METRIC_FIELDS[metric])


class VersionAggregate(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    dev: bool = False
    first: Optional[int] = None
    last: Optional[int] = None
    results: Dict[str, MetricResult] = Field(default_factory=dict)

    @field_validator("dev", mode="before")
    @classmethod
    def _null_dev_is_stable(cls, value: Any) -> Any:
        return False if value is None else value


class RawBenchmark(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: int
    version: str
    dev: bool = False
    results: Dict[str, Triple] = Field(default_factory=dict)

    @field_validator("dev", mode="before")
    @classmethod
    def _null_dev_is_stable(cls, value: Any) -> Any:
        return False if value is None else value


class LibraryResults(BaseModel):
    """Everything loaded for one library."""

    model_config = ConfigDict(frozen=True)

    aggregations: List[VersionAggregate]
    raw_benchmarks: List[RawBenchmark] = Field(default_factory=list)


class DailyPoint(BaseModel):
    """One timeline point; serialises with camelCase keys (isDev, isRaw)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    x: int
    y: float
    version: str
    samples: int
    min: float
    max: float
    is_dev: bool
    is_raw: bool


def _records(document: Any, field: str, resource: str, required: bool) -> List[Any]:
    if not isinstance(document, dict):
        raise ResourceMalformed(resource, "top-level JSON value is not an object")
    records = document.get(field)
    if records is None:
        if required:
            raise ResourceMalformed(resource, f"missing '{field}' list")
        return []
    if not isinstance(records, list):
        raise ResourceMalformed(resource, f"'{field}' is not a list")
    return records


def parse_aggregations(document: Any, resource: str) -> List[VersionAggregate]:
    """Validate an aggregation document, dropping records that do not fit the schema."""
    aggregations = []
    for index, record in enumerate(_records(document, "aggregations", resource, required=True)):
        try:
            aggregations.append(VersionAggregate.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping aggregation #%d in %s: %s", index, resource, e.errors()[0]["msg"])
    return aggregations


def parse_raw_benchmarks(document: Any, resource: str) -> List[RawBenchmark]:
    """Validate a raw samples document; a missing 'benchmarks' list means no samples."""
    benchmarks = []
    for index, record in enumerate(_records(document, "benchmarks", resource, required=False)):
        try:
            benchmarks.append(RawBenchmark.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping benchmark #%d in %s: %s", index, resource, e.errors()[0]["msg"])
    return benchmarks
