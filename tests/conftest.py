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
Pytest configuration for sszbench tests
"""

import json
import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from sszbench.models import LibraryResults, parse_aggregations, parse_raw_benchmarks  # noqa: E402

DAY = 86400


def _result(ns, mem, alloc, samples=5):
    return {
        "ns_op": [ns, ns - 100, ns + 100],
        "bytes": [mem, mem - 10, mem + 10],
        "alloc": [alloc, alloc, alloc],
        "samples": samples,
    }


AGGREGATIONS = {
    "fastssz-v1": {"aggregations": [
        {"version": "v1.0.0", "dev": False, "first": 100 * DAY, "last": 102 * DAY, "results": {
            "UnmarshalMainnetBlock": _result(5000, 1000, 10),
            "MarshalMainnetBlock": _result(3000, 800, 5),
            "HashTreeRootMainnetBlock": _result(9000, 0, 0),
        }},
        {"version": "v1.1.0", "dev": False, "first": 103 * DAY, "last": 105 * DAY, "results": {
            "UnmarshalMainnetBlock": _result(4000, 900, 8, samples=9),
            "MarshalMainnetBlock": _result(2500, 700, 4),
            "HashTreeRootMainnetBlock": _result(8000, 0, 0),
            "UnmarshalMainnetState": _result(9000000, 5000000, 1000),
        }},
        {"version": "v1.2.0", "dev": True, "first": 104 * DAY, "last": 105 * DAY, "results": {
            "UnmarshalMainnetBlock": _result(3500, 900, 8),
        }},
    ]},
    "dynamicssz-codegen": {"aggregations": [
        {"version": "v0.0.0-20250301000000-aaaaaaaaaaaa", "dev": False, "first": 102 * DAY, "last": 104 * DAY,
         "results": {
             "UnmarshalMainnetBlock": _result(3000, 1100, 9),
             "UnmarshalReaderMainnetBlock": _result(5000, 500, 15),
         }},
        {"version": "v1.0.0", "dev": False, "first": 100 * DAY, "last": 101 * DAY, "results": {
            "UnmarshalMainnetBlock": _result(3200, 1100, 9),
            "UnmarshalReaderMainnetBlock": _result(5500, 500, 15),
            "MarshalWriterMainnetBlock": _result(2900, 350, 7),
        }},
    ]},
    "karalabessz": {"aggregations": [
        {"version": "v0.3.0", "dev": None, "first": 101 * DAY, "last": 105 * DAY, "results": {
            "UnmarshalMainnetBlock": _result(6500, 1200, 12),
            "MarshalMainnetBlock": _result(2000, 600, 3),
            "HashTreeRootMainnetBlock": _result(7000, 0, 0),
            "UnmarshalReaderMainnetBlock": _result(9000, 400, 20),
            "MarshalWriterMainnetBlock": _result(2600, 300, 6),
        }},
    ]},
}

RAW_BENCHMARKS = {
    "fastssz-v1": {"benchmarks": [
        {"time": 103 * DAY + 200, "version": "v1.1.0", "dev": False,
         "results": {"UnmarshalMainnetBlock": [4300, 970, 8]}},
        {"time": 103 * DAY + 100, "version": "v1.1.0", "dev": False,
         "results": {"UnmarshalMainnetBlock": [4100, 950, 8]}},
        {"time": 104 * DAY + 50, "version": "v1.2.0", "dev": True,
         "results": {"UnmarshalMainnetBlock": [3400, 900, 8]}},
        {"time": 101 * DAY, "version": "v1.0.0", "dev": False,
         "results": {"UnmarshalMainnetBlock": [5000, 1000, 10], "MarshalMainnetBlock": [3000, 800, 5]}},
    ]},
}


@pytest.fixture
def aggregation_documents():
    """Aggregation documents keyed by library name."""
    return json.loads(json.dumps(AGGREGATIONS))


@pytest.fixture
def raw_documents():
    """Raw sample documents keyed by library name."""
    return json.loads(json.dumps(RAW_BENCHMARKS))


@pytest.fixture
def results_dir(tmp_path, aggregation_documents, raw_documents):
    """
    A results directory on disk.

    fastssz-v1 has raw samples, karalabessz has no raw file and
    dynamicssz-codegen has a raw file that is not JSON.
    """
    directory = tmp_path / "results"
    directory.mkdir()
    for name, document in aggregation_documents.items():
        (directory / f"{name}-aggregation.json").write_text(json.dumps(document))
    for name, document in raw_documents.items():
        (directory / f"{name}.json").write_text(json.dumps(document))
    (directory / "dynamicssz-codegen.json").write_text("{not json")
    return directory


@pytest.fixture
def store(aggregation_documents, raw_documents):
    """An in-memory store equivalent to loading results_dir."""
    return {
        name: LibraryResults(
            aggregations=parse_aggregations(document, name),
            raw_benchmarks=parse_raw_benchmarks(raw_documents.get(name, {}), name),
        )
        for name, document in aggregation_documents.items()
    }
