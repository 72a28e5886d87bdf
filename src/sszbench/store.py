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
Result store: loads per-library benchmark JSON into memory.

Library Usage:
    import asyncio
    from sszbench.store import load

    store = asyncio.run(load(source="results"))
    store = asyncio.run(load(source="https://example.org/ssz-benchmarks/results"))

Sources:
    - A directory holding <library>-aggregation.json and <library>.json
    - An http(s) base URL serving the same file names

Failure policy (per library, never blocking other libraries):
    - aggregation file missing or malformed -> library left out (warning)
    - raw samples file missing or malformed -> library kept, no raw samples (warning)
    - no library loaded at all              -> NoDataLoaded
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import aiohttp

from .errors import BenchmarkDataError, NoDataLoaded, ResourceMalformed, ResourceMissing
from .libraries import LIBRARIES, Library, library_files
from .models import LibraryResults, VersionAggregate, parse_aggregations, parse_raw_benchmarks

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "results"

Store = Dict[str, LibraryResults]


def _is_url(source: Union[str, Path]) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def _decode_json(text: str, resource: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        raise ResourceMalformed(resource, f"invalid JSON - {e}") from e


async def _fetch_url(session: aiohttp.ClientSession, url: str) -> Any:
    try:
        async with session.get(url) as resp:
            resp.raise_for_status()
            text = await resp.text()
    except aiohttp.ClientResponseError as e:
        raise ResourceMissing(url, f"HTTP {e.status}") from e
    except aiohttp.ClientError as e:
        raise ResourceMissing(url, f"network error - {e}") from e
    except asyncio.TimeoutError as e:
        raise ResourceMissing(url, "timed out") from e
    except UnicodeDecodeError as e:
        raise ResourceMalformed(url, f"body is not valid text - {e}") from e

    return _decode_json(text, url)


def _read_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ResourceMissing(str(path)) from e
    except UnicodeDecodeError as e:
        raise ResourceMalformed(str(path), f"not UTF-8 - {e}") from e
    except OSError as e:
        raise ResourceMissing(str(path), str(e)) from e

    return _decode_json(text, str(path))


async def _fetch_json(
    source: Union[str, Path],
    filename: str,
    session: Optional[aiohttp.ClientSession] = None,
) -> Tuple[str, Any]:
    """
    Fetch and decode one result resource.

    Returns:
        (resource name, decoded JSON)

    Raises:
        ResourceMissing: File/URL does not exist or cannot be reached
        ResourceMalformed: Body is not valid JSON
    """
    if _is_url(source):
        url = f"{str(source).rstrip('/')}/{filename}"
        if session is None:
            async with aiohttp.ClientSession() as own_session:
                return url, await _fetch_url(own_session, url)
        return url, await _fetch_url(session, url)

    path = Path(source) / filename
    return str(path), _read_file(path)


async def _load_library(
    lib: Library,
    source: Union[str, Path],
    session: Optional[aiohttp.ClientSession],
) -> Tuple[str, Optional[LibraryResults]]:
    aggregation_file, raw_file = library_files(lib)

    try:
        resource, document = await _fetch_json(source, aggregation_file, session)
        aggregations = parse_aggregations(document, resource)
    except BenchmarkDataError as e:
        logger.warning("Failed to load %s: %s", aggregation_file, e)
        return lib.name, None

    try:
        resource, document = await _fetch_json(source, raw_file, session)
        raw_benchmarks = parse_raw_benchmarks(document, resource)
    except BenchmarkDataError as e:
        logger.warning("Failed to load raw file %s: %s", raw_file, e)
        raw_benchmarks = []

    logger.debug(
        "Loaded %s: %d versions, %d raw benchmarks",
        lib.name, len(aggregations), len(raw_benchmarks),
    )
    return lib.name, LibraryResults(aggregations=aggregations, raw_benchmarks=raw_benchmarks)


async def load(
    libraries: Iterable[Library] = LIBRARIES,
    source: Union[str, Path] = DEFAULT_SOURCE,
) -> Store:
    """
    Load aggregations and raw samples for every library concurrently.

    Args:
        libraries: Libraries to load (defaults to the full registry)
        source: Results directory or http(s) base URL

    Returns:
        Mapping of library name -> LibraryResults, only for libraries whose
        aggregation file loaded

    Raises:
        NoDataLoaded: Not a single library could be loaded
    """
    libraries = list(libraries)

    if _is_url(source):
        async with aiohttp.ClientSession() as session:
            loaded = await asyncio.gather(*(_load_library(lib, source, session) for lib in libraries))
    else:
        loaded = await asyncio.gather(*(_load_library(lib, source, None) for lib in libraries))

    store = {name: results for name, results in loaded if results is not None}
    if not store:
        raise NoDataLoaded(f"No benchmark data could be loaded from {source}")
    return store


def load_aggregations(
    results_dir: Union[str, Path] = DEFAULT_SOURCE,
    libraries: Iterable[Library] = LIBRARIES,
) -> Dict[str, List[VersionAggregate]]:
    """
    Read aggregation files only, synchronously, from a results directory.

    Missing or malformed files are logged and skipped; callers decide what
    an empty result means.
    """
    aggregations = {}
    for lib in libraries:
        aggregation_file, _ = library_files(lib)
        path = Path(results_dir) / aggregation_file
        try:
            aggregations[lib.name] = parse_aggregations(_read_file(path), str(path))
        except BenchmarkDataError as e:
            logger.warning("Failed to load %s: %s", aggregation_file, e)
    return aggregations


def all_operations(store: Store) -> List[str]:
    """Sorted list of every operation key present in raw samples."""
    operations = set()
    for results in store.values():
        for benchmark in results.raw_benchmarks:
            operations.update(benchmark.results.keys())
    return sorted(operations)
