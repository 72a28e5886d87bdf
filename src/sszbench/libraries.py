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
Library registry and benchmark naming conventions.

Every SSZ library that appears in the charts is declared here, in the
order it is displayed. Result files and operation keys are derived from
these declarations, never spelled out at call sites:

    aggregation file:  <name>-aggregation.json
    raw samples file:  <name>.json
    operation key:     <operation><preset><payload type>, e.g. UnmarshalMainnetBlock
"""

from typing import Dict, NamedTuple, Optional, Tuple

RGB = Tuple[int, int, int]


class Library(NamedTuple):
    name: str
    display_name: str
    short_name: str
    base_color: RGB
    svg_color: RGB


class PayloadMetadata(NamedTuple):
    fork: str
    size: Optional[int]


LIBRARIES: Tuple[Library, ...] = (
    Library("fastssz-v1", "FastSSZ v1", "Fast v1", (37, 99, 235), (96, 165, 250)),
    Library("fastssz-v2", "FastSSZ v2", "Fast v2", (59, 130, 246), (147, 197, 253)),
    Library("dynamicssz-codegen", "DynamicSSZ Codegen", "Dyn Code", (34, 197, 94), (74, 222, 128)),
    Library("dynamicssz-reflection", "DynamicSSZ Reflection", "Dyn Refl", (74, 222, 128), (134, 239, 172)),
    Library("karalabessz", "Karalabe SSZ", "Karalabe", (249, 115, 22), (251, 146, 60)),
    Library("ztyp", "ZTYP", "ZTYP", (168, 85, 247), (192, 132, 252)),
)

STREAMING_LIBRARIES = frozenset({"dynamicssz-codegen", "dynamicssz-reflection", "karalabessz"})

OPERATIONS = ("Unmarshal", "Marshal", "HashTreeRoot")

# HashTreeRoot has no reader/writer variant
STREAM_OPERATION_MAP: Dict[str, Optional[str]] = {
    "Unmarshal": "UnmarshalReader",
    "Marshal": "MarshalWriter",
    "HashTreeRoot": None,
}

PRESETS = ("Mainnet", "Minimal")
TYPES = ("Block", "State")

METRICS = ("time", "memory", "alloc")
MODES = ("buffer", "stream")

# metric -> MetricResult field
METRIC_FIELDS = {
    "time": "ns_op",
    "memory": "bytes",
    "alloc": "alloc",
}

# metric -> index into a raw [ns_per_op, bytes_alloc, num_allocs] triple
RAW_METRIC_INDEX = {
    "time": 0,
    "memory": 1,
    "alloc": 2,
}

PAYLOAD_TYPES = {
    "Block": {
        "fork": "Deneb",
        "presets": {"Mainnet": 129952, "Minimal": 130124},
    },
    "State": {
        "fork": "Deneb",
        "presets": {"Mainnet": 16784725, "Minimal": 13913173},
    },
}


def get_library(name: str) -> Optional[Library]:
    """Look up a declared library by name."""
    for lib in LIBRARIES:
        if lib.name == name:
            return lib
    return None


def supports_streaming(name: str) -> bool:
    return name in STREAMING_LIBRARIES


def library_files(lib: Library) -> Tuple[str, str]:
    """Return (aggregation_file, raw_file) for a library."""
    return f"{lib.name}-aggregation.json", f"{lib.name}.json"


def operation_key(operation: str, preset: str, payload_type: str) -> str:
    """Build the results key for one operation/preset/payload combination."""
    if preset not in PRESETS:
        raise ValueError(f"Unknown preset: {preset}")
    if payload_type not in TYPES:
        raise ValueError(f"Unknown payload type: {payload_type}")
    return f"{operation}{preset}{payload_type}"


def stream_operation_key(operation: str, preset: str, payload_type: str) -> Optional[str]:
    """Key of the reader/writer variant of an operation, or None if it has none."""
    stream_op = STREAM_OPERATION_MAP.get(operation)
    if stream_op is None:
        return None
    return operation_key(stream_op, preset, payload_type)


def payload_metadata(payload_type: str, preset: str) -> Optional[PayloadMetadata]:
    """Fork name and encoded payload size for a payload type under a preset."""
    entry = PAYLOAD_TYPES.get(payload_type)
    if entry is None:
        return None
    return PayloadMetadata(entry["fork"], entry["presets"].get(preset))
