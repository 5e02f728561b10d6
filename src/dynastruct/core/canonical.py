"""
Canonical JSON serialization for deterministic hashing.

Generated output is fingerprinted by hashing the RFC 8785/JCS canonical
form of the emitted function structures (rfc8785 package). Two runs on
identical input must produce the same fingerprint; the CLI prints it so
builds can be compared.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Sequence
from typing import Any

import rfc8785

from dynastruct.contracts.emitted import FunctionDef


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Tuples become lists; NaN and Infinity are rejected.

    Raises:
        ValueError: If data contains NaN or Infinity
    """
    if isinstance(data, dict):
        return {k: _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    if isinstance(data, float) and (math.isnan(data) or math.isinf(data)):
        raise ValueError(f"Cannot canonicalize non-finite float: {data}")
    return data


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for hashing.

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """Compute stable hash of object.

    Args:
        obj: Data structure to hash

    Returns:
        SHA-256 hex digest of canonical JSON
    """
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_output_hash(struct_name: str, functions: Sequence[FunctionDef]) -> str:
    """Hash the emitted functions for one struct.

    Function order is part of the hash: emission order is observable.
    """
    return stable_hash(
        {
            "struct": struct_name,
            "functions": [fn.to_dict() for fn in functions],
        }
    )
