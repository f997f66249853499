"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of node values, proofs and node
matrices.

Node values are arbitrary-precision integers or strings. On the wire every
integer node is written as decimal text so that no JSON consumer can lose
precision; decoding turns decimal text back into ``int``.
"""

import json
import re
from typing import Any, Callable

from pydantic import BaseModel

from .errors import DecodeError

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

_DECIMAL_RE = re.compile(r"-?[0-9]+")


def encode_node(value: Any) -> Any:
    """
    Encode a node value for the wire.

    Integers become decimal text; everything else is returned unchanged.

    Example:
        >>> encode_node(2**255)
        '57896044618658097711785492504343953926634992332820282019728792003956564819968'
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def decode_node(value: Any) -> Any:
    """
    Decode a wire value back into a node value.

    Decimal text (optionally signed) becomes ``int``; any other value is
    returned unchanged. A string node that happens to be decimal text
    therefore decodes as ``int``; use ``str`` as the mapper to keep it.
    """
    if isinstance(value, str) and _DECIMAL_RE.fullmatch(value):
        return int(value)
    return value


def encode_matrix(nodes: list[list[Any]]) -> list[list[Any]]:
    """Encode every value of a level-major node matrix."""
    return [[encode_node(node) for node in level] for level in nodes]


def decode_matrix(
    data: Any,
    map_node: Callable[[Any], Any] = decode_node,
) -> list[list[Any]]:
    """
    Decode a level-major node matrix.

    Args:
        data: Parsed JSON; must be a list of lists.
        map_node: Applied to every value.

    Raises:
        DecodeError: If ``data`` is not a list of lists.
    """
    if not isinstance(data, list) or not all(isinstance(level, list) for level in data):
        raise DecodeError(
            message="Node matrix must be a JSON array of arrays",
            details={"type": type(data).__name__},
        )
    return [[map_node(node) for node in level] for level in data]


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Node values are not rewritten here; callers encode them first with
    ``encode_node`` or ``encode_matrix``.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(by_alias=True, exclude_none=True)
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        return {
            k: canonicalize_value(v, f"{path}.{k}" if path else k)
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, bytes):
        return value.hex()

    raise DecodeError(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Produces sorted keys and no extra whitespace.

    Example:
        >>> dumps_canonical({"b": 2, "a": [encode_node(1), "x"]})
        '{"a":["1","x"],"b":2}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def loads_canonical(json_str: str) -> Any:
    """
    Parse a JSON string.

    Raises:
        DecodeError: If the text is not valid JSON.
    """
    try:
        return json.loads(json_str)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            message=f"Invalid JSON document: {e}",
            details={"error": str(e)},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """Check if two objects have identical canonical representations."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except DecodeError:
        return False
