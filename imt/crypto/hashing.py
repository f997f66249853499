"""
Module 03 - Reference Hash Bindings
Field-element hash bindings for the CLI, the API and examples.

The trees accept any deterministic hash; these bindings reduce a standard
digest into the BN254 scalar field so that node values look like the field
elements a circuit would use. They are not circuit-friendly hashes such as
Poseidon.

Rules:
1. Each child is reduced mod SNARK_SCALAR_FIELD and written as 32 bytes
   big-endian
2. node = int(digest(concatenation)) mod SNARK_SCALAR_FIELD
"""
from __future__ import annotations

import hashlib
from typing import Any, Callable, Sequence

from imt.schemas.errors import ParameterError


# Order of the BN254 scalar field
SNARK_SCALAR_FIELD: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha256", "sha3_256", "blake2s")

HashBinding = Callable[[list[Any]], int]
PairHashBinding = Callable[[Any, Any], int]


def to_field(value: Any) -> int:
    """
    Interpret a node value as a field element.

    Accepts ints, decimal text and ``0x``-prefixed hex text.

    Raises:
        ParameterError: If the value cannot be read as a number
    """
    if isinstance(value, bool):
        raise ParameterError("Boolean is not a field element", parameter="value")
    if isinstance(value, int):
        return value % SNARK_SCALAR_FIELD
    if isinstance(value, str):
        try:
            number = int(value, 16) if value.lower().startswith("0x") else int(value, 10)
        except ValueError as e:
            raise ParameterError(
                f"Cannot read {value!r} as a field element",
                parameter="value",
            ) from e
        return number % SNARK_SCALAR_FIELD
    raise ParameterError(
        f"Cannot read {type(value).__name__} as a field element",
        parameter="value",
    )


def field_hash(children: Sequence[Any], algorithm: str = "sha256") -> int:
    """
    Hash a sequence of node values into one field element.

    Example:
        >>> field_hash([1, 2]) == field_hash(["1", "0x02"])
        True
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ParameterError(
            f"Unsupported hash algorithm: {algorithm!r}",
            parameter="algorithm",
            details={"supported": list(SUPPORTED_ALGORITHMS)},
        )
    digest = hashlib.new(algorithm)
    for child in children:
        digest.update(to_field(child).to_bytes(32, "big"))
    return int.from_bytes(digest.digest(), "big") % SNARK_SCALAR_FIELD


def get_hash_binding(name: str) -> HashBinding:
    """Return the n-ary binding for ``name`` (suitable for IMT)."""
    if name not in SUPPORTED_ALGORITHMS:
        raise ParameterError(
            f"Unknown hash binding: {name!r}",
            parameter="hash",
            details={"supported": list(SUPPORTED_ALGORITHMS)},
        )

    def binding(children: list[Any]) -> int:
        return field_hash(children, name)

    binding.__name__ = f"{name}_field_hash"
    return binding


def binary(binding: HashBinding) -> PairHashBinding:
    """Adapt an n-ary binding to the two-argument form LeanIMT expects."""

    def pair(left: Any, right: Any) -> int:
        return binding([left, right])

    pair.__name__ = f"{getattr(binding, '__name__', 'hash')}_pair"
    return pair


__all__ = [
    "SNARK_SCALAR_FIELD",
    "SUPPORTED_ALGORITHMS",
    "to_field",
    "field_hash",
    "get_hash_binding",
    "binary",
]
