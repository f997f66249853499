"""
Module 01 - Schemas & Errors

Public API for the error taxonomy and the canonical node codec.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    decode_matrix,
    decode_node,
    dumps_canonical,
    encode_matrix,
    encode_node,
    loads_canonical,
)
from .errors import (
    CapacityError,
    DecodeError,
    ErrorCodes,
    IMTError,
    IMTException,
    ParameterError,
    RangeError,
    StateError,
    StructuralError,
)

__all__ = [
    # Canonical codec
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "decode_matrix",
    "decode_node",
    "dumps_canonical",
    "encode_matrix",
    "encode_node",
    "loads_canonical",
    # Errors
    "ErrorCodes",
    "IMTError",
    "IMTException",
    "ParameterError",
    "CapacityError",
    "RangeError",
    "StateError",
    "StructuralError",
    "DecodeError",
]
