"""
Reference hash bindings.

The trees never pick a hash themselves; these are provided for the
command line, the HTTP API and examples.
"""
from .hashing import (
    SNARK_SCALAR_FIELD,
    SUPPORTED_ALGORITHMS,
    binary,
    field_hash,
    get_hash_binding,
    to_field,
)

__all__ = [
    "SNARK_SCALAR_FIELD",
    "SUPPORTED_ALGORITHMS",
    "binary",
    "field_hash",
    "get_hash_binding",
    "to_field",
]
