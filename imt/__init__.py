"""
Incremental Merkle trees for zero-knowledge membership proofs.

Usage:
    from imt import IMT, LeanIMT

    tree = IMT(hash_children, depth=20, zero_value=0, arity=2)
    tree.insert(42)
    proof = tree.create_proof(0)
    assert tree.verify_proof(proof)
"""

__version__ = "0.1.0"

from imt.merkle import (
    IMT,
    IMTMerkleProof,
    LeanIMT,
    LeanIMTMerkleProof,
    verify_imt_proof,
    verify_lean_imt_proof,
)
from imt.schemas.errors import (
    CapacityError,
    DecodeError,
    IMTException,
    ParameterError,
    RangeError,
    StateError,
    StructuralError,
)

__all__ = [
    "IMT",
    "IMTMerkleProof",
    "LeanIMT",
    "LeanIMTMerkleProof",
    "verify_imt_proof",
    "verify_lean_imt_proof",
    "IMTException",
    "ParameterError",
    "CapacityError",
    "RangeError",
    "StateError",
    "StructuralError",
    "DecodeError",
]
