"""
Module 02 - Incremental Merkle Trees
Incremental Merkle trees for zero-knowledge membership proofs.

This module provides:
- IMT: fixed depth, generic arity, zero-padded
- LeanIMT: dynamic depth, binary, copy-up instead of zero padding
- IMTMerkleProof / LeanIMTMerkleProof: immutable membership proofs
- verify_imt_proof / verify_lean_imt_proof: verification without a tree

Hash bindings are supplied by the caller:
- IMT: hash(children: list) -> node, with len(children) == arity
- LeanIMT: hash(left, right) -> node

Usage:
    from imt.merkle import LeanIMT, verify_lean_imt_proof

    tree = LeanIMT(hash_pair, leaves=[1, 2, 3])
    proof = tree.generate_proof(1)

    # Anyone holding the same hash can check the proof
    assert verify_lean_imt_proof(proof, hash_pair)
"""
from .fixed_tree import IMT, IMTHashFunction, IMTNode
from .lean_tree import LeanIMT, LeanIMTHashFunction, LeanIMTNode
from .proofs import (
    IMTMerkleProof,
    LeanIMTMerkleProof,
    coerce_imt_proof,
    coerce_lean_imt_proof,
    lean_path_index,
    verify_imt_proof,
    verify_lean_imt_proof,
)


__all__ = [
    # Trees
    "IMT",
    "IMTNode",
    "IMTHashFunction",
    "LeanIMT",
    "LeanIMTNode",
    "LeanIMTHashFunction",
    # Proofs
    "IMTMerkleProof",
    "LeanIMTMerkleProof",
    "coerce_imt_proof",
    "coerce_lean_imt_proof",
    "lean_path_index",
    "verify_imt_proof",
    "verify_lean_imt_proof",
]
