"""
Module 02 - Merkle Proofs
Membership proof models and tree-free verification.

This module provides:
- IMTMerkleProof: proof for a leaf of a fixed-arity IMT
- LeanIMTMerkleProof: proof for a leaf of a LeanIMT
- verify_imt_proof / verify_lean_imt_proof: verification that needs only
  the hash binding used to build the tree

Wire format (to_json / from_json):
- camelCase keys, sorted, no whitespace
- integer node values as decimal text, indices as JSON numbers
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from imt.schemas.canonical import (
    decode_node,
    dumps_canonical,
    encode_node,
    loads_canonical,
)
from imt.schemas.errors import ParameterError, StructuralError
from imt.merkle.validation import require_defined, require_function


Node = Union[StrictInt, StrictStr]

NodeMapper = Callable[[Any], Any]


class _ProofModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict with node values encoded."""
        raise NotImplementedError

    def to_json(self) -> str:
        """Serialize to canonical JSON."""
        return dumps_canonical(self.to_wire())

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], map_node: NodeMapper = decode_node):
        raise NotImplementedError

    @classmethod
    def from_json(cls, text: str, map_node: NodeMapper = decode_node):
        """
        Parse a proof produced by ``to_json``.

        Raises:
            DecodeError: If the text is not JSON.
            StructuralError: If the JSON is not a proof of this kind.
        """
        data = loads_canonical(text)
        if not isinstance(data, Mapping):
            raise StructuralError(
                "Proof document must be a JSON object",
                details={"type": type(data).__name__},
            )
        return cls.from_wire(data, map_node)


class IMTMerkleProof(_ProofModel):
    """
    Membership proof for a fixed-arity IMT.

    Attributes:
        root: Tree root at the time the proof was created
        leaf: The proven leaf value
        leaf_index: Index of the leaf in the tree
        path_indices: Position of the climbing node inside its group, per level
        siblings: The other ``arity - 1`` members of each group, per level
    """

    root: Node
    leaf: Node
    leaf_index: StrictInt = Field(..., ge=0)
    path_indices: tuple[StrictInt, ...]
    siblings: tuple[tuple[Node, ...], ...]

    def to_wire(self) -> dict[str, Any]:
        return {
            "root": encode_node(self.root),
            "leaf": encode_node(self.leaf),
            "leafIndex": self.leaf_index,
            "pathIndices": list(self.path_indices),
            "siblings": [[encode_node(s) for s in group] for group in self.siblings],
        }

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], map_node: NodeMapper = decode_node) -> IMTMerkleProof:
        siblings = data.get("siblings")
        if isinstance(siblings, list):
            siblings = [
                [map_node(s) for s in group] if isinstance(group, list) else group
                for group in siblings
            ]
        return coerce_imt_proof({
            **data,
            "root": map_node(data.get("root")),
            "leaf": map_node(data.get("leaf")),
            "siblings": siblings,
        })


class LeanIMTMerkleProof(_ProofModel):
    """
    Membership proof for a LeanIMT.

    ``index`` is not the leaf index: bit ``i`` says whether the node was the
    right child at the ``i``-th level that contributed a sibling. Levels
    where the node was copied up contribute nothing.
    """

    root: Node
    leaf: Node
    index: StrictInt = Field(..., ge=0)
    siblings: tuple[Node, ...]

    def to_wire(self) -> dict[str, Any]:
        return {
            "root": encode_node(self.root),
            "leaf": encode_node(self.leaf),
            "index": self.index,
            "siblings": [encode_node(s) for s in self.siblings],
        }

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], map_node: NodeMapper = decode_node) -> LeanIMTMerkleProof:
        siblings = data.get("siblings")
        if isinstance(siblings, list):
            siblings = [map_node(s) for s in siblings]
        return coerce_lean_imt_proof({
            **data,
            "root": map_node(data.get("root")),
            "leaf": map_node(data.get("leaf")),
            "siblings": siblings,
        })


def _coerce(model: type[_ProofModel], proof: Any) -> Any:
    require_defined(proof, "proof")
    if isinstance(proof, model):
        return proof
    if isinstance(proof, BaseModel):
        proof = proof.model_dump()
    if not isinstance(proof, Mapping):
        raise ParameterError(
            f"Parameter 'proof' is not a {model.__name__} or mapping",
            parameter="proof",
            details={"type": type(proof).__name__},
        )
    try:
        return model.model_validate(dict(proof))
    except PydanticValidationError as e:
        raise StructuralError(
            f"Malformed {model.__name__}: {e.error_count()} invalid field(s)",
            details={
                "errors": [
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ],
            },
        ) from e


def coerce_imt_proof(proof: Any) -> IMTMerkleProof:
    """Return ``proof`` as an IMTMerkleProof, validating mappings."""
    return _coerce(IMTMerkleProof, proof)


def coerce_lean_imt_proof(proof: Any) -> LeanIMTMerkleProof:
    """Return ``proof`` as a LeanIMTMerkleProof, validating mappings."""
    return _coerce(LeanIMTMerkleProof, proof)


def _check_imt_shape(proof: IMTMerkleProof) -> None:
    if len(proof.siblings) != len(proof.path_indices):
        raise StructuralError(
            "Proof has a different number of sibling groups and path indices",
            details={
                "siblings": len(proof.siblings),
                "path_indices": len(proof.path_indices),
            },
        )
    if not proof.siblings:
        return
    group_size = len(proof.siblings[0])
    for level, (group, position) in enumerate(zip(proof.siblings, proof.path_indices)):
        if len(group) != group_size:
            raise StructuralError(
                f"Sibling group at level {level} has {len(group)} members, expected {group_size}",
                details={"level": level},
            )
        if position < 0 or position > group_size:
            raise StructuralError(
                f"Path index {position} at level {level} is outside its group",
                details={"level": level, "path_index": position},
            )


def verify_imt_proof(
    proof: IMTMerkleProof | Mapping[str, Any],
    hash_fn: Callable[[list[Any]], Any],
) -> bool:
    """
    Verify a fixed-arity IMT proof.

    At each level the climbing node is spliced into its sibling group at the
    recorded position and the full group is hashed.

    Args:
        proof: IMTMerkleProof or a mapping with the same fields
        hash_fn: The n-ary hash the tree was built with

    Returns:
        True if the recomputed root equals ``proof.root``

    Raises:
        ParameterError: If ``hash_fn`` is not callable or ``proof`` is missing
        StructuralError: If the proof shape is invalid
    """
    require_function(hash_fn, "hash")
    proof = coerce_imt_proof(proof)
    _check_imt_shape(proof)

    node = proof.leaf
    for group, position in zip(proof.siblings, proof.path_indices):
        children = list(group)
        children.insert(position, node)
        node = hash_fn(children)

    return node == proof.root


def verify_lean_imt_proof(
    proof: LeanIMTMerkleProof | Mapping[str, Any],
    hash_fn: Callable[[Any, Any], Any],
) -> bool:
    """
    Verify a LeanIMT proof.

    Bit ``i`` of ``proof.index`` set means the node is the right child:
    ``hash(siblings[i], node)``; otherwise ``hash(node, siblings[i])``.
    """
    require_function(hash_fn, "hash")
    proof = coerce_lean_imt_proof(proof)

    node = proof.leaf
    for i, sibling in enumerate(proof.siblings):
        if (proof.index >> i) & 1:
            node = hash_fn(sibling, node)
        else:
            node = hash_fn(node, sibling)

    return node == proof.root


def lean_path_index(path: Sequence[bool]) -> int:
    """
    Pack recorded directions into a proof index.

    ``path[0]`` is the lowest recorded level and becomes bit 0.
    """
    index = 0
    for i, is_right in enumerate(path):
        if is_right:
            index |= 1 << i
    return index


__all__ = [
    "Node",
    "IMTMerkleProof",
    "LeanIMTMerkleProof",
    "coerce_imt_proof",
    "coerce_lean_imt_proof",
    "verify_imt_proof",
    "verify_lean_imt_proof",
    "lean_path_index",
]
