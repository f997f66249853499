"""
Module 02 - Incremental Merkle Tree (fixed depth, generic arity)

An IMT has a fixed ``depth`` and ``arity``. Missing children are replaced
by a per-level zero value, so the root is defined for any number of leaves
up to ``arity ** depth``.

Commitment Rules:
1. zeroes[0] = zero_value, zeroes[i] = hash([zeroes[i - 1]] * arity)
2. parent = hash(group of ``arity`` children), missing children = zeroes[level]
3. Empty tree: root = hash([zeroes[depth - 1]] * arity) (zero_value if depth == 0)
4. Leaf indices are append-only; delete overwrites with zeroes[0]

Usage:
    from imt.merkle import IMT

    tree = IMT(poseidon, depth=16, zero_value=0, arity=2)
    tree.insert(1)
    proof = tree.create_proof(0)
    assert tree.verify_proof(proof)
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from imt.schemas.errors import CapacityError, StructuralError
from imt.merkle.proofs import IMTMerkleProof, coerce_imt_proof, verify_imt_proof
from imt.merkle.validation import (
    require_function,
    require_index,
    require_integer,
    require_node,
    require_sequence,
)

IMTNode = Any
IMTHashFunction = Callable[[list[IMTNode]], IMTNode]


class IMT:
    """
    Incremental Merkle tree with fixed depth and arity.

    ``nodes[0]`` holds the leaves, ``nodes[depth]`` holds the root. Each
    mutation recomputes only the path from the touched leaf to the root.
    """

    def __init__(
        self,
        hash: IMTHashFunction,
        depth: int,
        zero_value: IMTNode,
        arity: int = 2,
        leaves: Sequence[IMTNode] = (),
    ) -> None:
        require_function(hash, "hash")
        require_integer(depth, "depth", minimum=0)
        require_node(zero_value, "zero_value")
        require_integer(arity, "arity", minimum=2)
        require_sequence(leaves, "leaves", nodes=True)

        capacity = arity ** depth
        if len(leaves) > capacity:
            raise CapacityError(
                f"The tree cannot contain more than {capacity} leaves",
                capacity=capacity,
            )

        self._hash = hash
        self._depth = depth
        self._arity = arity

        zeroes: list[IMTNode] = []
        zero = zero_value
        for _ in range(depth):
            zeroes.append(zero)
            zero = hash([zero] * arity)
        self._zeroes: tuple[IMTNode, ...] = tuple(zeroes)
        self._empty_root = zero

        self._nodes: list[list[IMTNode]] = [[] for _ in range(depth + 1)]

        if leaves:
            self._nodes[0] = list(leaves)
            for level in range(depth):
                current = self._nodes[level]
                for index in range((len(current) + arity - 1) // arity):
                    position = index * arity
                    children = [
                        current[position + i] if position + i < len(current) else zeroes[level]
                        for i in range(arity)
                    ]
                    self._nodes[level + 1].append(hash(children))
        elif depth > 0:
            self._nodes[depth] = [zero]

    @property
    def root(self) -> IMTNode:
        """The current root (the empty root while no leaf exists)."""
        top = self._nodes[self._depth]
        return top[0] if top else self._empty_root

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def zeroes(self) -> tuple[IMTNode, ...]:
        """Zero value of each level ``0 .. depth - 1``."""
        return self._zeroes

    @property
    def capacity(self) -> int:
        return self._arity ** self._depth

    @property
    def size(self) -> int:
        """Number of leaves ever inserted (soft deletes included)."""
        return len(self._nodes[0])

    @property
    def leaves(self) -> list[IMTNode]:
        return list(self._nodes[0])

    @property
    def nodes(self) -> list[list[IMTNode]]:
        """A copy of the node matrix, level 0 first."""
        return [list(level) for level in self._nodes]

    def index_of(self, leaf: IMTNode) -> int:
        """Return the index of the first matching leaf, or -1."""
        require_node(leaf, "leaf")
        try:
            return self._nodes[0].index(leaf)
        except ValueError:
            return -1

    def has(self, leaf: IMTNode) -> bool:
        require_node(leaf, "leaf")
        return leaf in self._nodes[0]

    def insert(self, leaf: IMTNode) -> None:
        """
        Append a leaf and recompute its path.

        Raises:
            ParameterError: If ``leaf`` is not a node value
            CapacityError: If the tree already holds ``arity ** depth`` leaves
        """
        require_node(leaf, "leaf")
        if self.size >= self.capacity:
            raise CapacityError("The tree is full", capacity=self.capacity)

        self._commit(self.size, self._climb(self.size, leaf))

    def update(self, index: int, new_leaf: IMTNode) -> None:
        """
        Overwrite the leaf at ``index`` and recompute its path.

        Raises:
            RangeError: If ``index`` is not in ``[0, size)``
        """
        require_integer(index, "index")
        require_node(new_leaf, "new_leaf")
        require_index(index, self.size)

        self._commit(index, self._climb(index, new_leaf))

    def delete(self, index: int) -> None:
        """Soft delete: overwrite the leaf with ``zeroes[0]``; size is unchanged."""
        require_integer(index, "index")
        require_index(index, self.size)
        zero = self._zeroes[0] if self._zeroes else self._empty_root
        self.update(index, zero)

    def create_proof(self, index: int) -> IMTMerkleProof:
        """
        Create a membership proof for the leaf at ``index``.

        Raises:
            RangeError: If ``index`` is not in ``[0, size)``
        """
        require_integer(index, "index")
        require_index(index, self.size)

        leaf_index = index
        siblings: list[tuple[IMTNode, ...]] = []
        path_indices: list[int] = []

        for level in range(self._depth):
            position = index % self._arity
            start = index - position
            current = self._nodes[level]

            path_indices.append(position)
            siblings.append(tuple(
                current[i] if i < len(current) else self._zeroes[level]
                for i in range(start, start + self._arity)
                if i != index
            ))

            index //= self._arity

        return IMTMerkleProof(
            root=self.root,
            leaf=self._nodes[0][leaf_index],
            leaf_index=leaf_index,
            path_indices=tuple(path_indices),
            siblings=tuple(siblings),
        )

    def verify_proof(self, proof: IMTMerkleProof | Mapping[str, Any]) -> bool:
        """
        Verify a proof with this tree's hash.

        Only the hash binding is used; the tree's nodes are not consulted.

        Raises:
            StructuralError: If the proof shape does not fit this tree's arity
        """
        proof = coerce_imt_proof(proof)
        for level, group in enumerate(proof.siblings):
            if len(group) != self._arity - 1:
                raise StructuralError(
                    f"Sibling group at level {level} has {len(group)} members, "
                    f"expected {self._arity - 1}",
                    details={"level": level, "arity": self._arity},
                )
        return verify_imt_proof(proof, self._hash)

    def _climb(self, index: int, node: IMTNode) -> list[IMTNode]:
        """
        Compute the new path for ``node`` placed at ``index``.

        Returns the value for each level ``0 .. depth``; nothing is written.
        """
        path = [node]
        for level in range(self._depth):
            position = index % self._arity
            start = index - position
            current = self._nodes[level]

            children = []
            for i in range(start, start + self._arity):
                if i == index:
                    children.append(node)
                elif i < len(current):
                    children.append(current[i])
                else:
                    children.append(self._zeroes[level])

            node = self._hash(children)
            path.append(node)
            index //= self._arity
        return path

    def _commit(self, index: int, path: list[IMTNode]) -> None:
        for level, value in enumerate(path):
            current = self._nodes[level]
            if index < len(current):
                current[index] = value
            else:
                current.append(value)
            index //= self._arity
