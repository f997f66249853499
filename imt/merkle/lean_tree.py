"""
Module 02 - Lean Incremental Merkle Tree

A LeanIMT is a binary tree whose depth grows with the number of leaves
(``depth = ceil(log2(size))``). It has no zero values: a node without a
right sibling is copied to its parent unchanged instead of being hashed
with a placeholder.

Commitment Rules:
1. parent = hash(left, right) if the right child exists, else left
2. Empty tree: no root (None), depth 0
3. Single leaf: root = leaf
4. Leaf indices are append-only

Usage:
    from imt.merkle import LeanIMT

    tree = LeanIMT(lambda a, b: poseidon([a, b]))
    tree.insert_many([1, 2, 3])
    proof = tree.generate_proof(2)
    assert tree.verify_proof(proof)
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from imt.schemas.canonical import (
    decode_matrix,
    decode_node,
    dumps_canonical,
    encode_matrix,
    loads_canonical,
)
from imt.schemas.errors import ParameterError, StateError
from imt.merkle.proofs import LeanIMTMerkleProof, lean_path_index, verify_lean_imt_proof
from imt.merkle.validation import (
    require_defined,
    require_function,
    require_index,
    require_integer,
    require_node,
    require_sequence,
    require_string,
)


logger = logging.getLogger(__name__)

LeanIMTNode = Any
LeanIMTHashFunction = Callable[[LeanIMTNode, LeanIMTNode], LeanIMTNode]


def _depth_for(size: int) -> int:
    """ceil(log2(size)), 0 for size <= 1."""
    return (size - 1).bit_length() if size > 1 else 0


class LeanIMT:
    """
    Dynamic-depth binary incremental Merkle tree.

    ``nodes[0]`` holds the leaves and ``nodes[depth]`` holds the single root.
    """

    def __init__(
        self,
        hash: LeanIMTHashFunction,
        leaves: Sequence[LeanIMTNode] = (),
    ) -> None:
        require_function(hash, "hash")
        require_sequence(leaves, "leaves", nodes=True)

        self._hash = hash
        self._nodes: list[list[LeanIMTNode]] = [[]]

        if leaves:
            self.insert_many(leaves)

    @property
    def root(self) -> LeanIMTNode | None:
        top = self._nodes[self.depth]
        return top[0] if top else None

    @property
    def depth(self) -> int:
        return len(self._nodes) - 1

    @property
    def size(self) -> int:
        return len(self._nodes[0])

    @property
    def leaves(self) -> list[LeanIMTNode]:
        return list(self._nodes[0])

    @property
    def nodes(self) -> list[list[LeanIMTNode]]:
        """A copy of the node matrix, level 0 first."""
        return [list(level) for level in self._nodes]

    def index_of(self, leaf: LeanIMTNode) -> int:
        """Return the index of the first matching leaf, or -1."""
        require_defined(leaf, "leaf")
        try:
            return self._nodes[0].index(leaf)
        except ValueError:
            return -1

    def has(self, leaf: LeanIMTNode) -> bool:
        require_defined(leaf, "leaf")
        return leaf in self._nodes[0]

    def insert(self, leaf: LeanIMTNode) -> None:
        """
        Append a leaf.

        The new leaf is always the rightmost one, so at an even index there
        is no right sibling and the node is copied up.
        """
        require_node(leaf, "leaf")

        index = self.size
        depth = max(self.depth, index.bit_length())

        node = leaf
        path = []
        for level in range(depth):
            path.append(node)
            if index & 1:
                node = self._hash(self._nodes[level][index - 1], node)
            index >>= 1

        if depth > self.depth:
            self._nodes.append([])
        self._commit(self.size, path)
        self._nodes[depth] = [node]

    def insert_many(self, leaves: Sequence[LeanIMTNode]) -> None:
        """
        Append several leaves, recomputing each affected level only once.

        The resulting node matrix is identical to calling ``insert`` for
        each leaf in order.

        Raises:
            ParameterError: If ``leaves`` is empty or holds a non-node value
        """
        require_sequence(leaves, "leaves", nodes=True)
        if len(leaves) == 0:
            raise ParameterError("There are no leaves to add", parameter="leaves")

        old_size = self.size
        new_size = old_size + len(leaves)
        depth = max(self.depth, _depth_for(new_size))

        # staged[level] replaces nodes[level][starts[level]:]
        starts = [old_size >> level for level in range(depth + 1)]
        staged: list[list[LeanIMTNode]] = [list(leaves)]

        def node_at(level: int, index: int) -> LeanIMTNode:
            if index >= starts[level]:
                return staged[level][index - starts[level]]
            return self._nodes[level][index]

        length = new_size
        for level in range(depth):
            parents = []
            count = (length + 1) // 2
            for index in range(starts[level + 1], count):
                left = node_at(level, index * 2)
                if index * 2 + 1 < length:
                    parents.append(self._hash(left, node_at(level, index * 2 + 1)))
                else:
                    parents.append(left)
            staged.append(parents)
            length = count

        while len(self._nodes) <= depth:
            self._nodes.append([])
        for level, values in enumerate(staged):
            del self._nodes[level][starts[level]:]
            self._nodes[level].extend(values)

        logger.debug("Inserted %d leaves (size=%d, depth=%d)", len(leaves), new_size, depth)

    def update(self, index: int, new_leaf: LeanIMTNode) -> None:
        """
        Overwrite the leaf at ``index`` and recompute its path.

        Unlike ``insert``, an even index may have a right sibling.

        Raises:
            RangeError: If ``index`` is not in ``[0, size)``
        """
        require_integer(index, "index")
        require_node(new_leaf, "new_leaf")
        require_index(index, self.size)

        leaf_index = index
        node = new_leaf
        path = []
        for level in range(self.depth):
            path.append(node)
            current = self._nodes[level]
            if index & 1:
                node = self._hash(current[index - 1], node)
            elif index + 1 < len(current):
                node = self._hash(node, current[index + 1])
            index >>= 1

        self._commit(leaf_index, path)
        self._nodes[self.depth] = [node]

    def generate_proof(self, index: int) -> LeanIMTMerkleProof:
        """
        Generate a membership proof for the leaf at ``index``.

        Levels where the node has no sibling are skipped, so the proof index
        packs only the recorded directions (see LeanIMTMerkleProof).

        Raises:
            RangeError: If ``index`` is not in ``[0, size)``
        """
        require_integer(index, "index")
        require_index(index, self.size)

        leaf = self._nodes[0][index]
        siblings: list[LeanIMTNode] = []
        path: list[bool] = []

        for level in range(self.depth):
            is_right = bool(index & 1)
            sibling_index = index - 1 if is_right else index + 1
            current = self._nodes[level]

            if sibling_index < len(current):
                path.append(is_right)
                siblings.append(current[sibling_index])

            index >>= 1

        return LeanIMTMerkleProof(
            root=self.root,
            leaf=leaf,
            index=lean_path_index(path),
            siblings=tuple(siblings),
        )

    def verify_proof(self, proof: LeanIMTMerkleProof | Mapping[str, Any]) -> bool:
        """Verify a proof with this tree's hash; the nodes are not consulted."""
        return verify_lean_imt_proof(proof, self._hash)

    def export(self) -> str:
        """
        Serialize the full node matrix.

        Returns a JSON array of levels with integer nodes as decimal text.
        String nodes are written unchanged, so a string that looks like a
        decimal number (``"12"``) is indistinguishable from an int in the
        output; trees of strings should be imported with ``map_node=str``.
        """
        return dumps_canonical(encode_matrix(self._nodes))

    def import_nodes(
        self,
        nodes: str,
        map_node: Callable[[Any], LeanIMTNode] = decode_node,
    ) -> None:
        """
        Install a matrix produced by ``export``.

        No hash is recomputed; the caller is responsible for the integrity
        of the imported tree.

        Args:
            nodes: The exported JSON text
            map_node: Applied to every value (default: decimal text -> int,
                which also turns a string node such as ``"12"`` into ``12``;
                pass ``str`` to keep every node a string)

        Raises:
            StateError: If the tree already holds leaves
            DecodeError: If ``nodes`` is not a JSON array of arrays
        """
        require_string(nodes, "nodes")
        require_function(map_node, "map_node")
        if self.size != 0:
            raise StateError(
                "Import failed: the target tree structure is not empty",
                details={"size": self.size},
            )

        matrix = decode_matrix(loads_canonical(nodes), map_node)
        self._nodes = matrix if matrix else [[]]
        logger.debug("Imported node matrix (size=%d, depth=%d)", self.size, self.depth)

    def _commit(self, index: int, path: list[LeanIMTNode]) -> None:
        for level, value in enumerate(path):
            current = self._nodes[level]
            if index < len(current):
                current[index] = value
            else:
                current.append(value)
            index >>= 1
