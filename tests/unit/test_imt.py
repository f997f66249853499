"""
Tests for the fixed-depth, fixed-arity incremental Merkle tree.
"""

import pytest
from pydantic import ValidationError

from imt.merkle import IMT, IMTMerkleProof
from imt.schemas.errors import (
    CapacityError,
    ParameterError,
    RangeError,
    StructuralError,
)


class TestConstruction:
    """Tests for IMT construction."""

    def test_zeroes_chain(self, sum_hash):
        """Each zero is the hash of the previous level's zeroes."""
        tree = IMT(sum_hash, depth=3, zero_value=1, arity=2)

        assert tree.zeroes == (1, 2, 4)
        assert tree.root == 8
        assert tree.size == 0
        assert tree.capacity == 8

    def test_zeroes_chain_ternary(self, sum_hash):
        """Zero chain uses arity copies per level."""
        tree = IMT(sum_hash, depth=2, zero_value=1, arity=3)

        assert tree.zeroes == (1, 3)
        assert tree.root == 9
        assert tree.capacity == 9

    def test_depth_zero_empty_root_is_zero_value(self, sum_hash):
        """Depth 0 root is the zero value itself."""
        tree = IMT(sum_hash, depth=0, zero_value=5)

        assert tree.root == 5
        assert tree.zeroes == ()
        assert tree.capacity == 1
        assert tree.nodes == [[]]

    def test_depth_zero_holds_single_leaf(self, sum_hash):
        """Depth 0 tree holds exactly one leaf."""
        tree = IMT(sum_hash, depth=0, zero_value=0)
        tree.insert(7)

        assert tree.root == 7
        with pytest.raises(CapacityError):
            tree.insert(8)

    def test_empty_tree_root_level(self, sum_hash):
        """Empty tree stores only the root level."""
        tree = IMT(sum_hash, depth=2, zero_value=0)

        assert tree.nodes == [[], [], [0]]

    def test_initial_leaves(self, sum_hash):
        """Initial leaves build the matrix bottom-up."""
        tree = IMT(sum_hash, depth=2, zero_value=0, arity=2, leaves=[1, 2, 3])

        assert tree.nodes == [[1, 2, 3], [3, 3], [6]]
        assert tree.root == 6

    @pytest.mark.parametrize("arity", [2, 3, 5])
    @pytest.mark.parametrize("count", [0, 1, 2, 4, 7, 9])
    def test_initial_leaves_match_sequential_inserts(self, sha_hash, arity, count):
        """Built tree equals one grown by single inserts."""
        leaves = list(range(1, count + 1))
        built = IMT(sha_hash, depth=4, zero_value=0, arity=arity, leaves=leaves)

        inserted = IMT(sha_hash, depth=4, zero_value=0, arity=arity)
        for leaf in leaves:
            inserted.insert(leaf)

        assert built.nodes == inserted.nodes
        assert built.root == inserted.root

    def test_too_many_initial_leaves(self, sum_hash):
        """More leaves than capacity raise CapacityError."""
        with pytest.raises(CapacityError) as exc_info:
            IMT(sum_hash, depth=1, zero_value=0, arity=2, leaves=[1, 2, 3])

        assert exc_info.value.details["capacity"] == 2

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"hash": None},
            {"hash": "sha256"},
            {"depth": -1},
            {"depth": 1.5},
            {"depth": True},
            {"zero_value": None},
            {"zero_value": 1.5},
            {"arity": 1},
            {"leaves": "123"},
            {"leaves": [1, None]},
        ],
    )
    def test_invalid_parameters(self, sum_hash, kwargs):
        """Bad constructor arguments raise ParameterError."""
        params = {"hash": sum_hash, "depth": 2, "zero_value": 0, "arity": 2}
        params.update(kwargs)

        with pytest.raises(ParameterError):
            IMT(**params)

    def test_parameter_error_is_type_error(self, sum_hash):
        """ParameterError can be caught as TypeError."""
        with pytest.raises(TypeError):
            IMT(sum_hash, depth=2, zero_value=None)


class TestInsert:
    """Tests for IMT.insert."""

    def test_binary_insert(self, sum_hash):
        """Inserting [1, 2, 3] gives the expected matrix."""
        tree = IMT(sum_hash, depth=2, zero_value=0)
        for leaf in (1, 2, 3):
            tree.insert(leaf)

        assert tree.nodes == [[1, 2, 3], [3, 3], [6]]
        assert tree.root == 6
        assert tree.size == 3
        assert tree.leaves == [1, 2, 3]

    def test_ternary_insert(self, sum_hash):
        """Ternary inserts group children in threes."""
        tree = IMT(sum_hash, depth=2, zero_value=0, arity=3)
        for leaf in (1, 2, 3, 4):
            tree.insert(leaf)

        assert tree.nodes == [[1, 2, 3, 4], [6, 4], [10]]

    def test_zero_value_fills_missing_children(self, sum_hash):
        """Missing children use the level's zero."""
        tree = IMT(sum_hash, depth=2, zero_value=1)
        tree.insert(10)

        # level 0: [10, 1] -> 11; level 1: [11, zeroes[1] = 2] -> 13
        assert tree.root == 13

    def test_string_leaves(self):
        """String nodes work with a string hash."""
        tree = IMT(lambda children: "".join(children), depth=2, zero_value="-")
        tree.insert("a")
        tree.insert("b")

        assert tree.root == "ab--"

    def test_full_tree(self, sum_hash):
        """Inserting into a full tree raises and changes nothing."""
        tree = IMT(sum_hash, depth=1, zero_value=0)
        tree.insert(1)
        tree.insert(2)

        with pytest.raises(CapacityError, match="full"):
            tree.insert(3)

        assert tree.nodes == [[1, 2], [3]]

    def test_invalid_leaf(self, sum_hash):
        """Invalid leaves are rejected before any write."""
        tree = IMT(sum_hash, depth=2, zero_value=0)

        with pytest.raises(ParameterError):
            tree.insert(None)
        with pytest.raises(ParameterError):
            tree.insert(1.0)

        assert tree.size == 0

    def test_index_of_and_has(self, sum_hash):
        """Lookups find the first matching leaf."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[5, 6, 5])

        assert tree.index_of(5) == 0
        assert tree.index_of(6) == 1
        assert tree.index_of(7) == -1
        assert tree.has(6)
        assert not tree.has(7)


class TestUpdateDelete:
    """Tests for IMT.update and IMT.delete."""

    def test_update_matches_rebuilt_tree(self, sha_hash):
        """Updating any leaf equals rebuilding with the new value."""
        leaves = [1, 2, 3, 4, 5]
        for index in range(len(leaves)):
            tree = IMT(sha_hash, depth=3, zero_value=0, arity=3, leaves=leaves)
            tree.update(index, 99)

            expected = list(leaves)
            expected[index] = 99
            rebuilt = IMT(sha_hash, depth=3, zero_value=0, arity=3, leaves=expected)

            assert tree.nodes == rebuilt.nodes

    def test_update_out_of_range(self, sum_hash):
        """Out-of-range updates raise RangeError."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2])

        with pytest.raises(RangeError) as exc_info:
            tree.update(2, 5)
        assert "does not exist" in exc_info.value.message
        assert exc_info.value.details == {"index": 2, "size": 2}

        with pytest.raises(IndexError):
            tree.update(-1, 5)

    def test_update_requires_integer_index(self, sum_hash):
        """Non-integer index raises ParameterError."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1])

        with pytest.raises(ParameterError):
            tree.update("0", 5)

    def test_delete_writes_zero_value(self, sum_hash):
        """Delete writes the zero value and keeps the size."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        tree.delete(1)

        assert tree.leaves == [1, 0, 3]
        assert tree.size == 3
        assert tree.root == 4

    def test_delete_then_update(self, sha_hash):
        """Update after delete restores the root."""
        tree = IMT(sha_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        tree.delete(0)
        tree.update(0, 1)

        assert tree.root == IMT(sha_hash, depth=2, zero_value=0, leaves=[1, 2, 3]).root

    def test_delete_out_of_range(self, sum_hash):
        """Delete on a missing leaf raises RangeError."""
        tree = IMT(sum_hash, depth=2, zero_value=0)

        with pytest.raises(RangeError):
            tree.delete(0)


class TestAtomicWrites:
    """A hash failure must leave the tree untouched."""

    def test_insert_failure(self, sha_hash, flaky):
        """Failing hash during insert leaves the tree unchanged."""
        hash_fn = flaky(sha_hash)
        tree = IMT(hash_fn, depth=3, zero_value=0, leaves=[1, 2, 3])
        before = tree.nodes

        hash_fn.arm(fail_after=1)
        with pytest.raises(RuntimeError):
            tree.insert(4)

        assert tree.nodes == before
        assert tree.size == 3

    def test_update_failure(self, sha_hash, flaky):
        """Failing hash during update leaves the tree unchanged."""
        hash_fn = flaky(sha_hash)
        tree = IMT(hash_fn, depth=3, zero_value=0, leaves=[1, 2, 3])
        before = tree.nodes

        hash_fn.arm(fail_after=2)
        with pytest.raises(RuntimeError):
            tree.update(0, 10)

        assert tree.nodes == before


class TestProofs:
    """Tests for IMT.create_proof and IMT.verify_proof."""

    def test_proof_fields(self, sum_hash):
        """Proof for [1, 2, 3] index 2 has the expected fields."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        proof = tree.create_proof(2)

        assert proof.root == 6
        assert proof.leaf == 3
        assert proof.leaf_index == 2
        assert proof.path_indices == (0, 1)
        assert proof.siblings == ((0,), (3,))
        assert tree.verify_proof(proof)

    @pytest.mark.parametrize("arity", [2, 3, 4])
    def test_every_leaf_verifies(self, sha_hash, arity):
        """Every leaf's proof verifies for several arities."""
        tree = IMT(sha_hash, depth=4, zero_value=0, arity=arity, leaves=list(range(10, 21)))

        for index in range(tree.size):
            proof = tree.create_proof(index)
            assert len(proof.siblings) == tree.depth
            assert all(len(group) == arity - 1 for group in proof.siblings)
            assert tree.verify_proof(proof)

    def test_depth_zero_proof(self, sum_hash):
        """Depth 0 proof has no siblings and verifies."""
        tree = IMT(sum_hash, depth=0, zero_value=0, leaves=[4])
        proof = tree.create_proof(0)

        assert proof.siblings == ()
        assert proof.path_indices == ()
        assert tree.verify_proof(proof)

    def test_tampered_leaf(self, sha_hash):
        """Altered leaf fails verification."""
        tree = IMT(sha_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        proof = tree.create_proof(1)

        assert not tree.verify_proof(proof.model_copy(update={"leaf": 5}))

    def test_tampered_sibling(self, sha_hash):
        """Altered sibling fails verification."""
        tree = IMT(sha_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        proof = tree.create_proof(1)
        siblings = ((proof.siblings[0][0] + 1,),) + proof.siblings[1:]

        assert not tree.verify_proof(proof.model_copy(update={"siblings": siblings}))

    def test_tampered_position(self, weighted_hash):
        """Wrong position fails with an order-sensitive hash."""
        tree = IMT(weighted_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        proof = tree.create_proof(2)
        assert tree.verify_proof(proof)

        tampered = proof.model_copy(update={"path_indices": (1, 1)})
        assert not tree.verify_proof(tampered)

    def test_proof_outlives_later_writes(self, sha_hash):
        """Old proofs keep verifying against their own root."""
        tree = IMT(sha_hash, depth=2, zero_value=0, leaves=[1, 2])
        proof = tree.create_proof(0)
        tree.insert(3)

        assert proof.root != tree.root
        assert tree.verify_proof(proof)

    def test_proof_is_immutable(self, sum_hash):
        """Proof fields cannot be reassigned."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1])
        proof = tree.create_proof(0)

        with pytest.raises(ValidationError):
            proof.leaf = 2

    def test_verify_mapping(self, sum_hash):
        """Proofs can be verified from camelCase mappings."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        wire = {
            "root": 6,
            "leaf": 3,
            "leafIndex": 2,
            "pathIndices": [0, 1],
            "siblings": [[0], [3]],
        }

        assert tree.verify_proof(wire)
        assert isinstance(tree.create_proof(2), IMTMerkleProof)

    def test_verify_missing_field(self, sum_hash):
        """Mapping without siblings raises StructuralError."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2, 3])

        with pytest.raises(StructuralError):
            tree.verify_proof({"root": 6, "leaf": 3, "leafIndex": 2, "pathIndices": [0, 1]})

    def test_verify_wrong_group_size(self, sum_hash):
        """Groups that do not fit the arity raise StructuralError."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1, 2, 3])
        proof = tree.create_proof(2)
        wide = proof.model_copy(update={"siblings": ((0, 0), (3, 0))})

        with pytest.raises(StructuralError):
            tree.verify_proof(wide)

    def test_verify_undefined_proof(self, sum_hash):
        """None proof raises ParameterError."""
        tree = IMT(sum_hash, depth=2, zero_value=0)

        with pytest.raises(ParameterError):
            tree.verify_proof(None)

    def test_create_proof_out_of_range(self, sum_hash):
        """Proof for a missing leaf raises RangeError."""
        tree = IMT(sum_hash, depth=2, zero_value=0, leaves=[1])

        with pytest.raises(RangeError):
            tree.create_proof(1)
