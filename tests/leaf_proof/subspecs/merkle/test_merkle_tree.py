"""Tests for off-chain tree construction."""

import pytest

from leaf_proof.subspecs.merkle import MerkleTree, empty_node, hash_nodes
from tests.leaf_proof.helpers import make_bytes32


def test_empty_tree_root() -> None:
    """A tree with no leaves has the empty root of its depth."""
    assert MerkleTree([], depth=5).root == empty_node(5)


def test_single_leaf_pads_with_empty_subtrees() -> None:
    leaf = make_bytes32("only")
    expected = hash_nodes(hash_nodes(leaf, empty_node(0)), empty_node(1))
    assert MerkleTree([leaf], depth=2).root == expected


def test_full_tree_root() -> None:
    leaves = [make_bytes32(i) for i in range(4)]
    expected = hash_nodes(hash_nodes(leaves[0], leaves[1]), hash_nodes(leaves[2], leaves[3]))
    assert MerkleTree(leaves, depth=2).root == expected


def test_proof_of_empty_position() -> None:
    """Positions past the last leaf prove the zero leaf."""
    tree = MerkleTree([make_bytes32(0)], depth=3)
    proof = tree.get_proof(6)
    assert proof.leaf == empty_node(0)
    assert proof.verify(depth=3)


def test_rejects_too_many_leaves() -> None:
    with pytest.raises(ValueError):
        MerkleTree([make_bytes32(i) for i in range(5)], depth=2)


def test_rejects_negative_depth() -> None:
    with pytest.raises(ValueError):
        MerkleTree([], depth=-1)


@pytest.mark.parametrize("index", [-1, 8])
def test_get_proof_rejects_out_of_range(index: int) -> None:
    with pytest.raises(IndexError):
        MerkleTree([make_bytes32(0)], depth=3).get_proof(index)
