"""Single-leaf Merkle proofs for concurrent Merkle trees."""

from __future__ import annotations

from typing import Sequence

from leaf_proof.types import (
    Bytes32,
    IndexOutOfRangeError,
    InvalidProofLengthError,
    StrictBaseModel,
    Uint64,
)

from .path import FullProof, TruncatedProof
from .utils import hash_nodes


def _check_inputs(leaf_index: int, proof: Sequence[Bytes32], depth: int) -> None:
    """Validate the proof shape and index range against the tree depth."""
    if isinstance(proof, TruncatedProof):
        raise TypeError("A truncated proof cannot reconstruct the root; use the full proof")

    if len(proof) != depth:
        raise InvalidProofLengthError(expected=depth, actual=len(proof))
    if not 0 <= leaf_index < (1 << depth):
        raise IndexOutOfRangeError(index=leaf_index, depth=depth)


def calculate_root(
    leaf: Bytes32,
    leaf_index: int,
    proof: Sequence[Bytes32],
    depth: int,
) -> Bytes32:
    """
    Reconstruct the root from a leaf, its index and its full sibling path.

    At level `i`, bit `i` of the index tells which side the running hash sits
    on: 0 means it is the left child, 1 means it is the right child.

    Args:
        leaf: The leaf hash.
        leaf_index: Position of the leaf at the bottom level.
        proof: Sibling hashes, leaf level first.
        depth: The tree's max depth. The proof must have exactly this many nodes.

    Raises:
        InvalidProofLengthError: If the proof does not have exactly `depth` nodes.
        IndexOutOfRangeError: If the index does not fit in `depth` bits.
    """
    _check_inputs(leaf_index, proof, depth)

    node = leaf
    for level, sibling in enumerate(proof):
        if (leaf_index >> level) & 1:
            node = hash_nodes(sibling, node)
        else:
            node = hash_nodes(node, sibling)
    return node


def verify(
    leaf: Bytes32,
    leaf_index: int,
    proof: Sequence[Bytes32],
    expected_root: Bytes32,
    depth: int,
) -> bool:
    """
    Check that `leaf` at `leaf_index` is committed under `expected_root`.

    Pure and side-effect free; safe to call concurrently.

    Raises:
        InvalidProofLengthError: If the proof does not have exactly `depth` nodes.
        IndexOutOfRangeError: If the index does not fit in `depth` bits.
    """
    return calculate_root(leaf, leaf_index, proof, depth) == expected_root


class MerkleTreeProof(StrictBaseModel):
    """A leaf together with the full path and root an indexer claims for it."""

    leaf_index: Uint64
    leaf: Bytes32
    root: Bytes32
    proof: FullProof

    def calculate_root(self, depth: int) -> Bytes32:
        """Reconstruct the root implied by the leaf and path."""
        return calculate_root(self.leaf, int(self.leaf_index), self.proof, depth)

    def verify(self, depth: int) -> bool:
        """Check that the path leads from the leaf to the claimed root."""
        return self.calculate_root(depth) == self.root
