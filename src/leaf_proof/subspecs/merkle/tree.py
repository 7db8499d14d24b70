"""Off-chain Merkle tree construction."""

from __future__ import annotations

from typing import List, Sequence

from leaf_proof.types import Bytes32, Uint64

from .path import FullProof
from .proof import MerkleTreeProof
from .utils import empty_node, hash_nodes


class MerkleTree:
    """
    A fixed-depth Merkle tree built from its populated leaves.

    Leaves are filled from index 0; every position past the last populated
    leaf holds an empty node. Only the populated part of each layer is
    materialized, so deep trees with few leaves stay cheap to build.
    """

    def __init__(self, leaves: Sequence[Bytes32], depth: int) -> None:
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")
        if len(leaves) > (1 << depth):
            raise ValueError(f"{len(leaves)} leaves do not fit in a tree of depth {depth}")

        self.depth = depth
        self.layers: List[List[Bytes32]] = [list(leaves)]

        # Reduce bottom-up. An odd trailing node pairs with the empty subtree of its level.
        for level in range(depth):
            below = self.layers[-1]
            above: List[Bytes32] = []
            for i in range(0, len(below), 2):
                right = below[i + 1] if i + 1 < len(below) else empty_node(level)
                above.append(hash_nodes(below[i], right))
            self.layers.append(above)

    @property
    def root(self) -> Bytes32:
        """Root of the tree (the empty root when no leaf is populated)."""
        top = self.layers[-1]
        return top[0] if top else empty_node(self.depth)

    def _node(self, level: int, position: int) -> Bytes32:
        layer = self.layers[level]
        return layer[position] if position < len(layer) else empty_node(level)

    def get_proof(self, leaf_index: int) -> MerkleTreeProof:
        """Build the full proof for the leaf at `leaf_index`."""
        if not 0 <= leaf_index < (1 << self.depth):
            raise IndexError(f"leaf index {leaf_index} out of range for depth {self.depth}")

        siblings: List[Bytes32] = []
        position = leaf_index
        for level in range(self.depth):
            siblings.append(self._node(level, position ^ 1))
            position >>= 1

        return MerkleTreeProof(
            leaf_index=Uint64(leaf_index),
            leaf=self._node(0, leaf_index),
            root=self.root,
            proof=FullProof(siblings),
        )
