"""Verification of indexer-supplied proofs against a live concurrent tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leaf_proof.types import (
    Bytes32,
    InvalidProofError,
    StaleRootError,
    StrictBaseModel,
    Uint64,
)

from .proof import MerkleTreeProof

if TYPE_CHECKING:
    from leaf_proof.subspecs.concurrent_tree import ConcurrentMerkleTreeAccount

logger = logging.getLogger(__name__)


class VerificationResult(StrictBaseModel):
    """
    A proof accepted against a tree snapshot.

    Rejections raise instead, so a result always names the changelog entry
    the proof matched.
    """

    matched_root: Bytes32
    """The changelog root the proof matched."""

    sequence_number: Uint64
    """Sequence number of the matched changelog entry."""

    is_current: bool
    """Whether the matched root is the tree's newest root."""

    @property
    def is_stale(self) -> bool:
        """Accepted, but against a root older than the current one."""
        return not self.is_current


def verify_against_tree(
    proof: MerkleTreeProof, tree: ConcurrentMerkleTreeAccount
) -> VerificationResult:
    """
    Check an indexer proof against a decoded tree account.

    The proof must first reconstruct its own claimed root, which proves the
    leaf is committed under that root. The root must then still be retained by
    the tree's changelog. It does not have to be the current root.

    Raises:
        InvalidProofLengthError: If the proof length differs from the tree depth.
        IndexOutOfRangeError: If the leaf index is outside the tree.
        InvalidProofError: If the path does not lead to the claimed root.
        StaleRootError: If the claimed root has left the changelog.
    """
    computed = proof.calculate_root(depth=tree.get_max_depth())
    if computed != proof.root:
        raise InvalidProofError(
            f"Proof for leaf {int(proof.leaf_index)} reconstructs {computed.to_base58()}, "
            f"not the claimed root {proof.root.to_base58()}"
        )

    entry = tree.find_root(computed)
    if entry is None:
        raise StaleRootError(
            f"Root {computed.to_base58()} is not among the {len(tree.changelog)} roots retained "
            f"by the tree (current sequence {tree.get_current_seq()})"
        )

    is_current = entry.root == tree.current_root()
    if not is_current:
        logger.warning(
            "Proof root %s is %d writes behind the current root; still accepted",
            computed.to_base58(),
            tree.get_current_seq() - int(entry.sequence_number),
        )

    return VerificationResult(
        matched_root=entry.root,
        sequence_number=entry.sequence_number,
        is_current=is_current,
    )
