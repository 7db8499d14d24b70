"""Truncation of full proofs for on-chain submission."""

from __future__ import annotations

from leaf_proof.subspecs.merkle.path import FullProof, TruncatedProof
from leaf_proof.types import CanopyDeeperThanProofError


def truncate(full_proof: FullProof, canopy_depth: int) -> TruncatedProof:
    """
    Drop the proof nodes the tree already caches in its canopy.

    The last `canopy_depth` nodes are the ones closest to the root. The
    program reads them from the account itself; resupplying them makes the
    on-chain root computation diverge and the instruction fails.

    Raises:
        TypeError: If handed anything other than a `FullProof`.
        CanopyDeeperThanProofError: If the canopy is deeper than the proof.
    """
    if not isinstance(full_proof, FullProof):
        raise TypeError(f"Expected a FullProof, got {type(full_proof).__name__}")
    if canopy_depth < 0:
        raise ValueError(f"canopy_depth must be non-negative, got {canopy_depth}")
    if canopy_depth > len(full_proof):
        raise CanopyDeeperThanProofError(canopy_depth=canopy_depth, proof_length=len(full_proof))

    return TruncatedProof(full_proof[: len(full_proof) - canopy_depth])
