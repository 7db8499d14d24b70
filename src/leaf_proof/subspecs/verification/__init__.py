"""
Asset verification.

Ties the indexer, the hashing rules and the tree account together: confirms
that an asset's indexed state is committed by its tree, and prepares the
arguments of instructions that rewrite its leaf.
"""

from .instructions import AccountMeta, LeafInstructionArgs, TransferRequest, VerifyCreatorRequest
from .reconcile import (
    creators_from_asset,
    leaf_from_asset,
    metadata_from_asset,
    proof_from_asset_proof,
)
from .service import AssetVerifier, VerifiedAsset

__all__ = [
    "AccountMeta",
    "AssetVerifier",
    "LeafInstructionArgs",
    "TransferRequest",
    "VerifiedAsset",
    "VerifyCreatorRequest",
    "creators_from_asset",
    "leaf_from_asset",
    "metadata_from_asset",
    "proof_from_asset_proof",
]
