"""
End-to-end verification of a compressed asset.

The flow for one asset:

1. Fetch the indexed asset, its full proof and the tree account.
2. Rebuild the metadata and creator list and recompute both leaf digests.
3. Recompute the leaf hash and check it is the leaf the proof is about.
4. Check the proof against the tree's changelog.
5. Truncate the proof to the tree's canopy for instruction submission.

Nothing here retries or repairs. Every disagreement between the indexer and
the chain surfaces as a typed error; only the RPC client retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from leaf_proof.subspecs.concurrent_tree import ConcurrentMerkleTreeAccount
from leaf_proof.subspecs.hashing import (
    Creator,
    LeafSchema,
    MetadataArgs,
    compute_creator_hash,
    compute_data_hash,
    compute_leaf_hash,
)
from leaf_proof.subspecs.merkle import (
    FullProof,
    TruncatedProof,
    VerificationResult,
    verify_against_tree,
)
from leaf_proof.subspecs.proof_path import truncate
from leaf_proof.subspecs.read_api import Asset, AssetProof, ReadApiClient
from leaf_proof.types import (
    Bytes32,
    InvalidProofError,
    MalformedResponseError,
    Pubkey,
    StrictBaseModel,
    Uint32,
)

from .instructions import TransferRequest, VerifyCreatorRequest
from .reconcile import leaf_from_asset, metadata_from_asset, proof_from_asset_proof

logger = logging.getLogger(__name__)


class VerifiedAsset(StrictBaseModel):
    """A compressed asset whose indexed state was confirmed against its tree."""

    tree: Pubkey
    tree_authority: Pubkey
    leaf: LeafSchema
    metadata: MetadataArgs

    leaf_hash: Bytes32
    root: Bytes32
    """Root the proof was confirmed against."""

    canopy_depth: int
    full_proof: FullProof
    truncated_proof: TruncatedProof
    result: VerificationResult

    @property
    def creators(self) -> Sequence[Creator]:
        return self.metadata.creators

    def _leaf_args(self) -> dict[str, Any]:
        return {
            "merkle_tree": self.tree,
            "tree_authority": self.tree_authority,
            "leaf_owner": self.leaf.owner,
            "leaf_delegate": self.leaf.leaf_delegate,
            "proof": self.truncated_proof,
            "root": self.root,
            "data_hash": self.leaf.data_hash,
            "creator_hash": self.leaf.creator_hash,
            "nonce": self.leaf.nonce,
            "index": Uint32(self.leaf.index),
        }

    def transfer_request(self, new_owner: Pubkey) -> TransferRequest:
        """Build the arguments of a transfer of this leaf to `new_owner`."""
        return TransferRequest(new_leaf_owner=new_owner, **self._leaf_args())

    def verify_creator_request(self, creator: Pubkey) -> VerifyCreatorRequest:
        """
        Build the arguments that verify `creator` on this leaf.

        Raises:
            ValueError: If `creator` is not listed, or is already verified.
        """
        match = next((c for c in self.metadata.creators if c.address == creator), None)
        if match is None:
            raise ValueError(f"{creator} is not a creator of asset {self.leaf.id}")
        if match.verified:
            raise ValueError(f"Creator {creator} is already verified on asset {self.leaf.id}")
        return VerifyCreatorRequest(creator=creator, message=self.metadata, **self._leaf_args())


class AssetVerifier:
    """Verifies compressed assets through a Read API client."""

    def __init__(self, client: ReadApiClient) -> None:
        self._client = client

    async def verify_asset(
        self, asset_id: Pubkey | str, tree_address: Pubkey | str | None = None
    ) -> VerifiedAsset:
        """
        Confirm an asset's indexed state against the live tree.

        When the tree address is known up front, the proof and the tree
        account are fetched concurrently so the snapshot lags the proof as
        little as possible.

        Raises:
            NotFoundError: If the asset, proof or tree account is unknown.
            MalformedResponseError: If the indexer's records disagree with themselves.
            MalformedMetadataError: If the indexed metadata cannot be hashed.
            CorruptTreeAccountError: If the tree account does not decode.
            InvalidProofError: If the proof does not commit the asset's leaf.
            StaleRootError: If the proof root has left the changelog.
            TransientRpcError: If the indexer stays unreachable after retries.
        """
        asset_id = Pubkey(asset_id)
        if tree_address is not None:
            asset, asset_proof, account_data = await asyncio.gather(
                self._client.get_asset(asset_id),
                self._client.get_asset_proof(asset_id),
                self._client.get_account_info(tree_address),
            )
            tree_address = Pubkey(tree_address)
        else:
            asset, asset_proof = await asyncio.gather(
                self._client.get_asset(asset_id),
                self._client.get_asset_proof(asset_id),
            )
            tree_address = asset_proof.tree_id
            account_data = await self._client.get_account_info(tree_address)

        self._check_records(asset_id, asset, asset_proof, tree_address)
        tree = ConcurrentMerkleTreeAccount.decode_bytes(account_data)
        return self._verify(asset, asset_proof, tree_address, tree)

    @staticmethod
    def _check_records(
        asset_id: Pubkey, asset: Asset, asset_proof: AssetProof, tree_address: Pubkey
    ) -> None:
        if asset.id != asset_id:
            raise MalformedResponseError(f"Asked for asset {asset_id}, indexer returned {asset.id}")
        if not asset.compression.compressed:
            raise MalformedResponseError(f"Asset {asset_id} is not compressed")
        if asset_proof.tree_id != tree_address:
            raise MalformedResponseError(
                f"Proof for {asset.id} names tree {asset_proof.tree_id}, expected {tree_address}"
            )
        if asset.compression.tree is not None and asset.compression.tree != tree_address:
            raise MalformedResponseError(
                f"Asset {asset.id} lives in tree {asset.compression.tree}, "
                f"but its proof names {tree_address}"
            )

    @staticmethod
    def _verify(
        asset: Asset,
        asset_proof: AssetProof,
        tree_address: Pubkey,
        tree: ConcurrentMerkleTreeAccount,
    ) -> VerifiedAsset:
        metadata = metadata_from_asset(asset)
        leaf = leaf_from_asset(asset)

        data_hash = compute_data_hash(metadata)
        if data_hash != leaf.data_hash:
            raise MalformedResponseError(
                f"Indexed data hash of {asset.id} is {leaf.data_hash}, "
                f"metadata hashes to {data_hash}"
            )
        creator_hash = compute_creator_hash(metadata.creators)
        if creator_hash != leaf.creator_hash:
            raise MalformedResponseError(
                f"Indexed creator hash of {asset.id} is {leaf.creator_hash}, "
                f"creators hash to {creator_hash}"
            )

        depth = tree.get_max_depth()
        expected_node = (1 << depth) + leaf.index
        if asset_proof.node_index is not None and asset_proof.node_index != expected_node:
            raise MalformedResponseError(
                f"Proof node index {asset_proof.node_index} does not match leaf {leaf.index} "
                f"in a tree of depth {depth}"
            )

        leaf_hash = compute_leaf_hash(leaf)
        if leaf_hash != asset_proof.leaf:
            raise InvalidProofError(
                f"Proof is for leaf {asset_proof.leaf}, asset {asset.id} hashes to {leaf_hash}"
            )

        proof = proof_from_asset_proof(asset_proof, leaf.index)
        result = verify_against_tree(proof, tree)
        canopy_depth = tree.get_canopy_depth()
        truncated = truncate(proof.proof, canopy_depth)

        logger.info(
            "Verified asset %s at leaf %d of tree %s (seq %d, %d of %d proof nodes to submit)",
            asset.id,
            leaf.index,
            tree_address,
            int(result.sequence_number),
            len(truncated),
            len(proof.proof),
        )

        return VerifiedAsset(
            tree=tree_address,
            tree_authority=tree.get_authority(),
            leaf=leaf,
            metadata=metadata,
            leaf_hash=leaf_hash,
            root=proof.root,
            canopy_depth=canopy_depth,
            full_proof=proof.proof,
            truncated_proof=truncated,
            result=result,
        )
