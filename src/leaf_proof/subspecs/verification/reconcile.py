"""Rebuilding committed leaf state from indexer records."""

from __future__ import annotations

from pydantic import ValidationError

from leaf_proof.subspecs.hashing import (
    Collection,
    Creator,
    LeafSchema,
    MetadataArgs,
    TokenProgramVersion,
    TokenStandard,
)
from leaf_proof.subspecs.merkle import FullProof, MerkleTreeProof
from leaf_proof.subspecs.read_api import Asset, AssetProof
from leaf_proof.types import MalformedMetadataError, MalformedResponseError


def creators_from_asset(asset: Asset) -> list[Creator]:
    """The asset's creators, in the order the indexer reports them."""
    return [
        Creator(address=creator.address, verified=creator.verified, share=creator.share)
        for creator in asset.creators
    ]


def metadata_from_asset(asset: Asset) -> MetadataArgs:
    """
    Rebuild the metadata arguments a leaf was minted with.

    The indexer does not echo every minted field, so some are fixed:
    - the collection, when present, is taken as verified (minting into a
      collection verifies it),
    - the token standard is non-fungible and the token program the original one,
    - assets carry no uses.

    Raises:
        MalformedMetadataError: If the indexed values do not fit the metadata model.
    """
    collection = asset.collection
    try:
        return MetadataArgs(
            name=asset.content.metadata.name,
            symbol=asset.content.metadata.symbol,
            uri=asset.content.json_uri,
            seller_fee_basis_points=asset.royalty.basis_points,
            primary_sale_happened=asset.royalty.primary_sale_happened,
            is_mutable=asset.mutable,
            edition_nonce=asset.supply.edition_nonce if asset.supply is not None else None,
            token_standard=TokenStandard.NON_FUNGIBLE,
            collection=Collection(verified=True, key=collection) if collection else None,
            uses=None,
            token_program_version=TokenProgramVersion.ORIGINAL,
            creators=creators_from_asset(asset),
        )
    except ValidationError as exc:
        raise MalformedMetadataError("metadata", str(exc)) from exc


def leaf_from_asset(asset: Asset) -> LeafSchema:
    """
    Extract the committed leaf schema of a compressed asset.

    Raises:
        MalformedResponseError: If the asset is not compressed or lacks its hashes.
    """
    compression = asset.compression
    if not compression.compressed:
        raise MalformedResponseError(f"Asset {asset.id} is not compressed")
    if compression.data_hash is None or compression.creator_hash is None:
        raise MalformedResponseError(f"Compressed asset {asset.id} is missing its leaf hashes")

    return LeafSchema(
        id=asset.id,
        owner=asset.ownership.owner,
        delegate=asset.ownership.delegate,
        nonce=compression.leaf_id,
        data_hash=compression.data_hash,
        creator_hash=compression.creator_hash,
        compressed=True,
    )


def proof_from_asset_proof(asset_proof: AssetProof, leaf_index: int) -> MerkleTreeProof:
    """Wrap an indexer proof into a full proof for off-chain verification."""
    return MerkleTreeProof(
        leaf_index=leaf_index,
        leaf=asset_proof.leaf,
        root=asset_proof.root,
        proof=FullProof(asset_proof.proof),
    )
