"""
Deterministic leaf hashing.

A compressed leaf commits to three digests:

- the data hash, over the borsh-encoded metadata arguments and the seller fee,
- the creator hash, over the ordered creator list,
- the leaf hash itself, over the leaf schema that embeds the two digests above.

All three are pure keccak-256 computations over bytes produced in a fixed
order, so identical logical input yields identical output on every run.
"""

from __future__ import annotations

from typing import Final, Sequence

from leaf_proof.types import (
    Bytes32,
    MalformedMetadataError,
    Pubkey,
    StrictBaseModel,
    Uint64,
    keccak256,
)

from .metadata import (
    MAX_CREATOR_LIMIT,
    MAX_CREATOR_SHARE,
    MAX_NAME_LENGTH,
    MAX_SELLER_FEE_BASIS_POINTS,
    MAX_SYMBOL_LENGTH,
    MAX_URI_LENGTH,
    Creator,
    MetadataArgs,
)

LEAF_SCHEMA_VERSION: Final = 1
"""Version byte prepended to the V1 leaf schema before hashing."""


class LeafSchema(StrictBaseModel):
    """
    Committed state of a single compressed leaf.

    The index is fixed at mint time. A transfer rewrites owner and delegate
    only; the data and creator hashes change only when the content does.
    """

    id: Pubkey
    """Asset id of the leaf."""

    owner: Pubkey
    """Current leaf owner."""

    delegate: Pubkey | None = None
    """Current delegate, if any. An absent delegate is the owner."""

    nonce: Uint64
    """Leaf index within the tree."""

    data_hash: Bytes32
    creator_hash: Bytes32

    compressed: bool = True

    @property
    def leaf_delegate(self) -> Pubkey:
        """The delegate committed to the leaf: the owner when none is set."""
        return self.delegate if self.delegate is not None else self.owner

    @property
    def index(self) -> int:
        """Position of the leaf in the tree."""
        return int(self.nonce)


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def check_creators(creators: Sequence[Creator]) -> None:
    """
    Validate the creator list of a leaf.

    Share sums are not checked; that is the issuing program's concern.

    Raises:
        MalformedMetadataError: If the list is too long or a share is out of range.
    """
    if len(creators) > MAX_CREATOR_LIMIT:
        raise MalformedMetadataError(
            "creators", f"{len(creators)} creators exceeds the limit of {MAX_CREATOR_LIMIT}"
        )
    for position, creator in enumerate(creators):
        if not 0 <= creator.share <= MAX_CREATOR_SHARE:
            raise MalformedMetadataError(
                f"creators[{position}].share",
                f"{int(creator.share)} is outside 0-{MAX_CREATOR_SHARE}",
            )


def check_metadata(metadata: MetadataArgs) -> None:
    """
    Validate metadata arguments before hashing.

    Raises:
        MalformedMetadataError: If a field is over its maximum or out of range.
    """
    for field, value, limit in (
        ("name", metadata.name, MAX_NAME_LENGTH),
        ("symbol", metadata.symbol, MAX_SYMBOL_LENGTH),
        ("uri", metadata.uri, MAX_URI_LENGTH),
    ):
        if _byte_length(value) > limit:
            raise MalformedMetadataError(field, f"{_byte_length(value)} bytes exceeds {limit}")

    if metadata.seller_fee_basis_points > MAX_SELLER_FEE_BASIS_POINTS:
        raise MalformedMetadataError(
            "seller_fee_basis_points",
            f"{int(metadata.seller_fee_basis_points)} exceeds {MAX_SELLER_FEE_BASIS_POINTS}",
        )

    check_creators(metadata.creators)


def compute_creator_hash(creators: Sequence[Creator]) -> Bytes32:
    """
    Hash the creator list in the exact order supplied.

    Each creator contributes `address || verified || share`. Creator order is
    part of the committed leaf state, so reordering the same set changes the
    digest.
    """
    check_creators(creators)
    return keccak256(*(creator.encode_bytes() for creator in creators))


def compute_data_hash(metadata: MetadataArgs) -> Bytes32:
    """
    Hash the metadata arguments of a leaf.

    The borsh encoding of the arguments is hashed first, then that digest is
    hashed again together with the little-endian seller fee.
    """
    check_metadata(metadata)
    metadata_args_hash = keccak256(metadata.encode_bytes())
    return keccak256(metadata_args_hash, metadata.seller_fee_basis_points.encode_bytes())


def compute_leaf_hash(leaf: LeafSchema) -> Bytes32:
    """
    Hash a V1 leaf schema into the node stored at the bottom of the tree.

    Layout: `version || id || owner || delegate || nonce || data_hash || creator_hash`.
    """
    return keccak256(
        bytes([LEAF_SCHEMA_VERSION]),
        leaf.id,
        leaf.owner,
        leaf.leaf_delegate,
        leaf.nonce.encode_bytes(),
        leaf.data_hash,
        leaf.creator_hash,
    )
