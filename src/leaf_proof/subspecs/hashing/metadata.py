"""
Leaf metadata arguments.

These models mirror the metadata arguments a compressed asset was minted
with. Their borsh encoding, in declaration order, is what the data hash
commits to, so field order here is part of the hash format.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final, Sequence

from pydantic import Field

from leaf_proof.types import Pubkey, StrictBaseModel, Uint8, Uint16, Uint64
from leaf_proof.types.borsh import (
    encode_bool,
    encode_enum,
    encode_option,
    encode_string,
    encode_vec,
)

MAX_NAME_LENGTH: Final = 32
"""Maximum UTF-8 byte length of an asset name."""

MAX_SYMBOL_LENGTH: Final = 10
"""Maximum UTF-8 byte length of an asset symbol."""

MAX_URI_LENGTH: Final = 200
"""Maximum UTF-8 byte length of a metadata URI."""

MAX_CREATOR_LIMIT: Final = 5
"""Maximum number of creators on a single leaf."""

MAX_SELLER_FEE_BASIS_POINTS: Final = 10_000
"""Royalties are expressed in basis points; 10,000 bps is 100%."""

MAX_CREATOR_SHARE: Final = 100
"""Creator shares are percentages."""


class TokenStandard(IntEnum):
    """Token standard of the asset, encoded by variant index."""

    NON_FUNGIBLE = 0
    FUNGIBLE_ASSET = 1
    FUNGIBLE = 2
    NON_FUNGIBLE_EDITION = 3


class TokenProgramVersion(IntEnum):
    """Token program the asset targets, encoded by variant index."""

    ORIGINAL = 0
    TOKEN_2022 = 1


class UseMethod(IntEnum):
    """How a limited-use asset is consumed."""

    BURN = 0
    MULTIPLE = 1
    SINGLE = 2


class Creator(StrictBaseModel):
    """A party entitled to attribution and royalties on a leaf."""

    address: Pubkey
    verified: bool
    share: Uint8

    def encode_bytes(self) -> bytes:
        """Borsh layout: address, verified flag, share."""
        return self.address.encode_bytes() + encode_bool(self.verified) + self.share.encode_bytes()


class Collection(StrictBaseModel):
    """Reference to the collection the leaf belongs to."""

    verified: bool
    key: Pubkey

    def encode_bytes(self) -> bytes:
        """Borsh layout: verified flag, then collection mint."""
        return encode_bool(self.verified) + self.key.encode_bytes()


class Uses(StrictBaseModel):
    """Usage counter attached to limited-use assets."""

    use_method: UseMethod
    remaining: Uint64
    total: Uint64

    def encode_bytes(self) -> bytes:
        """Borsh layout: method, remaining, total."""
        return (
            encode_enum(self.use_method)
            + self.remaining.encode_bytes()
            + self.total.encode_bytes()
        )


class MetadataArgs(StrictBaseModel):
    """The canonical metadata committed to by a leaf's data hash."""

    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: Uint16
    primary_sale_happened: bool
    is_mutable: bool
    edition_nonce: Uint8 | None = None
    token_standard: TokenStandard | None = TokenStandard.NON_FUNGIBLE
    collection: Collection | None = None
    uses: Uses | None = None
    token_program_version: TokenProgramVersion = TokenProgramVersion.ORIGINAL
    creators: Sequence[Creator] = Field(default_factory=tuple)

    def encode_bytes(self) -> bytes:
        """
        Borsh-encode the arguments in their fixed field order.

        The encoding is independent of how the model was built: keyword order,
        aliases or dict iteration order never reach the output.
        """
        return b"".join(
            [
                encode_string(self.name),
                encode_string(self.symbol),
                encode_string(self.uri),
                self.seller_fee_basis_points.encode_bytes(),
                encode_bool(self.primary_sale_happened),
                encode_bool(self.is_mutable),
                encode_option(self.edition_nonce, Uint8.encode_bytes),
                encode_option(self.token_standard, encode_enum),
                encode_option(self.collection, Collection.encode_bytes),
                encode_option(self.uses, Uses.encode_bytes),
                encode_enum(self.token_program_version),
                encode_vec(self.creators, Creator.encode_bytes),
            ]
        )
