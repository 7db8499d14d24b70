"""
Read API request and response schemas.

Indexer responses are validated here, at the boundary, so that a missing or
mistyped field surfaces as `MalformedResponseError` instead of leaking into
the hashing and verification code as `None` or a wrong-length hash.

Responses use snake_case keys; request parameters use camelCase.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leaf_proof.types import (
    Bytes32,
    CamelModel,
    MalformedResponseError,
    Pubkey,
    Uint8,
    Uint16,
    Uint64,
)


class RpcModel(BaseModel):
    """Immutable response model that tolerates fields it does not use."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class AssetSortBy(StrEnum):
    """Sort keys accepted by `getAssetsByOwner`."""

    CREATED = "created"
    UPDATED = "updated"
    RECENT_ACTION = "recent_action"


class AssetSortDirection(StrEnum):
    """Sort directions accepted by `getAssetsByOwner`."""

    ASC = "asc"
    DESC = "desc"


class AssetSorting(CamelModel):
    """The `sortBy` parameter object."""

    sort_by: AssetSortBy = AssetSortBy.CREATED
    sort_direction: AssetSortDirection = AssetSortDirection.ASC


class GetAssetsByOwnerParams(CamelModel):
    """Parameters of `getAssetsByOwner`. Unset fields are omitted from the request."""

    owner_address: Pubkey
    sort_by: AssetSorting = Field(default_factory=AssetSorting)
    limit: int | None = Field(default=None, gt=0)
    page: int | None = Field(default=None, gt=0)
    before: str | None = None
    after: str | None = None


class AssetCreator(RpcModel):
    """A creator as reported by the indexer."""

    address: Pubkey
    share: Uint8
    verified: bool


class AssetMetadata(RpcModel):
    """Off-chain metadata fields the indexer echoes back. Both may be absent."""

    name: str = ""
    symbol: str = ""


class AssetContent(RpcModel):
    """Content block of an asset."""

    json_uri: str
    metadata: AssetMetadata = Field(default_factory=AssetMetadata)


class AssetCompression(RpcModel):
    """Compression block of an asset. Hashes are empty for uncompressed assets."""

    compressed: bool
    eligible: bool = False
    data_hash: Bytes32 | None = None
    creator_hash: Bytes32 | None = None
    asset_hash: Bytes32 | None = None
    tree: Pubkey | None = None
    seq: Uint64 = Uint64(0)
    leaf_id: Uint64 = Uint64(0)

    @field_validator("data_hash", "creator_hash", "asset_hash", "tree", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        """The indexer reports absent hashes as empty strings."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AssetGrouping(RpcModel):
    """A grouping (e.g. collection membership) of an asset."""

    group_key: str
    group_value: str


class AssetRoyalty(RpcModel):
    """Royalty block of an asset."""

    basis_points: Uint16
    primary_sale_happened: bool
    royalty_model: str = "creators"
    locked: bool = False


class AssetOwnership(RpcModel):
    """Ownership block of an asset."""

    owner: Pubkey
    delegate: Pubkey | None = None
    delegated: bool = False
    frozen: bool = False

    @field_validator("delegate", mode="before")
    @classmethod
    def _empty_delegate(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AssetSupply(RpcModel):
    """Supply block of an asset."""

    edition_nonce: Uint8 | None = None
    print_max_supply: int | None = None
    print_current_supply: int | None = None


class Asset(RpcModel):
    """An asset as returned by `getAsset` and inside `getAssetsByOwner` pages."""

    id: Pubkey
    interface: str = ""
    content: AssetContent
    compression: AssetCompression
    grouping: Sequence[AssetGrouping] = Field(default_factory=tuple)
    royalty: AssetRoyalty
    creators: Sequence[AssetCreator] = Field(default_factory=tuple)
    ownership: AssetOwnership
    supply: AssetSupply | None = None
    mutable: bool
    burnt: bool = False

    @property
    def collection(self) -> Pubkey | None:
        """Mint of the collection this asset belongs to, if grouped into one."""
        for group in self.grouping:
            if group.group_key == "collection":
                try:
                    return Pubkey(group.group_value)
                except ValueError as e:
                    raise MalformedResponseError(
                        f"Asset {self.id} has an invalid collection grouping: {e}"
                    ) from e
        return None


class AssetProof(RpcModel):
    """Result of `getAssetProof`: the full proof, never truncated by the indexer."""

    root: Bytes32
    proof: Sequence[Bytes32]
    node_index: int | None = None
    leaf: Bytes32
    tree_id: Pubkey


class AssetList(RpcModel):
    """One page of `getAssetsByOwner`."""

    total: int
    limit: int
    page: int | None = None
    before: str | None = None
    after: str | None = None
    items: Sequence[Asset] = Field(default_factory=tuple)
