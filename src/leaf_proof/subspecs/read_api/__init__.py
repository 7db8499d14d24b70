"""
Read API boundary.

Provides an asynchronous client for the indexer methods the verifier consumes:
- getAsset: indexed leaf state and metadata
- getAssetProof: full proof of a leaf
- getAssetsByOwner: paginated asset listing
- getAccountInfo: raw tree account data
"""

from .client import ReadApiClient
from .schemas import (
    Asset,
    AssetCreator,
    AssetList,
    AssetProof,
    AssetSortBy,
    AssetSortDirection,
)

__all__ = [
    "Asset",
    "AssetCreator",
    "AssetList",
    "AssetProof",
    "AssetSortBy",
    "AssetSortDirection",
    "ReadApiClient",
]
