"""Subspecifications for compressed leaf verification."""

from .read_api import ReadApiClient
from .verification import AssetVerifier, VerifiedAsset

__all__ = [
    "AssetVerifier",
    "ReadApiClient",
    "VerifiedAsset",
]
