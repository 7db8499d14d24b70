"""Canonical content, creator and leaf hashing for compressed assets."""

from .leaf import (
    LeafSchema,
    check_creators,
    check_metadata,
    compute_creator_hash,
    compute_data_hash,
    compute_leaf_hash,
)
from .metadata import (
    Collection,
    Creator,
    MetadataArgs,
    TokenProgramVersion,
    TokenStandard,
    UseMethod,
    Uses,
)

__all__ = [
    "Collection",
    "Creator",
    "LeafSchema",
    "MetadataArgs",
    "TokenProgramVersion",
    "TokenStandard",
    "UseMethod",
    "Uses",
    "check_creators",
    "check_metadata",
    "compute_creator_hash",
    "compute_data_hash",
    "compute_leaf_hash",
]
