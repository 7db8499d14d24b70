"""Reusable type definitions for compressed leaf verification."""

from .base import CamelModel, StrictBaseModel
from .base58 import Base58
from .byte_arrays import ZERO_HASH, BaseBytes, Bytes32, Pubkey
from .exceptions import (
    CanopyDeeperThanProofError,
    CorruptTreeAccountError,
    IndexOutOfRangeError,
    InvalidProofError,
    InvalidProofLengthError,
    LeafProofError,
    MalformedMetadataError,
    MalformedResponseError,
    NotFoundError,
    StaleRootError,
    TransientRpcError,
)
from .hash import keccak256
from .uint import BaseUint, Uint8, Uint16, Uint32, Uint64

__all__ = [
    # Core types
    "Base58",
    "BaseBytes",
    "BaseUint",
    "Bytes32",
    "Pubkey",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "ZERO_HASH",
    "CamelModel",
    "StrictBaseModel",
    "keccak256",
    # Exceptions
    "LeafProofError",
    "NotFoundError",
    "MalformedMetadataError",
    "MalformedResponseError",
    "InvalidProofLengthError",
    "IndexOutOfRangeError",
    "CanopyDeeperThanProofError",
    "StaleRootError",
    "InvalidProofError",
    "CorruptTreeAccountError",
    "TransientRpcError",
]
