"""Decoded concurrent Merkle tree accounts and their changelog of valid roots."""

from .account import ConcurrentMerkleTreeAccount, RightmostPath, TreeHeader
from .changelog import ChangeLog, ChangeLogEntry
from .constants import VALID_DEPTH_SIZE_PAIRS, get_concurrent_merkle_tree_account_size

__all__ = [
    "ChangeLog",
    "ChangeLogEntry",
    "ConcurrentMerkleTreeAccount",
    "RightmostPath",
    "TreeHeader",
    "VALID_DEPTH_SIZE_PAIRS",
    "get_concurrent_merkle_tree_account_size",
]
