"""Node hashing helpers for concurrent Merkle trees."""

from functools import lru_cache

from leaf_proof.types import ZERO_HASH, Bytes32, keccak256


def hash_nodes(left: Bytes32, right: Bytes32) -> Bytes32:
    """Hashes two 32-byte nodes together using keccak-256."""
    return keccak256(left, right)


@lru_cache(maxsize=64)
def empty_node(level: int) -> Bytes32:
    """
    Root of an empty subtree of height `level`.

    Level 0 is an empty leaf (all zeros); each level above hashes two copies
    of the level below.
    """
    if level < 0:
        raise ValueError(f"level must be non-negative, got {level}")
    if level == 0:
        return ZERO_HASH
    child = empty_node(level - 1)
    return hash_nodes(child, child)
