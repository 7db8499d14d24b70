"""Layout constants of the concurrent Merkle tree account."""

from __future__ import annotations

from typing import Final

ACCOUNT_TYPE_CONCURRENT_MERKLE_TREE: Final = 1
"""Discriminator byte of an initialized concurrent Merkle tree account."""

HEADER_VERSION_V1: Final = 0
"""Header version byte of the only supported header layout."""

HEADER_SIZE: Final = 56
"""Account type (1) + header version (1) + V1 header data (54)."""

HEADER_PADDING: Final = 5
"""Reserved bytes after the batch-initialization flag."""

NODE_SIZE: Final = 32
"""Size of a tree node, changelog root or canopy node."""

TREE_COUNTERS_SIZE: Final = 24
"""sequence_number, active_index and buffer_size, each a u64."""

INDEX_AND_PADDING_SIZE: Final = 8
"""u32 leaf index followed by u32 padding, trailing each changelog slot and the rightmost path."""

VALID_DEPTH_SIZE_PAIRS: Final[frozenset[tuple[int, int]]] = frozenset(
    {
        (3, 8),
        (5, 8),
        (6, 16),
        (7, 16),
        (8, 16),
        (9, 16),
        (10, 32),
        (11, 32),
        (12, 32),
        (13, 32),
        (14, 64),
        (14, 256),
        (14, 1024),
        (14, 2048),
        (15, 64),
        (16, 64),
        (17, 64),
        (18, 64),
        (19, 64),
        (20, 64),
        (20, 256),
        (20, 1024),
        (20, 2048),
        (24, 64),
        (24, 256),
        (24, 512),
        (24, 1024),
        (24, 2048),
        (26, 512),
        (26, 1024),
        (26, 2048),
        (30, 512),
        (30, 1024),
        (30, 2048),
    }
)
"""(max_depth, max_buffer_size) pairs the compression program will allocate."""


def changelog_slot_size(max_depth: int) -> int:
    """Bytes per changelog slot: root, one path node per level, index and padding."""
    return NODE_SIZE + NODE_SIZE * max_depth + INDEX_AND_PADDING_SIZE


def rightmost_path_size(max_depth: int) -> int:
    """Bytes of the rightmost path: proof nodes, leaf, index and padding."""
    return NODE_SIZE * max_depth + NODE_SIZE + INDEX_AND_PADDING_SIZE


def tree_size(max_depth: int, max_buffer_size: int) -> int:
    """Bytes between the header and the canopy."""
    return (
        TREE_COUNTERS_SIZE
        + max_buffer_size * changelog_slot_size(max_depth)
        + rightmost_path_size(max_depth)
    )


def canopy_size(canopy_depth: int) -> int:
    """Bytes of a canopy caching the top `canopy_depth` levels below the root."""
    return NODE_SIZE * ((1 << (canopy_depth + 1)) - 2)


def get_concurrent_merkle_tree_account_size(
    max_depth: int, max_buffer_size: int, canopy_depth: int = 0
) -> int:
    """Total account size for a tree with the given shape."""
    return HEADER_SIZE + tree_size(max_depth, max_buffer_size) + canopy_size(canopy_depth)
