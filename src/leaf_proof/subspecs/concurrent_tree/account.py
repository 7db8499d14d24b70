"""
Concurrent Merkle tree account.

The account is a fixed layout of little-endian fields:

+--------------------+--------------------------------------------------------+
| Region             | Contents                                               |
+====================+========================================================+
| header (56)        | account type u8, header version u8, max_buffer_size    |
|                    | u32, max_depth u32, authority [32], creation_slot u64, |
|                    | is_batch_initialized bool, padding [5]                 |
+--------------------+--------------------------------------------------------+
| counters (24)      | sequence_number u64, active_index u64, buffer_size u64 |
+--------------------+--------------------------------------------------------+
| changelog          | max_buffer_size slots of root [32], path [32 * depth], |
|                    | index u32, padding u32                                 |
+--------------------+--------------------------------------------------------+
| rightmost path     | proof [32 * depth], leaf [32], index u32, padding u32  |
+--------------------+--------------------------------------------------------+
| canopy             | 2^(canopy_depth + 1) - 2 cached nodes of 32 bytes      |
+--------------------+--------------------------------------------------------+

The changelog slots form a ring: `active_index` points at the newest root and
the `buffer_size` slots behind it (wrapping) hold the older retained roots.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import Field, model_validator

from leaf_proof.types import (
    Bytes32,
    CorruptTreeAccountError,
    Pubkey,
    StrictBaseModel,
    Uint8,
    Uint32,
    Uint64,
)
from leaf_proof.types.borsh import BorshReader, encode_bool

from .changelog import ChangeLog, ChangeLogEntry
from .constants import (
    ACCOUNT_TYPE_CONCURRENT_MERKLE_TREE,
    HEADER_PADDING,
    HEADER_SIZE,
    HEADER_VERSION_V1,
    NODE_SIZE,
    VALID_DEPTH_SIZE_PAIRS,
    tree_size,
)

logger = logging.getLogger(__name__)


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


class TreeHeader(StrictBaseModel):
    """Immutable tree parameters fixed at creation."""

    max_buffer_size: Uint32
    """Capacity of the changelog."""

    max_depth: Uint32
    """Number of levels below the root; the tree holds 2^max_depth leaves."""

    authority: Pubkey
    """Account allowed to modify the tree."""

    creation_slot: Uint64
    """Slot at which the tree was initialized."""

    is_batch_initialized: bool = False

    def encode_bytes(self) -> bytes:
        """Serialize with the account type and header version prefix."""
        return b"".join(
            [
                Uint8(ACCOUNT_TYPE_CONCURRENT_MERKLE_TREE).encode_bytes(),
                Uint8(HEADER_VERSION_V1).encode_bytes(),
                self.max_buffer_size.encode_bytes(),
                self.max_depth.encode_bytes(),
                self.authority.encode_bytes(),
                self.creation_slot.encode_bytes(),
                encode_bool(self.is_batch_initialized),
                b"\x00" * HEADER_PADDING,
            ]
        )


class RightmostPath(StrictBaseModel):
    """Proof of the most recently appended leaf, used by the program for appends."""

    proof: Sequence[Bytes32]
    leaf: Bytes32
    index: Uint32


class ConcurrentMerkleTreeAccount(StrictBaseModel):
    """
    Decoded snapshot of a concurrent Merkle tree account.

    Snapshots are read-only and discarded after the verification they support.
    """

    header: TreeHeader
    active_index: Uint64
    changelog: ChangeLog
    rightmost_path: RightmostPath
    canopy: Sequence[Bytes32] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def check_layout(self) -> ConcurrentMerkleTreeAccount:
        """Ensure the parts agree with the header."""
        depth = int(self.header.max_depth)
        capacity = int(self.header.max_buffer_size)

        if (depth, capacity) not in VALID_DEPTH_SIZE_PAIRS:
            raise ValueError(f"Unsupported max depth / buffer size pair ({depth}, {capacity})")
        if self.changelog.capacity != capacity:
            raise ValueError(
                f"Changelog capacity {self.changelog.capacity} differs from "
                f"max buffer size {capacity}"
            )
        if len(self.changelog) == 0:
            raise ValueError("Changelog holds no root")
        if self.active_index >= capacity:
            raise ValueError(f"Active index {int(self.active_index)} outside buffer of {capacity}")
        if len(self.rightmost_path.proof) != depth:
            raise ValueError(
                f"Rightmost path has {len(self.rightmost_path.proof)} nodes, expected {depth}"
            )
        if not _is_power_of_two(len(self.canopy) + 2):
            raise ValueError(f"{len(self.canopy)} canopy nodes do not form a complete canopy")
        if self.get_canopy_depth() > depth:
            raise ValueError(f"Canopy depth {self.get_canopy_depth()} exceeds max depth {depth}")
        return self

    def current_root(self) -> Bytes32:
        """Root of the newest changelog entry."""
        return self.changelog.current().root

    def get_current_seq(self) -> int:
        """Sequence number of the newest changelog entry."""
        return int(self.changelog.current().sequence_number)

    def find_root(self, candidate: Bytes32) -> ChangeLogEntry | None:
        """The changelog entry holding `candidate`, if it is still retained."""
        return self.changelog.find(candidate)

    def is_root_valid(self, candidate: Bytes32) -> bool:
        """
        Whether `candidate` is any root still retained by the changelog.

        The newest root is not the only acceptable one: the program fast-forwards
        proofs against any retained root, so a root that was current moments ago
        still verifies.
        """
        return candidate in self.changelog

    def get_authority(self) -> Pubkey:
        """Account allowed to modify the tree."""
        return self.header.authority

    def get_canopy_depth(self) -> int:
        """Number of levels below the root cached on-chain."""
        return (len(self.canopy) + 2).bit_length() - 2

    def get_max_depth(self) -> int:
        """Number of levels below the root."""
        return int(self.header.max_depth)

    def get_max_buffer_size(self) -> int:
        """Changelog capacity."""
        return int(self.header.max_buffer_size)

    def get_creation_slot(self) -> int:
        """Slot at which the tree was initialized."""
        return int(self.header.creation_slot)

    def encode_bytes(self) -> bytes:
        """
        Serialize into the account layout.

        Changelog slots not covered by a retained entry encode as zeros.

        Raises:
            ValueError: If the retained sequence numbers are not contiguous, since
                the layout stores only the newest one.
        """
        depth = self.get_max_depth()
        capacity = self.get_max_buffer_size()
        entries = list(self.changelog)
        newest = int(entries[-1].sequence_number)

        empty_slot = b"\x00" * (NODE_SIZE * (depth + 1) + 8)
        slots = [empty_slot] * capacity
        for age, entry in enumerate(reversed(entries)):
            if int(entry.sequence_number) != newest - age:
                raise ValueError("Changelog sequence numbers must be contiguous to encode")
            path = list(entry.path_nodes) or [Bytes32.zero()] * depth
            if len(path) != depth:
                raise ValueError(f"Changelog path has {len(path)} nodes, expected {depth}")
            slots[(int(self.active_index) - age) % capacity] = b"".join(
                [entry.root, *path, entry.index.encode_bytes(), b"\x00" * 4]
            )

        return b"".join(
            [
                self.header.encode_bytes(),
                Uint64(newest).encode_bytes(),
                self.active_index.encode_bytes(),
                Uint64(len(entries)).encode_bytes(),
                *slots,
                *self.rightmost_path.proof,
                self.rightmost_path.leaf,
                self.rightmost_path.index.encode_bytes(),
                b"\x00" * 4,
                *self.canopy,
            ]
        )

    @classmethod
    def decode_bytes(cls, data: bytes) -> ConcurrentMerkleTreeAccount:
        """
        Decode raw account data.

        Raises:
            CorruptTreeAccountError: If the bytes are not a consistent tree account.
                Never verify against an account that fails to decode.
        """
        try:
            account = cls._decode(data)
        except CorruptTreeAccountError:
            raise
        except ValueError as e:
            raise CorruptTreeAccountError(f"Failed to decode tree account: {e}") from e

        logger.debug(
            "Decoded tree account: depth=%d buffer=%d canopy=%d seq=%d",
            account.get_max_depth(),
            account.get_max_buffer_size(),
            account.get_canopy_depth(),
            account.get_current_seq(),
        )
        return account

    @classmethod
    def _decode(cls, data: bytes) -> ConcurrentMerkleTreeAccount:
        if len(data) < HEADER_SIZE:
            raise CorruptTreeAccountError(
                f"Account is {len(data)} bytes, shorter than the {HEADER_SIZE}-byte header"
            )

        reader = BorshReader(data)
        account_type = reader.read_uint(Uint8)
        if account_type != ACCOUNT_TYPE_CONCURRENT_MERKLE_TREE:
            raise CorruptTreeAccountError(f"Unexpected account type {int(account_type)}")
        version = reader.read_uint(Uint8)
        if version != HEADER_VERSION_V1:
            raise CorruptTreeAccountError(f"Unsupported header version {int(version)}")

        header = TreeHeader(
            max_buffer_size=reader.read_uint(Uint32),
            max_depth=reader.read_uint(Uint32),
            authority=reader.read_fixed(Pubkey),
            creation_slot=reader.read_uint(Uint64),
            is_batch_initialized=reader.read_bool(),
        )
        reader.skip(HEADER_PADDING)

        depth = int(header.max_depth)
        capacity = int(header.max_buffer_size)
        if (depth, capacity) not in VALID_DEPTH_SIZE_PAIRS:
            raise CorruptTreeAccountError(
                f"Header declares unsupported depth/buffer pair ({depth}, {capacity})"
            )

        # The header bounds the tree region; whatever follows must be a whole canopy.
        body_end = HEADER_SIZE + tree_size(depth, capacity)
        if len(data) < body_end:
            raise CorruptTreeAccountError(
                f"Account is {len(data)} bytes but depth {depth} and buffer {capacity} "
                f"require at least {body_end}"
            )
        canopy_bytes = len(data) - body_end
        if canopy_bytes % NODE_SIZE or not _is_power_of_two(canopy_bytes // NODE_SIZE + 2):
            raise CorruptTreeAccountError(
                f"Trailing {canopy_bytes} bytes are not a valid canopy for depth {depth}"
            )

        sequence_number = int(reader.read_uint(Uint64))
        active_index = reader.read_uint(Uint64)
        buffer_size = int(reader.read_uint(Uint64))
        if not 1 <= buffer_size <= capacity:
            raise CorruptTreeAccountError(f"Buffer size {buffer_size} outside 1..{capacity}")
        if active_index >= capacity:
            raise CorruptTreeAccountError(f"Active index {int(active_index)} outside buffer")
        if sequence_number < buffer_size - 1:
            raise CorruptTreeAccountError(
                f"Sequence number {sequence_number} cannot retain {buffer_size} roots"
            )

        slots: list[tuple[Bytes32, list[Bytes32], Uint32]] = []
        for _ in range(capacity):
            root = reader.read_fixed(Bytes32)
            path = [reader.read_fixed(Bytes32) for _ in range(depth)]
            index = reader.read_uint(Uint32)
            reader.skip(4)
            slots.append((root, path, index))

        rightmost_path = RightmostPath(
            proof=[reader.read_fixed(Bytes32) for _ in range(depth)],
            leaf=reader.read_fixed(Bytes32),
            index=reader.read_uint(Uint32),
        )
        reader.skip(4)

        canopy = [reader.read_fixed(Bytes32) for _ in range(reader.remaining // NODE_SIZE)]

        # Walk the ring from the oldest retained slot to the active one.
        changelog = ChangeLog(capacity)
        for age in range(buffer_size - 1, -1, -1):
            root, path, index = slots[(int(active_index) - age) % capacity]
            changelog.push(
                ChangeLogEntry(
                    sequence_number=Uint64(sequence_number - age),
                    root=root,
                    index=index,
                    path_nodes=path,
                )
            )

        return cls(
            header=header,
            active_index=active_index,
            changelog=changelog,
            rightmost_path=rightmost_path,
            canopy=canopy,
        )
