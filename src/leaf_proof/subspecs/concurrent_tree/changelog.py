"""
Changelog ring buffer of a concurrent Merkle tree.

A concurrent tree keeps the last `max_buffer_size` committed roots rather than
a single current root. Writers racing against each other may submit proofs
against a root that was current moments ago; the program accepts any root
still in the buffer.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, Sequence

from pydantic import Field

from leaf_proof.types import Bytes32, StrictBaseModel, Uint32, Uint64


class ChangeLogEntry(StrictBaseModel):
    """One committed root and the write that produced it."""

    sequence_number: Uint64
    """Monotonic write counter of the tree at the time of this root."""

    root: Bytes32
    """Tree root after the write."""

    index: Uint32 = Uint32(0)
    """Leaf index modified by the write."""

    path_nodes: Sequence[Bytes32] = Field(default_factory=tuple)
    """Updated nodes along the modified leaf's path, leaf level first."""


class ChangeLog:
    """
    Fixed-capacity FIFO of changelog entries, oldest first.

    Appending to a full buffer evicts the oldest entry explicitly. The newest
    entry is always the current root.
    """

    def __init__(self, capacity: int, entries: Sequence[ChangeLogEntry] = ()) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: deque[ChangeLogEntry] = deque()
        for entry in entries:
            self.push(entry)

    @property
    def capacity(self) -> int:
        """Maximum number of retained roots."""
        return self._capacity

    def push(self, entry: ChangeLogEntry) -> ChangeLogEntry | None:
        """
        Append the newest entry, returning the evicted oldest entry if the buffer was full.

        Raises:
            ValueError: If the sequence number does not advance past the newest entry.
        """
        if self._entries and entry.sequence_number <= self._entries[-1].sequence_number:
            raise ValueError(
                f"Sequence number {int(entry.sequence_number)} does not advance past "
                f"{int(self._entries[-1].sequence_number)}"
            )

        evicted = self._entries.popleft() if len(self._entries) == self._capacity else None
        self._entries.append(entry)
        return evicted

    def current(self) -> ChangeLogEntry:
        """The newest entry."""
        if not self._entries:
            raise LookupError("Changelog is empty")
        return self._entries[-1]

    def find(self, root: Bytes32) -> ChangeLogEntry | None:
        """Return the newest retained entry with the given root, if any."""
        for entry in reversed(self._entries):
            if entry.root == root:
                return entry
        return None

    def __contains__(self, root: object) -> bool:
        if not isinstance(root, bytes) or len(root) != Bytes32.LENGTH:
            return False
        return self.find(Bytes32(root)) is not None

    def __iter__(self) -> Iterator[ChangeLogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ChangeLog(capacity={self._capacity}, entries={len(self._entries)})"
