"""
Exception hierarchy for the verification layer.

Local components never correct data: they raise one of the errors below and
let the caller decide. Only the Read API client retries, and only for
`TransientRpcError`.
"""

from __future__ import annotations

from typing import ClassVar


class LeafProofError(Exception):
    """
    Base exception for all verification errors.

    Attributes:
        message: Human-readable error description.
    """

    retryable: ClassVar[bool] = False
    """Whether repeating the same request may succeed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class NotFoundError(LeafProofError):
    """The asset, its proof, or the tree account does not exist."""


class MalformedMetadataError(LeafProofError):
    """
    Raised when leaf metadata is missing a required field or holds an out-of-range value.

    Attributes:
        field: The offending field name.
    """

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        super().__init__(f"Malformed metadata field '{field}': {detail}")


class MalformedResponseError(LeafProofError):
    """The indexer returned data that violates the response schema or contradicts itself."""


class InvalidProofLengthError(LeafProofError):
    """
    Raised when a proof path does not have exactly one sibling per tree level.

    Attributes:
        expected: The tree depth.
        actual: The number of siblings supplied.
    """

    def __init__(self, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Proof requires exactly {expected} nodes, got {actual}")


class IndexOutOfRangeError(LeafProofError):
    """
    Raised when a leaf index does not address a leaf of the tree.

    Attributes:
        index: The leaf index supplied.
        depth: The tree depth.
    """

    def __init__(self, *, index: int, depth: int) -> None:
        self.index = index
        self.depth = depth
        super().__init__(f"Leaf index {index} is out of range for a tree of depth {depth}")


class CanopyDeeperThanProofError(LeafProofError):
    """
    Raised when a canopy holds more levels than the proof being truncated.

    Attributes:
        canopy_depth: The canopy depth of the tree.
        proof_length: The length of the full proof.
    """

    def __init__(self, *, canopy_depth: int, proof_length: int) -> None:
        self.canopy_depth = canopy_depth
        self.proof_length = proof_length
        super().__init__(
            f"Canopy depth {canopy_depth} exceeds proof length {proof_length}"
        )


class StaleRootError(LeafProofError):
    """
    The proof's root is not present in the tree's changelog.

    Not inherently fatal: the tree may have moved past the indexer's view.
    Re-fetching the proof usually resolves it.
    """


class InvalidProofError(LeafProofError):
    """The proof does not reconstruct the claimed root. Never submit a request built on it."""


class CorruptTreeAccountError(LeafProofError):
    """The tree account bytes cannot be decoded into a consistent tree."""


class TransientRpcError(LeafProofError):
    """A network failure, timeout, or overloaded RPC node. Safe to retry with backoff."""

    retryable = True
