"""
Proof path types.

A proof path is the ordered list of sibling hashes from the leaf level up to,
but excluding, the root. Two variants exist and must never be confused:

- `FullProof` has one node per tree level. Only a full proof can reconstruct
  the root off-chain.
- `TruncatedProof` omits the levels cached in the tree's canopy. Only a
  truncated proof may accompany a state-changing instruction; the on-chain
  program rejects a full one.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from leaf_proof.types import Bytes32


class ProofPath(tuple[Bytes32, ...]):
    """An immutable, ordered sequence of sibling hashes, leaf level first."""

    def __new__(cls, nodes: Iterable[Any] = ()) -> Self:
        """Coerce every node (bytes or base58 string) into a `Bytes32`."""
        return super().__new__(cls, (Bytes32(node) for node in nodes))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Only accept instances of the exact path type, never a bare list."""
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda path: [node.to_base58() for node in path]
            ),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[node.to_base58() for node in self]})"


class FullProof(ProofPath):
    """Complete sibling path: exactly one node per tree level."""


class TruncatedProof(ProofPath):
    """Sibling path with the canopy levels removed, ready for an instruction."""
