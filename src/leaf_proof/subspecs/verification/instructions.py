"""
Instruction arguments for leaf-mutating operations.

A leaf-mutating instruction names the leaf by its full committed state plus a
proof. The proof travels as trailing read-only accounts, one per node, and
must already be truncated to the tree's canopy depth.
"""

from __future__ import annotations

from leaf_proof.subspecs.hashing import MetadataArgs
from leaf_proof.subspecs.merkle import TruncatedProof
from leaf_proof.types import Bytes32, Pubkey, StrictBaseModel, Uint32, Uint64


class AccountMeta(StrictBaseModel):
    """An account reference attached to an instruction."""

    pubkey: Pubkey
    is_signer: bool = False
    is_writable: bool = False


class LeafInstructionArgs(StrictBaseModel):
    """Accounts and arguments shared by every instruction that rewrites a leaf."""

    merkle_tree: Pubkey
    tree_authority: Pubkey
    leaf_owner: Pubkey
    leaf_delegate: Pubkey

    proof: TruncatedProof
    """Proof with the canopy-cached nodes removed."""

    root: Bytes32
    """Root the proof was built against; the program checks it against its changelog."""

    data_hash: Bytes32
    creator_hash: Bytes32
    nonce: Uint64
    index: Uint32

    @property
    def proof_accounts(self) -> list[AccountMeta]:
        """The proof nodes as trailing read-only, non-signer accounts."""
        return [AccountMeta(pubkey=Pubkey(node)) for node in self.proof]


class TransferRequest(LeafInstructionArgs):
    """Arguments of a leaf transfer to `new_leaf_owner`."""

    new_leaf_owner: Pubkey


class VerifyCreatorRequest(LeafInstructionArgs):
    """
    Arguments of a creator verification.

    The program rehashes `message` to confirm it matches `data_hash`, then
    flips the creator's verified flag and recomputes the creator hash.
    """

    creator: Pubkey
    message: MetadataArgs
