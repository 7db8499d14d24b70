"""Merkle proof reconstruction and verification for concurrent Merkle trees."""

from .path import FullProof, ProofPath, TruncatedProof
from .proof import MerkleTreeProof, calculate_root, verify
from .tree import MerkleTree
from .utils import empty_node, hash_nodes
from .verifier import VerificationResult, verify_against_tree

__all__ = [
    "FullProof",
    "MerkleTree",
    "MerkleTreeProof",
    "ProofPath",
    "TruncatedProof",
    "VerificationResult",
    "calculate_root",
    "empty_node",
    "hash_nodes",
    "verify",
    "verify_against_tree",
]
