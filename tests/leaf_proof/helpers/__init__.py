"""Test helpers for leaf_proof unit tests."""

from .builders import (
    make_account_info,
    make_asset_payload,
    make_bytes32,
    make_creators,
    make_metadata,
    make_proof_payload,
    make_pubkey,
    make_tree_account,
)
from .rpc import RpcScenario, make_rpc_client, rpc_error, rpc_result

__all__ = [
    "RpcScenario",
    "make_account_info",
    "make_asset_payload",
    "make_bytes32",
    "make_creators",
    "make_metadata",
    "make_proof_payload",
    "make_pubkey",
    "make_rpc_client",
    "make_tree_account",
    "rpc_error",
    "rpc_result",
]
