"""
Global configuration for compressed leaf verification.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_LEAF_PROOF_ENVS: list[str] = ["prod", "test"]

DEVNET_RPC_URL = "https://api.devnet.solana.com"
"""Public devnet endpoint used when no RPC URL is configured."""

LEAF_PROOF_ENV = os.environ.get("LEAF_PROOF_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if LEAF_PROOF_ENV not in _SUPPORTED_LEAF_PROOF_ENVS:
    raise ValueError(
        f"Invalid LEAF_PROOF_ENV environment variable: '{LEAF_PROOF_ENV}'. "
        f"Supported values: {_SUPPORTED_LEAF_PROOF_ENVS}"
    )

RPC_URL = os.environ.get("LEAF_PROOF_RPC_URL") or os.environ.get("RPC_URL") or DEVNET_RPC_URL
"""Read API endpoint. The indexer must serve both the Read API and `getAccountInfo`."""
