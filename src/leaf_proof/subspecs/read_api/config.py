"""
Read API client configuration constants.

Operational parameters for talking to the indexer: timeouts, retries and paging.
"""

from __future__ import annotations

from typing import Final

DEFAULT_TIMEOUT: Final[float] = 30.0
"""HTTP request timeout in seconds."""

MAX_RETRIES: Final[int] = 3
"""Retries after the first attempt for transient failures."""

RETRY_BACKOFF_BASE: Final[float] = 0.5
"""Delay before the first retry in seconds; doubles on each further retry."""

RETRY_BACKOFF_MAX: Final[float] = 8.0
"""Upper bound on a single retry delay in seconds."""

RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({408, 429, 500, 502, 503, 504})
"""HTTP statuses worth retrying: timeouts, rate limiting and overloaded gateways."""

RETRYABLE_RPC_ERROR_CODES: Final[frozenset[int]] = frozenset({-32603, -32005, -32004})
"""JSON-RPC errors worth retrying: internal error, node behind, block not available."""

DEFAULT_PAGE_LIMIT: Final[int] = 1000
"""Page size used when walking every asset of an owner."""

ACCOUNT_COMMITMENT: Final[str] = "confirmed"
"""Commitment level for tree account reads."""
