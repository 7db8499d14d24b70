"""
Read API client for compressed asset indexers.

Compressed assets live only as hashes inside a tree account. Their readable
state (owner, metadata, proof) comes from an indexer exposing the Read API
over JSON-RPC.

Trust model:

- The indexer is NOT trusted. Anything it returns may be stale (it lags the
  chain), malformed (a bug), or slow (an overloaded node).
- Every response is schema-checked here before anything else sees it.
- Freshness is never assumed; callers confirm proof roots against the tree
  account's changelog.

Transient failures are retried here, with exponential backoff, and nowhere
else. When retries run out the caller gets `TransientRpcError`, never a
partial result.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import itertools
import logging
from types import TracebackType
from typing import Any, AsyncIterator, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from leaf_proof.types import (
    MalformedResponseError,
    NotFoundError,
    Pubkey,
    TransientRpcError,
)

from .config import (
    ACCOUNT_COMMITMENT,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_TIMEOUT,
    MAX_RETRIES,
    RETRY_BACKOFF_BASE,
    RETRY_BACKOFF_MAX,
    RETRYABLE_RPC_ERROR_CODES,
    RETRYABLE_STATUS_CODES,
)
from .schemas import (
    Asset,
    AssetList,
    AssetProof,
    AssetSortBy,
    AssetSortDirection,
    AssetSorting,
    GetAssetsByOwnerParams,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], result: Any, what: str) -> M:
    """Validate a JSON-RPC result against its schema."""
    try:
        return model.model_validate(result)
    except ValidationError as exc:
        raise MalformedResponseError(f"Malformed {what} response: {exc}") from exc


class ReadApiClient:
    """
    Asynchronous JSON-RPC client for the Read API.

    Use as an async context manager, or call `aclose()` when done. An
    existing `httpx.AsyncClient` may be injected; it is then left open.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        backoff_base: float = RETRY_BACKOFF_BASE,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {max_retries}")
        self._url = url
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> ReadApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def get_asset(self, asset_id: Pubkey | str) -> Asset:
        """
        Fetch the indexed state of an asset.

        Raises:
            NotFoundError: If the indexer does not know the asset.
            MalformedResponseError: If the response violates the schema.
            TransientRpcError: If the indexer stays unreachable after retries.
        """
        result = await self._call("getAsset", {"id": str(asset_id)})
        if result is None:
            raise NotFoundError(f"Asset {asset_id} not found")
        return _parse(Asset, result, "getAsset")

    async def get_asset_proof(self, asset_id: Pubkey | str) -> AssetProof:
        """
        Fetch the full (untruncated) proof of an asset's leaf.

        Raises:
            NotFoundError: If the indexer has no proof for the asset.
            MalformedResponseError: If the response violates the schema.
            TransientRpcError: If the indexer stays unreachable after retries.
        """
        result = await self._call("getAssetProof", {"id": str(asset_id)})
        if result is None:
            raise NotFoundError(f"Proof for asset {asset_id} not found")
        return _parse(AssetProof, result, "getAssetProof")

    async def get_assets_by_owner(
        self,
        owner: Pubkey | str,
        *,
        sort_by: AssetSortBy = AssetSortBy.CREATED,
        sort_direction: AssetSortDirection = AssetSortDirection.ASC,
        limit: int | None = None,
        page: int | None = None,
        before: str | None = None,
        after: str | None = None,
    ) -> AssetList:
        """Fetch one page of the assets held by `owner`."""
        params = GetAssetsByOwnerParams(
            owner_address=Pubkey(owner),
            sort_by=AssetSorting(sort_by=sort_by, sort_direction=sort_direction),
            limit=limit,
            page=page,
            before=before,
            after=after,
        )
        result = await self._call(
            "getAssetsByOwner", params.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        if result is None:
            raise MalformedResponseError("getAssetsByOwner returned no result")
        return _parse(AssetList, result, "getAssetsByOwner")

    async def iter_assets_by_owner(
        self,
        owner: Pubkey | str,
        *,
        sort_by: AssetSortBy = AssetSortBy.CREATED,
        sort_direction: AssetSortDirection = AssetSortDirection.ASC,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> AsyncIterator[Asset]:
        """Walk every page of `owner`'s assets in order."""
        page = 1
        while True:
            listing = await self.get_assets_by_owner(
                owner, sort_by=sort_by, sort_direction=sort_direction, limit=limit, page=page
            )
            for asset in listing.items:
                yield asset
            if len(listing.items) < limit:
                return
            page += 1

    async def get_account_info(self, address: Pubkey | str) -> bytes:
        """
        Fetch the raw data of an on-chain account.

        Raises:
            NotFoundError: If the account does not exist.
            MalformedResponseError: If the data is not base64 account data.
        """
        result = await self._call(
            "getAccountInfo",
            [str(address), {"encoding": "base64", "commitment": ACCOUNT_COMMITMENT}],
        )
        if not isinstance(result, dict) or "value" not in result:
            raise MalformedResponseError(f"Malformed getAccountInfo response for {address}")

        value = result["value"]
        if value is None:
            raise NotFoundError(f"Account {address} not found")

        try:
            encoded, encoding = value["data"]
            if encoding != "base64":
                raise MalformedResponseError(f"Unexpected account encoding {encoding!r}")
            return base64.b64decode(encoded, validate=True)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise MalformedResponseError(f"Undecodable account data for {address}: {exc}") from exc

    async def _call(self, method: str, params: Any) -> Any:
        """Issue a JSON-RPC call, retrying transient failures with exponential backoff."""
        for attempt in itertools.count():
            try:
                return await self._post(method, params)
            except TransientRpcError as exc:
                if attempt >= self._max_retries:
                    logger.error("%s failed after %d attempts: %s", method, attempt + 1, exc)
                    raise
                delay = min(self._backoff_base * (2**attempt), RETRY_BACKOFF_MAX)
                logger.warning(
                    "%s attempt %d failed (%s); retrying in %.2fs", method, attempt + 1, exc, delay
                )
                await asyncio.sleep(delay)

    async def _post(self, method: str, params: Any) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": str(next(self._request_ids)),
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s %s", method, params)

        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.TimeoutException as exc:
            raise TransientRpcError(f"{method} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise TransientRpcError(f"Network error calling {method}: {exc}") from exc

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise TransientRpcError(f"HTTP {response.status_code} from {method}")
        if response.status_code == 404:
            raise NotFoundError(f"HTTP 404 from {method}")
        if response.is_error:
            raise MalformedResponseError(
                f"HTTP {response.status_code} from {method}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{method} returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise MalformedResponseError(f"{method} returned a non-object body")

        error = body.get("error")
        if error is not None:
            self._raise_rpc_error(method, error)
        if "result" not in body:
            raise MalformedResponseError(f"{method} response has neither result nor error")
        return body["result"]

    @staticmethod
    def _raise_rpc_error(method: str, error: Any) -> None:
        """Translate a JSON-RPC error object into the error taxonomy."""
        if not isinstance(error, dict):
            raise MalformedResponseError(f"{method} returned a malformed error: {error!r}")

        code = error.get("code")
        message = str(error.get("message", ""))
        if "not found" in message.lower():
            raise NotFoundError(f"{method}: {message}")
        if code in RETRYABLE_RPC_ERROR_CODES:
            raise TransientRpcError(f"{method} RPC error {code}: {message}")
        raise MalformedResponseError(f"{method} RPC error {code}: {message}")
