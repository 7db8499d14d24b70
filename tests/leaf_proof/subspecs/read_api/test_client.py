"""Tests for the Read API client."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from leaf_proof.subspecs.read_api import AssetSortBy, AssetSortDirection, ReadApiClient
from leaf_proof.types import (
    MalformedResponseError,
    NotFoundError,
    TransientRpcError,
)
from tests.leaf_proof.helpers import (
    RpcScenario,
    make_account_info,
    make_pubkey,
    make_rpc_client,
    rpc_error,
    rpc_result,
)


@pytest.fixture
def scenario() -> RpcScenario:
    return RpcScenario.build()


class TestGetAsset:
    """getAsset and getAssetProof."""

    @pytest.mark.anyio
    async def test_parses_asset(self, scenario: RpcScenario) -> None:
        calls: list[dict[str, Any]] = []
        asset = await scenario.client(calls).get_asset(scenario.asset_id)

        assert asset.id == scenario.asset_id
        assert asset.ownership.owner == scenario.owner
        assert asset.ownership.delegate is None
        assert asset.compression.tree == scenario.tree_address
        assert int(asset.compression.leaf_id) == 3
        assert calls[0]["method"] == "getAsset"
        assert calls[0]["params"] == {"id": str(scenario.asset_id)}
        assert calls[0]["jsonrpc"] == "2.0"

    @pytest.mark.anyio
    async def test_parses_proof(self, scenario: RpcScenario) -> None:
        proof = await scenario.client().get_asset_proof(scenario.asset_id)

        assert proof.root == scenario.merkle_tree.root
        assert proof.leaf == scenario.leaf_hash
        assert proof.tree_id == scenario.tree_address
        assert len(proof.proof) == 5

    @pytest.mark.anyio
    async def test_null_result_is_not_found(self) -> None:
        client = make_rpc_client({"getAsset": rpc_result(None)})
        with pytest.raises(NotFoundError):
            await client.get_asset(make_pubkey("missing"))

    @pytest.mark.anyio
    async def test_not_found_error_message(self) -> None:
        client = make_rpc_client({"getAssetProof": rpc_error(-32000, "Asset Proof Not Found")})
        with pytest.raises(NotFoundError):
            await client.get_asset_proof(make_pubkey("missing"))

    @pytest.mark.anyio
    async def test_missing_field_is_malformed(self, scenario: RpcScenario) -> None:
        del scenario.asset["ownership"]
        with pytest.raises(MalformedResponseError, match="getAsset"):
            await scenario.client().get_asset(scenario.asset_id)

    @pytest.mark.anyio
    async def test_wrong_length_hash_is_malformed(self, scenario: RpcScenario) -> None:
        scenario.proof["root"] = "1111"
        with pytest.raises(MalformedResponseError):
            await scenario.client().get_asset_proof(scenario.asset_id)

    @pytest.mark.anyio
    async def test_empty_hashes_of_uncompressed_asset_are_none(
        self, scenario: RpcScenario
    ) -> None:
        scenario.asset["compression"].update(
            compressed=False, data_hash="", creator_hash="", tree=""
        )
        asset = await scenario.client().get_asset(scenario.asset_id)

        assert not asset.compression.compressed
        assert asset.compression.data_hash is None
        assert asset.compression.tree is None

    @pytest.mark.anyio
    async def test_collection_grouping(self, scenario: RpcScenario) -> None:
        collection = make_pubkey("collection")
        scenario.asset["grouping"] = [
            {"group_key": "creator", "group_value": str(make_pubkey("x"))},
            {"group_key": "collection", "group_value": str(collection)},
        ]
        asset = await scenario.client().get_asset(scenario.asset_id)
        assert asset.collection == collection

    @pytest.mark.anyio
    async def test_invalid_collection_grouping_is_malformed(self, scenario: RpcScenario) -> None:
        scenario.asset["grouping"] = [{"group_key": "collection", "group_value": "not-a-key!"}]
        asset = await scenario.client().get_asset(scenario.asset_id)
        with pytest.raises(MalformedResponseError):
            _ = asset.collection


class TestGetAssetsByOwner:
    """Paginated listing."""

    @pytest.mark.anyio
    async def test_sends_camel_case_params(self, scenario: RpcScenario) -> None:
        calls: list[dict[str, Any]] = []
        listing = {"total": 1, "limit": 10, "page": 2, "items": [scenario.asset]}
        client = make_rpc_client({"getAssetsByOwner": rpc_result(listing)}, calls=calls)

        result = await client.get_assets_by_owner(
            scenario.owner,
            sort_by=AssetSortBy.RECENT_ACTION,
            sort_direction=AssetSortDirection.DESC,
            limit=10,
            page=2,
        )

        assert result.total == 1
        assert result.items[0].id == scenario.asset_id
        assert calls[0]["params"] == {
            "ownerAddress": str(scenario.owner),
            "sortBy": {"sortBy": "recent_action", "sortDirection": "desc"},
            "limit": 10,
            "page": 2,
        }

    @pytest.mark.anyio
    async def test_rejects_non_positive_limit(self, scenario: RpcScenario) -> None:
        client = make_rpc_client({})
        with pytest.raises(ValueError):
            await client.get_assets_by_owner(scenario.owner, limit=0)

    @pytest.mark.anyio
    async def test_iterates_until_short_page(self, scenario: RpcScenario) -> None:
        pages = {
            1: [scenario.asset, scenario.asset],
            2: [scenario.asset, scenario.asset],
            3: [scenario.asset],
        }

        def serve(params: dict[str, Any]) -> dict[str, Any]:
            items = pages[params["page"]]
            listing = {"total": len(items), "limit": 2, "page": params["page"], "items": items}
            return rpc_result(listing)

        calls: list[dict[str, Any]] = []
        client = make_rpc_client({"getAssetsByOwner": serve}, calls=calls)

        assets = [a async for a in client.iter_assets_by_owner(scenario.owner, limit=2)]

        assert len(assets) == 5
        assert [call["params"]["page"] for call in calls] == [1, 2, 3]


class TestGetAccountInfo:
    """Raw account reads."""

    @pytest.mark.anyio
    async def test_decodes_base64(self) -> None:
        calls: list[dict[str, Any]] = []
        client = make_rpc_client(
            {"getAccountInfo": rpc_result(make_account_info(b"\x01\x02\x03"))}, calls=calls
        )
        address = make_pubkey("tree")

        assert await client.get_account_info(address) == b"\x01\x02\x03"
        assert calls[0]["params"] == [
            str(address),
            {"encoding": "base64", "commitment": "confirmed"},
        ]

    @pytest.mark.anyio
    async def test_missing_account_is_not_found(self) -> None:
        client = make_rpc_client(
            {"getAccountInfo": rpc_result({"context": {"slot": 1}, "value": None})}
        )
        with pytest.raises(NotFoundError):
            await client.get_account_info(make_pubkey("tree"))

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "value",
        [
            {"data": ["!!!", "base64"]},
            {"data": ["AAAA", "base58"]},
            {"data": "AAAA"},
            {},
        ],
    )
    async def test_undecodable_data_is_malformed(self, value: dict[str, Any]) -> None:
        client = make_rpc_client(
            {"getAccountInfo": rpc_result({"context": {"slot": 1}, "value": value})}
        )
        with pytest.raises(MalformedResponseError):
            await client.get_account_info(make_pubkey("tree"))


class TestRetries:
    """Transient failures are retried; everything else surfaces at once."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "failure",
        [
            pytest.param(lambda: httpx.Response(503), id="http-503"),
            pytest.param(lambda: httpx.Response(429), id="http-429"),
            pytest.param(lambda: rpc_error(-32603, "Internal error"), id="rpc-internal"),
        ],
    )
    async def test_recovers_after_transient_failures(
        self, scenario: RpcScenario, failure: Any
    ) -> None:
        attempts: list[int] = []

        def flaky(params: Any) -> Any:
            attempts.append(1)
            return failure() if len(attempts) < 3 else rpc_result(scenario.asset)

        client = make_rpc_client({"getAsset": flaky}, max_retries=3)

        asset = await client.get_asset(scenario.asset_id)

        assert asset.id == scenario.asset_id
        assert len(attempts) == 3

    @pytest.mark.anyio
    async def test_gives_up_after_max_retries(self) -> None:
        attempts: list[int] = []

        def down(params: Any) -> httpx.Response:
            attempts.append(1)
            return httpx.Response(502)

        client = make_rpc_client({"getAsset": down}, max_retries=2)

        with pytest.raises(TransientRpcError) as exc_info:
            await client.get_asset(make_pubkey("asset"))
        assert exc_info.value.retryable
        assert len(attempts) == 3

    @pytest.mark.anyio
    async def test_network_errors_are_transient(self) -> None:
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ReadApiClient(
            "https://rpc.test",
            max_retries=1,
            backoff_base=0.0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(unreachable)),
        )
        with pytest.raises(TransientRpcError, match="Network error"):
            await client.get_asset(make_pubkey("asset"))

    @pytest.mark.anyio
    async def test_timeouts_are_transient(self) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = ReadApiClient(
            "https://rpc.test",
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(slow)),
        )
        with pytest.raises(TransientRpcError, match="timed out"):
            await client.get_asset(make_pubkey("asset"))

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "response, error",
        [
            pytest.param(httpx.Response(400, text="bad request"), MalformedResponseError, id="400"),
            pytest.param(httpx.Response(404), NotFoundError, id="404"),
            pytest.param(httpx.Response(200, text="<html>"), MalformedResponseError, id="html"),
            pytest.param(httpx.Response(200, json=[1, 2]), MalformedResponseError, id="array"),
            pytest.param(rpc_error(-32602, "Invalid params"), MalformedResponseError, id="rpc"),
            pytest.param({}, MalformedResponseError, id="no-result"),
        ],
    )
    async def test_permanent_failures_are_not_retried(
        self, response: Any, error: type[Exception]
    ) -> None:
        attempts: list[int] = []

        def serve(params: Any) -> Any:
            attempts.append(1)
            return response

        client = make_rpc_client({"getAsset": serve}, max_retries=3)

        with pytest.raises(error):
            await client.get_asset(make_pubkey("asset"))
        assert len(attempts) == 1

    def test_rejects_negative_retries(self) -> None:
        with pytest.raises(ValueError):
            ReadApiClient("https://rpc.test", max_retries=-1)


@pytest.mark.anyio
async def test_owned_http_client_is_closed() -> None:
    async with ReadApiClient("https://rpc.test") as client:
        http_client = client._client
    assert http_client.is_closed


@pytest.mark.anyio
async def test_injected_http_client_is_left_open() -> None:
    http_client = httpx.AsyncClient()
    async with ReadApiClient("https://rpc.test", http_client=http_client):
        pass
    assert not http_client.is_closed
    await http_client.aclose()

