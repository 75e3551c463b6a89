import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from conftest import WALLET
from app_config import AppConfig
from wallet_clients import WalletCallsTransactionClient, WalletRpcSession
from wallet_connector_base import BatchSubmissionError, Transaction, WalletConnectionError


def run_with_wallet(handler, scenario):
    """Serve `handler` as the wallet RPC endpoint while `scenario(session)` runs"""
    async def main():
        app = web.Application()
        app.router.add_post("/", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            config = AppConfig(wallet={"rpc_url": str(server.make_url("/"))})
            return await scenario(WalletRpcSession(WALLET, config=config))
        finally:
            await server.close()

    return asyncio.run(main())


def test_send_calls_builds_rpc_request():
    received = []

    async def handler(request):
        body = await request.json()
        received.append(body)
        return web.json_response({"jsonrpc": "2.0", "id": body["id"], "result": {"id": "0xcalls"}})

    async def scenario(session):
        client = WalletCallsTransactionClient.from_rpc_session(session)
        return await client.send_batched_transactions([
            Transaction(to="0xrouter", data="0x07ed2379", value="1000", type="swap"),
        ])

    result = run_with_wallet(handler, scenario)

    assert result.success
    assert result.batch_id == "0xcalls"
    body = received[0]
    assert body["method"] == "wallet_sendCalls"
    params = body["params"][0]
    assert params["version"] == "2.0.0"
    assert params["chainId"] == "0x2105"
    assert params["from"] == WALLET
    assert params["atomicRequired"] is True
    assert params["calls"] == [{"to": "0xrouter", "data": "0x07ed2379", "value": "0x3e8"}]


def test_get_calls_status():
    async def handler(request):
        body = await request.json()
        assert body["method"] == "wallet_getCallsStatus"
        return web.json_response({"jsonrpc": "2.0", "id": body["id"], "result": {
            "version": "2.0.0", "chainId": "0x2105", "status": 200, "atomic": True,
            "receipts": [{"transactionHash": "0xmined", "status": "0x1"}],
        }})

    status = run_with_wallet(handler, lambda session: session.get_calls_status("0xcalls"))

    assert status.id == "0xcalls"
    assert status.is_confirmed
    assert status.transaction_hashes == ["0xmined"]


def test_rpc_error_is_raised():
    async def handler(request):
        body = await request.json()
        return web.json_response({"jsonrpc": "2.0", "id": body["id"],
                                  "error": {"code": 4001, "message": "User rejected the request"}})

    with pytest.raises(BatchSubmissionError, match="User rejected the request"):
        run_with_wallet(handler, lambda session: session.send_calls({"calls": []}))


@pytest.mark.parametrize("payload", [[{"jsonrpc": "2.0", "id": 1, "result": "0xcalls"}], "ok", 42])
def test_non_object_rpc_body_is_a_connection_error(payload):
    async def handler(request):
        return web.json_response(payload)

    with pytest.raises(WalletConnectionError, match="non-object response"):
        run_with_wallet(handler, lambda session: session.send_calls({"calls": []}))


def test_wallet_calls_client_reports_non_object_body():
    async def handler(request):
        return web.json_response(["unexpected"])

    async def scenario(session):
        client = WalletCallsTransactionClient.from_rpc_session(session)
        return await client.send_batched_transactions([
            Transaction(to="0xrouter", data="0x07ed2379", type="swap"),
        ])

    result = run_with_wallet(handler, scenario)

    assert not result.success
    assert "non-object response" in result.error
