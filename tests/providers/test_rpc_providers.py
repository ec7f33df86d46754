"""
Tests for the JSON-RPC providers (chain, bundler, paymaster).
"""

import json

import httpx
import pytest

from smart_wallet.core.execution.userop import UserOperation
from smart_wallet.providers.bundler import BundlerConfig, BundlerError, BundlerProvider
from smart_wallet.providers.chain import ChainProvider, ChainRpcError
from smart_wallet.providers.paymaster import PaymasterConfig, PaymasterError, PaymasterProvider

from tests.helpers import ENTRY_POINT, WALLET


def rpc_transport(answers):
    """Answer each JSON-RPC method with a result, or an error when the value is an Exception."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append(body)
        answer = answers[body["method"]]
        if isinstance(answer, Exception):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": str(answer)}})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": answer})

    return httpx.MockTransport(handler), calls


def attach(provider, transport):
    provider._client = httpx.AsyncClient(transport=transport)
    return provider


class TestChainProvider:
    @pytest.mark.asyncio
    async def test_eip1559_fee_data(self):
        transport, _ = rpc_transport(
            {
                "eth_maxPriorityFeePerGas": hex(100),
                "eth_getBlockByNumber": {"baseFeePerGas": hex(1000)},
            }
        )
        chain = attach(ChainProvider("http://node"), transport)

        fees = await chain.get_fee_data()

        assert fees.max_priority_fee_per_gas == 113
        assert fees.max_fee_per_gas == 2 * 1000 + 113

    @pytest.mark.asyncio
    async def test_legacy_gas_price_fallback(self):
        transport, _ = rpc_transport(
            {
                "eth_maxPriorityFeePerGas": Exception("method not found"),
                "eth_gasPrice": hex(77),
            }
        )
        chain = attach(ChainProvider("http://node"), transport)

        fees = await chain.get_fee_data()

        assert (fees.max_fee_per_gas, fees.max_priority_fee_per_gas) == (77, 77)

    @pytest.mark.asyncio
    async def test_both_fee_sources_failing_raises(self):
        transport, _ = rpc_transport(
            {
                "eth_maxPriorityFeePerGas": Exception("nope"),
                "eth_gasPrice": Exception("also nope"),
            }
        )
        chain = attach(ChainProvider("http://node"), transport)

        with pytest.raises(ChainRpcError, match="also nope"):
            await chain.get_fee_data()

    @pytest.mark.asyncio
    async def test_chain_id_is_cached(self):
        transport, calls = rpc_transport({"eth_chainId": "0x7a"})
        chain = attach(ChainProvider("http://node"), transport)

        assert await chain.chain_id() == 122
        assert await chain.chain_id() == 122
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_get_nonce_reads_entry_point(self):
        transport, calls = rpc_transport({"eth_call": "0x" + hex(5)[2:].rjust(64, "0")})
        chain = attach(ChainProvider("http://node"), transport)

        assert await chain.get_nonce(ENTRY_POINT, WALLET, 0) == 5
        assert calls[0]["params"][0]["to"] == ENTRY_POINT

    @pytest.mark.asyncio
    async def test_empty_call_result_is_an_error(self):
        transport, _ = rpc_transport({"eth_call": "0x"})
        chain = attach(ChainProvider("http://node"), transport)

        with pytest.raises(ChainRpcError):
            await chain.call_uint(WALLET, "0x")

    def test_revert_data_extraction(self):
        assert ChainRpcError({"message": "r", "data": "0x12"}).revert_data == "0x12"
        assert ChainRpcError({"message": "r", "data": {"data": "0x34"}}).revert_data == "0x34"
        assert ChainRpcError({"message": "r", "data": "Reverted"}).revert_data is None


class TestBundlerProvider:
    @pytest.mark.asyncio
    async def test_send_user_operation(self):
        transport, calls = rpc_transport({"eth_sendUserOperation": "0xhash"})
        bundler = attach(BundlerProvider(BundlerConfig(rpc_url="http://bundler")), transport)

        assert await bundler.send_user_operation(UserOperation(sender=WALLET), ENTRY_POINT) == "0xhash"
        op_json, entry_point = calls[0]["params"]
        assert op_json["sender"] == WALLET
        assert op_json["callGasLimit"] == hex(35000)
        assert entry_point == ENTRY_POINT

    @pytest.mark.asyncio
    async def test_rejection_surfaces_as_bundler_error(self):
        transport, _ = rpc_transport({"eth_sendUserOperation": Exception("fee too low")})
        bundler = attach(BundlerProvider(BundlerConfig(rpc_url="http://bundler")), transport)

        with pytest.raises(BundlerError, match="fee too low"):
            await bundler.send_user_operation(UserOperation(), ENTRY_POINT)

    @pytest.mark.asyncio
    async def test_estimate_gas(self):
        transport, _ = rpc_transport(
            {
                "eth_estimateUserOperationGas": {
                    "callGasLimit": hex(1),
                    "verificationGas": hex(2),
                    "preVerificationGas": hex(3),
                }
            }
        )
        bundler = attach(BundlerProvider(BundlerConfig(rpc_url="http://bundler")), transport)

        estimate = await bundler.estimate_user_operation_gas(UserOperation(), ENTRY_POINT)

        assert (estimate.call_gas_limit, estimate.verification_gas_limit, estimate.pre_verification_gas) == (1, 2, 3)

    @pytest.mark.asyncio
    async def test_receipt_pending_and_mined(self):
        mined = {
            "success": True,
            "actualGasUsed": hex(21000),
            "receipt": {"transactionHash": "0xtx", "blockNumber": hex(10), "status": "0x1"},
        }
        transport, _ = rpc_transport({"eth_getUserOperationReceipt": None})
        bundler = attach(BundlerProvider(BundlerConfig(rpc_url="http://bundler")), transport)
        assert await bundler.get_user_operation_receipt("0xhash") is None

        transport, _ = rpc_transport({"eth_getUserOperationReceipt": mined})
        bundler = attach(BundlerProvider(BundlerConfig(rpc_url="http://bundler")), transport)
        receipt = await bundler.get_user_operation_receipt("0xhash")

        assert receipt.success is True
        assert receipt.transaction_hash == "0xtx"
        assert receipt.block_number == 10
        assert receipt.gas_used == 21000


class TestPaymasterProvider:
    @pytest.mark.asyncio
    async def test_sponsorship_with_gas_overrides(self):
        transport, calls = rpc_transport(
            {"pm_sponsorUserOperation": {"paymasterAndData": "0xbeef", "callGasLimit": hex(9)}}
        )
        paymaster = attach(PaymasterProvider(PaymasterConfig(rpc_url="http://pm")), transport)

        sponsorship = await paymaster.sponsor_user_operation(UserOperation(), ENTRY_POINT, {"id": 1})

        assert sponsorship.paymaster_and_data == "0xbeef"
        assert sponsorship.gas_overrides() == {"call_gas_limit": 9}
        assert calls[0]["params"][2] == {"id": 1}

    @pytest.mark.asyncio
    async def test_plain_string_response(self):
        transport, _ = rpc_transport({"pm_sponsorUserOperation": "0xbeef"})
        paymaster = attach(PaymasterProvider(PaymasterConfig(rpc_url="http://pm")), transport)

        sponsorship = await paymaster.sponsor_user_operation(UserOperation(), ENTRY_POINT)

        assert sponsorship.paymaster_and_data == "0xbeef"

    @pytest.mark.asyncio
    async def test_empty_sponsorship_is_rejected(self):
        transport, _ = rpc_transport({"pm_sponsorUserOperation": {"paymasterAndData": "0x"}})
        paymaster = attach(PaymasterProvider(PaymasterConfig(rpc_url="http://pm")), transport)

        with pytest.raises(PaymasterError):
            await paymaster.sponsor_user_operation(UserOperation(), ENTRY_POINT)
