"""
Tests for spend resolution (approve + call batching).
"""

import pytest
from eth_abi import decode

from smart_wallet.core.execution.resolver import get_allowance, is_native_token, resolve_spend_calls
from smart_wallet.core.execution.userop import Call
from smart_wallet.core.execution.userop_builder import build_erc20_approve_call_data
from smart_wallet.providers.chain import ChainRpcError

from tests.helpers import NATIVE, RECEIVER, SPENDER, TOKEN, WALLET


ACTION = "0xa9059cbb" + "00" * 64


def test_native_token_match_is_case_insensitive():
    assert is_native_token(NATIVE.lower())
    assert is_native_token(NATIVE.upper().replace("0X", "0x"))
    assert not is_native_token(TOKEN)
    assert is_native_token(TOKEN, native_token_address=TOKEN)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "allowance,amount,expected_calls",
    [
        (0, 0, 1),
        (0, 1, 2),
        (5, 5, 1),
        (6, 5, 1),
        (4, 5, 2),
        (2**256 - 1, 10**30, 1),
        (10**18 - 1, 10**18, 2),
    ],
)
async def test_allowance_decides_batch(chain, allowance, amount, expected_calls):
    chain.call_uint.return_value = allowance

    calls = await resolve_spend_calls(chain, WALLET, TOKEN, SPENDER, ACTION, amount)

    assert len(calls) == expected_calls
    assert calls[-1] == Call(to=SPENDER, value=0, data=ACTION)
    if expected_calls == 2:
        assert calls[0] == Call(to=TOKEN, value=0, data=build_erc20_approve_call_data(SPENDER, amount))


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, 1, 10**12])
async def test_native_token_is_a_single_value_call(chain, amount):
    calls = await resolve_spend_calls(chain, WALLET, NATIVE, SPENDER, ACTION, amount)

    assert calls == [Call(to=SPENDER, value=amount, data=ACTION)]
    chain.call_uint.assert_not_awaited()


@pytest.mark.asyncio
async def test_native_transfer_to_receiver(chain):
    calls = await resolve_spend_calls(chain, WALLET, NATIVE, RECEIVER, "0x", 1_000_000_000_000)

    assert calls == [Call(to=RECEIVER, value=1_000_000_000_000, data="0x")]


@pytest.mark.asyncio
async def test_zero_allowance_emits_approve_then_action(chain):
    chain.call_uint.return_value = 0

    calls = await resolve_spend_calls(chain, WALLET, TOKEN, SPENDER, ACTION, 100_000)

    assert [c.to for c in calls] == [TOKEN, SPENDER]
    assert calls[0].data.startswith("0x095ea7b3")
    spender, amount = decode(["address", "uint256"], bytes.fromhex(calls[0].data[10:]))
    assert spender.lower() == SPENDER
    assert amount == 100_000


@pytest.mark.asyncio
async def test_allowance_read_uses_wallet_and_spender(chain):
    chain.call_uint.return_value = 10

    assert await get_allowance(chain, TOKEN, WALLET, SPENDER) == 10

    to, data = chain.call_uint.await_args.args
    assert to == TOKEN
    owner, spender = decode(["address", "address"], bytes.fromhex(data[10:]))
    assert (owner.lower(), spender.lower()) == (WALLET, SPENDER)


@pytest.mark.asyncio
async def test_allowance_read_failure_propagates(chain):
    chain.call_uint.side_effect = ChainRpcError({"code": -32000, "message": "header not found"})

    with pytest.raises(ChainRpcError):
        await resolve_spend_calls(chain, WALLET, TOKEN, SPENDER, ACTION, 1)


@pytest.mark.asyncio
async def test_allowance_target_is_approved_instead_of_spender(chain):
    chain.call_uint.return_value = 0

    calls = await resolve_spend_calls(chain, WALLET, TOKEN, SPENDER, ACTION, 7, allowance_target=RECEIVER)

    assert calls[0].data == build_erc20_approve_call_data(RECEIVER, 7)
    assert calls[1].to == SPENDER
