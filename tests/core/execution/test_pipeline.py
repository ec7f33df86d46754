"""
Tests for the UserOperation population pipeline.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from smart_wallet.core.execution.pipeline import (
    PopulationContext,
    default_stages,
    estimate_gas,
    get_gas_price,
    resolve_account,
    run_pipeline,
    sign,
    sponsor,
    use_defaults,
)
from smart_wallet.core.execution.userop import PaymasterSponsorship, UserOperation
from smart_wallet.core.execution.userop_builder import build_init_code, get_user_op_hash
from smart_wallet.providers.paymaster import PaymasterProvider

from tests.helpers import ENTRY_POINT, RECEIVER, WALLET


PLACEHOLDER = "0x" + "cd" * 65
INIT_CODE = build_init_code(RECEIVER, RECEIVER)


def make_context(chain, bundler, signer, **overrides) -> PopulationContext:
    fields = dict(
        chain=chain,
        bundler=bundler,
        signer=signer,
        entry_point=ENTRY_POINT,
        sender=WALLET,
        init_code=INIT_CODE,
        placeholder_signature=PLACEHOLDER,
    )
    fields.update(overrides)
    return PopulationContext(**fields)


class TestStages:
    @pytest.mark.asyncio
    async def test_use_defaults_sets_sender_and_placeholder(self, chain, bundler, signer):
        op = await use_defaults(UserOperation(), make_context(chain, bundler, signer))

        assert op.sender == WALLET
        assert op.signature == PLACEHOLDER

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "nonce,expect_init_code",
        [(0, True), (1, False), (42, False), (5 << 64, False)],
    )
    async def test_init_code_only_for_zero_nonce(self, chain, bundler, signer, nonce, expect_init_code):
        chain.get_nonce.return_value = nonce
        ctx = make_context(chain, bundler, signer, nonce_key=3)

        op = await resolve_account(UserOperation(sender=WALLET), ctx)

        chain.get_nonce.assert_awaited_once_with(ENTRY_POINT, WALLET, 3)
        assert op.nonce == nonce
        assert (op.init_code != "0x") is expect_init_code
        if expect_init_code:
            assert op.init_code == INIT_CODE

    @pytest.mark.asyncio
    async def test_fee_floor_overrides_network_fees(self, chain, bundler, signer):
        ctx = make_context(chain, bundler, signer, fee_floor=7)

        op = await get_gas_price(UserOperation(), ctx)

        assert op.max_fee_per_gas == 7
        assert op.max_priority_fee_per_gas == 7
        chain.get_fee_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_network_fees_without_floor(self, chain, bundler, signer):
        op = await get_gas_price(UserOperation(), make_context(chain, bundler, signer))

        assert op.max_fee_per_gas == 1_000_000_000_000
        assert op.max_priority_fee_per_gas == 10_000_000_000

    @pytest.mark.asyncio
    async def test_estimate_gas_applies_bundler_limits(self, chain, bundler, signer):
        op = await estimate_gas(UserOperation(), make_context(chain, bundler, signer))

        assert (op.call_gas_limit, op.verification_gas_limit, op.pre_verification_gas) == (
            50_000,
            100_000,
            45_000,
        )

    @pytest.mark.asyncio
    async def test_sponsor_triples_verification_gas_before_request(self, chain, bundler, signer):
        paymaster = MagicMock(spec=PaymasterProvider)
        paymaster.sponsor_user_operation = AsyncMock(
            return_value=PaymasterSponsorship(paymaster_and_data="0xbeef", pre_verification_gas=60_000)
        )
        ctx = make_context(chain, bundler, signer, paymaster=paymaster, paymaster_context={"type": "free"})

        op = await sponsor(UserOperation(verification_gas_limit=70_000), ctx)

        sent_op, entry_point, context = paymaster.sponsor_user_operation.await_args.args
        assert sent_op.verification_gas_limit == 210_000
        assert entry_point == ENTRY_POINT
        assert context == {"type": "free"}
        assert op.paymaster_and_data == "0xbeef"
        assert op.pre_verification_gas == 60_000
        assert op.verification_gas_limit == 210_000

    @pytest.mark.asyncio
    async def test_sponsor_without_provider_fails(self, chain, bundler, signer):
        with pytest.raises(ValueError):
            await sponsor(UserOperation(), make_context(chain, bundler, signer))

    @pytest.mark.asyncio
    async def test_sign_covers_final_operation(self, chain, bundler, signer):
        op = UserOperation(sender=WALLET, nonce=1, call_data="0x1234", max_fee_per_gas=5)

        signed = await sign(op, make_context(chain, bundler, signer))

        digest = get_user_op_hash(op, ENTRY_POINT, 122)
        recovered = Account.recover_message(encode_defunct(primitive=digest), signature=signed.signature)
        assert recovered == await signer.get_address()


class TestPipeline:
    def test_default_stage_order(self):
        assert default_stages() == [use_defaults, resolve_account, get_gas_price, estimate_gas, sign]
        assert default_stages(with_paymaster=True) == [
            use_defaults,
            resolve_account,
            get_gas_price,
            sponsor,
            sign,
        ]

    @pytest.mark.asyncio
    async def test_run_pipeline_produces_signed_operation(self, chain, bundler, signer):
        op = await run_pipeline(
            default_stages(),
            UserOperation(call_data="0xabcd"),
            make_context(chain, bundler, signer),
        )

        assert op.sender == WALLET
        assert op.init_code == INIT_CODE
        assert op.signature != PLACEHOLDER
        assert op.call_gas_limit == 50_000
        # the bundler estimated gas against the placeholder signature
        estimated_op = bundler.estimate_user_operation_gas.await_args.args[0]
        assert estimated_op.signature == PLACEHOLDER

    @pytest.mark.asyncio
    async def test_stage_error_aborts_build(self, chain, bundler, signer):
        chain.get_nonce.side_effect = RuntimeError("node down")

        with pytest.raises(RuntimeError, match="node down"):
            await run_pipeline(default_stages(), UserOperation(), make_context(chain, bundler, signer))

        bundler.estimate_user_operation_gas.assert_not_awaited()
