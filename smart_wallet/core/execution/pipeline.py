"""
UserOperation population pipeline.

A pipeline is an ordered list of async stages. Each stage takes the
operation built so far plus the shared context and returns a new operation;
stages never mutate their input. The default order is:

    stage                  reads                          writes
    use_defaults           -                              sender, signature (placeholder)
    resolve_account        sender                         nonce, init_code
    get_gas_price          -                              max_fee_per_gas, max_priority_fee_per_gas
    estimate_gas           every non-signature field      call/verification/pre-verification gas
      or sponsor           every non-signature field      paymaster_and_data (+ gas limits)
    sign                   every other field              signature

The signature must come last: the operation hash covers every other field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from smart_wallet.core.wallet.signer import Credential
from smart_wallet.providers.bundler import BundlerProvider
from smart_wallet.providers.chain import ChainProvider
from smart_wallet.providers.paymaster import PaymasterProvider

from .userop import UserOperation
from .userop_builder import get_user_op_hash


logger = logging.getLogger(__name__)


@dataclass
class PopulationContext:
    """Everything the stages need besides the operation itself."""
    chain: ChainProvider
    bundler: BundlerProvider
    signer: Credential
    entry_point: str
    sender: str
    init_code: str
    placeholder_signature: str
    nonce_key: int = 0
    fee_floor: Optional[int] = None
    paymaster: Optional[PaymasterProvider] = None
    paymaster_context: Dict[str, Any] = field(default_factory=dict)


Stage = Callable[[UserOperation, PopulationContext], Awaitable[UserOperation]]


async def use_defaults(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    """Point the operation at the wallet and give it a correctly sized dummy signature."""
    return op.with_fields(sender=ctx.sender, signature=ctx.placeholder_signature)


async def resolve_account(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    """Read the EntryPoint nonce for (sender, key); attach init code only for a zero nonce."""
    nonce = await ctx.chain.get_nonce(ctx.entry_point, op.sender, ctx.nonce_key)
    return op.with_fields(nonce=nonce, init_code=ctx.init_code if nonce == 0 else "0x")


async def get_gas_price(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    """Use the caller's fee floor when set, otherwise the network's fee data."""
    if ctx.fee_floor is not None:
        return op.with_fields(max_fee_per_gas=ctx.fee_floor, max_priority_fee_per_gas=ctx.fee_floor)

    fees = await ctx.chain.get_fee_data()
    return op.with_fields(
        max_fee_per_gas=fees.max_fee_per_gas,
        max_priority_fee_per_gas=fees.max_priority_fee_per_gas,
    )


async def estimate_gas(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    estimate = await ctx.bundler.estimate_user_operation_gas(op, ctx.entry_point)
    return op.with_fields(
        call_gas_limit=estimate.call_gas_limit,
        verification_gas_limit=estimate.verification_gas_limit,
        pre_verification_gas=estimate.pre_verification_gas,
    )


async def sponsor(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    """
    Verifying-paymaster sponsorship.

    Verification gas is tripled before the request so the paymaster's own
    validation fits; the paymaster may then overwrite any gas limit.
    """
    if ctx.paymaster is None:
        raise ValueError("Paymaster sponsorship requested without a paymaster provider")

    op = op.with_fields(verification_gas_limit=op.verification_gas_limit * 3)
    sponsorship = await ctx.paymaster.sponsor_user_operation(op, ctx.entry_point, ctx.paymaster_context)
    return op.with_fields(
        paymaster_and_data=sponsorship.paymaster_and_data,
        **sponsorship.gas_overrides(),
    )


async def sign(op: UserOperation, ctx: PopulationContext) -> UserOperation:
    chain_id = await ctx.chain.chain_id()
    user_op_hash = get_user_op_hash(op, ctx.entry_point, chain_id)
    signature = await ctx.signer.sign_message(user_op_hash)
    return op.with_fields(signature=signature)


def default_stages(with_paymaster: bool = False) -> List[Stage]:
    return [
        use_defaults,
        resolve_account,
        get_gas_price,
        sponsor if with_paymaster else estimate_gas,
        sign,
    ]


async def run_pipeline(
    stages: Sequence[Stage],
    op: UserOperation,
    ctx: PopulationContext,
) -> UserOperation:
    """Apply each stage in order. Any stage error aborts the build."""
    for stage in stages:
        op = await stage(op, ctx)
        logger.debug("userop stage %s done", getattr(stage, "__name__", repr(stage)))
    return op
