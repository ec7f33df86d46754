"""
Spend resolution: decide whether a token-spending call needs an approval first.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from smart_wallet.config import settings
from smart_wallet.providers.chain import ChainProvider

from .userop import Call
from .userop_builder import build_erc20_allowance_call_data, build_erc20_approve_call_data


logger = logging.getLogger(__name__)


def is_native_token(token_address: str, native_token_address: Optional[str] = None) -> bool:
    native = native_token_address or settings.native_token_address
    return token_address.lower() == native.lower()


async def get_allowance(chain: ChainProvider, token_address: str, owner: str, spender: str) -> int:
    """ERC-20 allowance(owner, spender). Read errors propagate."""
    return await chain.call_uint(token_address, build_erc20_allowance_call_data(owner, spender))


async def resolve_spend_calls(
    chain: ChainProvider,
    wallet_address: str,
    token_address: str,
    spender: str,
    call_data: str,
    amount: int,
    *,
    native_token_address: Optional[str] = None,
    allowance_target: Optional[str] = None,
) -> List[Call]:
    """
    Calls needed to let `spender` act on `amount` of `token_address`.

    - native asset: one call to spender carrying `amount` as value
    - allowance >= amount: one call to spender with no value
    - otherwise: approve(spender, amount) on the token, then the call; the
      caller must submit these as one batch so a failed call also undoes the
      approval

    `allowance_target` approves a different contract than the one called,
    for routers that pull funds through a separate proxy.
    """
    if is_native_token(token_address, native_token_address):
        return [Call(to=spender, value=amount, data=call_data)]

    approved = allowance_target or spender
    allowance = await get_allowance(chain, token_address, wallet_address, approved)
    action = Call(to=spender, value=0, data=call_data)
    if allowance >= amount:
        return [action]

    logger.debug(
        "Allowance %s of %s for %s is below %s; prepending approval",
        allowance,
        token_address,
        approved,
        amount,
    )
    approve = Call(to=token_address, value=0, data=build_erc20_approve_call_data(approved, amount))
    return [approve, action]
