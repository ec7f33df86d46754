"""Read-only ERC-20 helpers over eth_call."""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from eth_abi import decode

from ..config import settings
from ..core.execution.resolver import is_native_token
from ..core.execution.userop_builder import build_erc20_balance_of_call_data, selector_from_signature
from ..providers.chain import ChainProvider
from ..types.tokens import TokenDetails


async def _read(chain: ChainProvider, token_address: str, signature: str, output_type: str) -> Any:
    result = await chain.call(token_address, selector_from_signature(signature))
    if not result or result == "0x":
        raise ValueError(f"{signature} returned no data from {token_address}")
    (value,) = decode([output_type], bytes.fromhex(result[2:]))
    return value


async def get_balance(chain: ChainProvider, token_address: str, owner: str) -> int:
    if is_native_token(token_address):
        return await chain.get_balance(owner)
    return await chain.call_uint(token_address, build_erc20_balance_of_call_data(owner))


async def get_erc20_token_details(chain: ChainProvider, token_address: str) -> TokenDetails:
    if is_native_token(token_address):
        return TokenDetails(
            symbol=settings.native_token_symbol,
            name=settings.native_token_name,
            decimals=18,
            address=token_address,
        )
    name, symbol, decimals = await asyncio.gather(
        _read(chain, token_address, "name()", "string"),
        _read(chain, token_address, "symbol()", "string"),
        _read(chain, token_address, "decimals()", "uint8"),
    )
    return TokenDetails(symbol=symbol, name=name, decimals=decimals, address=token_address)


def parse_units(amount: str, decimals: int) -> int:
    """'1.5' with 18 decimals -> 1500000000000000000. Excess precision is rejected."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must be non-negative: {amount!r}")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount!r} has more than {decimals} decimals")
    return int(scaled)
