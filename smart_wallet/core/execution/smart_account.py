"""
Counterfactual smart wallet: address resolution and UserOperation building.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from eth_utils import keccak

from smart_wallet.config import settings
from smart_wallet.core.recovery.errors import AccountResolutionError
from smart_wallet.core.wallet.signer import Credential
from smart_wallet.providers.bundler import BundlerConfig, BundlerProvider
from smart_wallet.providers.chain import ChainProvider, ChainRpcError
from smart_wallet.providers.paymaster import PaymasterProvider

from .models import WalletOptions
from .pipeline import PopulationContext, Stage, default_stages, run_pipeline
from .userop import Call, UserOperation
from .userop_builder import (
    build_execute_batch_call_data,
    build_execute_call_data,
    build_get_sender_address_call,
    build_init_code,
    decode_sender_address_result,
)


logger = logging.getLogger(__name__)

# Signed once at init; only its length matters for gas estimation.
_PLACEHOLDER_DIGEST = keccak(bytes.fromhex("dead"))


async def resolve_sender_address(chain: ChainProvider, entry_point: str, init_code: str) -> str:
    """
    Ask the EntryPoint which address `init_code` would deploy.

    getSenderAddress always reverts with SenderAddressResult(sender); a
    successful call or any other revert means the address is unknown.
    """
    try:
        await chain.call(entry_point, build_get_sender_address_call(init_code))
    except ChainRpcError as exc:
        revert_data = exc.revert_data
        if not revert_data:
            raise AccountResolutionError(f"getSenderAddress reverted without data: {exc}", init_code) from exc
        try:
            return decode_sender_address_result(revert_data)
        except ValueError as decode_exc:
            raise AccountResolutionError(str(decode_exc), init_code) from decode_exc
    raise AccountResolutionError("getSenderAddress: unexpected result", init_code)


class SmartAccount:
    """
    An owner's smart wallet.

    `fee_floor` and `nonce_key` are wallet-level state read at build time;
    concurrent builds on one instance share them without locking.
    """

    def __init__(
        self,
        signer: Credential,
        address: str,
        init_code: str,
        placeholder_signature: str,
        chain: ChainProvider,
        bundler: BundlerProvider,
        *,
        entry_point: str,
        nonce_key: int = 0,
        paymaster: Optional[PaymasterProvider] = None,
        paymaster_context: Optional[dict] = None,
        stages: Optional[Sequence[Stage]] = None,
    ) -> None:
        self.signer = signer
        self.address = address
        self.init_code = init_code
        self.placeholder_signature = placeholder_signature
        self.chain = chain
        self.bundler = bundler
        self.entry_point = entry_point
        self.nonce_key = nonce_key
        self.paymaster = paymaster
        self.paymaster_context = paymaster_context or {}
        self.fee_floor: Optional[int] = None
        self.stages: List[Stage] = list(stages) if stages is not None else default_stages(paymaster is not None)

    @classmethod
    async def init(
        cls,
        signer: Credential,
        options: Optional[WalletOptions] = None,
        *,
        chain: Optional[ChainProvider] = None,
        bundler: Optional[BundlerProvider] = None,
        paymaster: Optional[PaymasterProvider] = None,
        stages: Optional[Sequence[Stage]] = None,
    ) -> "SmartAccount":
        options = options or WalletOptions()
        entry_point = options.entry_point or settings.entry_point_address
        factory = options.factory or settings.factory_address
        chain = chain or ChainProvider(options.chain_rpc_url)
        if bundler is None:
            bundler = BundlerProvider(
                BundlerConfig(rpc_url=options.override_bundler_rpc or settings.override_bundler_rpc or settings.bundler_url())
            )
        if options.with_paymaster and paymaster is None:
            paymaster = PaymasterProvider()

        owner = await signer.get_address()
        init_code = build_init_code(factory, owner, options.salt)
        address = await resolve_sender_address(chain, entry_point, init_code)
        placeholder_signature = await signer.sign_message(_PLACEHOLDER_DIGEST)

        logger.info("Resolved smart wallet %s for owner %s (salt=%s)", address, owner, options.salt)

        return cls(
            signer,
            address,
            init_code,
            placeholder_signature,
            chain,
            bundler,
            entry_point=entry_point,
            nonce_key=options.nonce_key,
            paymaster=paymaster,
            paymaster_context=options.paymaster_context,
            stages=stages,
        )

    def get_sender(self) -> str:
        return self.address

    def set_max_fee_per_gas(self, fee: Optional[int]) -> None:
        self.fee_floor = fee

    def _context(self, fee_floor: Optional[int], nonce_key: Optional[int]) -> PopulationContext:
        return PopulationContext(
            chain=self.chain,
            bundler=self.bundler,
            signer=self.signer,
            entry_point=self.entry_point,
            sender=self.address,
            init_code=self.init_code,
            placeholder_signature=self.placeholder_signature,
            nonce_key=self.nonce_key if nonce_key is None else nonce_key,
            fee_floor=self.fee_floor if fee_floor is None else fee_floor,
            paymaster=self.paymaster,
            paymaster_context=dict(self.paymaster_context),
        )

    async def build(
        self,
        call_data: str,
        *,
        fee_floor: Optional[int] = None,
        nonce_key: Optional[int] = None,
    ) -> UserOperation:
        """Run the population pipeline over `call_data` and return a signed operation."""
        ctx = self._context(fee_floor, nonce_key)
        return await run_pipeline(self.stages, UserOperation(call_data=call_data), ctx)

    async def execute(self, to: str, value: int, data: str, **kwargs) -> UserOperation:
        call = Call(to=to, value=value, data=data)
        return await self.build(build_execute_call_data(call.to, call.value, call.data), **kwargs)

    async def execute_batch(self, calls: Sequence[Call], **kwargs) -> UserOperation:
        return await self.build(build_execute_batch_call_data(calls), **kwargs)
