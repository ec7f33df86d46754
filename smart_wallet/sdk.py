"""
WalletSDK: high-level wallet actions on top of the UserOperation executor.

Every action resolves to a list of calls and goes through UserOpExecutor, so
fee retries, nonce sequencing and receipts behave the same for all of them.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

from .config import settings
from .core.execution.erc4337_executor import UserOpExecutor
from .core.execution.models import OperationResult, TransactionType, TxOptions, WalletOptions
from .core.execution.nonce_manager import NonceSequencer
from .core.execution.resolver import get_allowance, is_native_token, resolve_spend_calls
from .core.execution.smart_account import SmartAccount
from .core.execution.userop import Call
from .core.execution.userop_builder import (
    build_erc20_approve_call_data,
    build_erc20_transfer_call_data,
    build_erc721_approve_call_data,
    build_erc721_safe_transfer_from_call_data,
)
from .core.wallet.auth import SmartWalletAuth
from .core.wallet.signer import Credential
from .providers.backend import BackendClient
from .providers.bundler import BundlerConfig, BundlerProvider
from .providers.chain import ChainProvider
from .providers.paymaster import PaymasterConfig, PaymasterProvider
from .services import contracts
from .services.balances import BalancesModule
from .services.explorer import ExplorerModule
from .services.graphql import GraphQLModule
from .services.staking import StakingModule
from .services.trade import TradeModule
from .types.staking import StakeRequestBody, UnstakeRequestBody
from .types.tokens import TokenDetails
from .types.trade import TradeRequest
from .types.wallet_action import WalletActionResult


logger = logging.getLogger(__name__)


class WalletSDK:
    def __init__(
        self,
        public_api_key: str,
        account: SmartAccount,
        backend: BackendClient,
        *,
        nonce_sequencer: Optional[NonceSequencer] = None,
    ) -> None:
        self.public_api_key = public_api_key
        self.wallet = account
        self.backend = backend
        self.executor = UserOpExecutor(account, nonce_sequencer or NonceSequencer())
        self.trade = TradeModule(backend)
        self.staking = StakingModule(backend)
        self.balances = BalancesModule(backend)
        self.explorer = ExplorerModule(backend)
        self.graphql = GraphQLModule(backend)

    @classmethod
    async def init(
        cls,
        public_api_key: str,
        credentials: Credential,
        *,
        with_paymaster: bool = False,
        paymaster_context: Optional[Dict[str, Any]] = None,
        options: Optional[WalletOptions] = None,
        jwt_token: Optional[str] = None,
        base_url: Optional[str] = None,
        chain: Optional[ChainProvider] = None,
        backend: Optional[BackendClient] = None,
    ) -> "WalletSDK":
        """
        Resolve the owner's smart wallet and authenticate against the backend.

        A supplied `jwt_token` skips authentication.
        """
        options = options or WalletOptions()
        base_url = base_url or settings.base_url

        bundler_url = (
            options.override_bundler_rpc
            or settings.override_bundler_rpc
            or settings.bundler_url(public_api_key, base_url)
        )
        bundler = BundlerProvider(BundlerConfig(rpc_url=bundler_url))

        paymaster = None
        if with_paymaster or options.with_paymaster:
            paymaster = PaymasterProvider(
                PaymasterConfig(
                    rpc_url=settings.paymaster_url(public_api_key, base_url),
                    rpc_method=settings.paymaster_rpc_method,
                )
            )
        if paymaster_context is not None:
            options = replace(options, paymaster_context=paymaster_context)

        account = await SmartAccount.init(
            credentials,
            options,
            chain=chain,
            bundler=bundler,
            paymaster=paymaster,
        )

        backend = backend or BackendClient(public_api_key, base_url=base_url)
        sdk = cls(public_api_key, account, backend)
        if jwt_token:
            backend.jwt_token = jwt_token
        else:
            await sdk.authenticate(credentials)
        return sdk

    @property
    def chain(self) -> ChainProvider:
        return self.wallet.chain

    @property
    def jwt_token(self) -> Optional[str]:
        return self.backend.jwt_token

    async def authenticate(self, credentials: Credential) -> str:
        auth = await SmartWalletAuth.signer(credentials, self.wallet.get_sender())
        token = await self.backend.authenticate(auth)
        logger.info("Authenticated smart wallet %s", self.wallet.get_sender())
        return token

    def set_wallet_fees(self, fee: Optional[int]) -> None:
        """Persist a fee floor on the wallet for all later operations."""
        self.wallet.set_max_fee_per_gas(fee)

    async def call_contract(
        self,
        to: str,
        value: int,
        data: str,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        return await self.executor.submit([Call(to=to, value=value, data=data)], tx_options)

    async def execute_batch(
        self,
        calls: Sequence[Call],
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        return await self.executor.submit(calls, tx_options, batch=True, action=TransactionType.BATCH)

    async def _submit_resolved(
        self,
        calls: Sequence[Call],
        tx_options: Optional[TxOptions],
        action: TransactionType,
    ) -> OperationResult:
        # approve + action must land in one executeBatch
        return await self.executor.submit(calls, tx_options, batch=len(calls) > 1, action=action)

    async def transfer_token(
        self,
        token_address: str,
        recipient: str,
        amount: int,
        data: str = "0x",
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        """
        Send the native asset or an ERC-20 the wallet holds.

        An ERC-20 transfer moves the wallet's own balance with transfer(), so
        no allowance is involved and no approval is batched in.
        """
        if is_native_token(token_address):
            calls = await resolve_spend_calls(
                self.chain, self.wallet.get_sender(), token_address, recipient, data, amount
            )
        else:
            calls = [Call(to=token_address, value=0, data=build_erc20_transfer_call_data(recipient, amount))]
        return await self._submit_resolved(calls, tx_options, TransactionType.TRANSFER)

    async def transfer_nft(
        self,
        nft_contract_address: str,
        recipient: str,
        token_id: int,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        data = build_erc721_safe_transfer_from_call_data(self.wallet.get_sender(), recipient, token_id)
        return await self.executor.submit(
            [Call(to=nft_contract_address, data=data)], tx_options, action=TransactionType.TRANSFER
        )

    async def approve_token(
        self,
        token_address: str,
        spender: str,
        amount: int,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        data = build_erc20_approve_call_data(spender, amount)
        return await self.executor.submit(
            [Call(to=token_address, data=data)], tx_options, action=TransactionType.APPROVE
        )

    async def approve_nft(
        self,
        nft_contract_address: str,
        spender: str,
        token_id: int,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        data = build_erc721_approve_call_data(spender, token_id)
        return await self.executor.submit(
            [Call(to=nft_contract_address, data=data)], tx_options, action=TransactionType.APPROVE
        )

    async def swap_tokens(
        self,
        trade_request: TradeRequest,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        quote = await self.trade.quote(trade_request)
        amount = trade_request.input_amount if trade_request.exact_in else int(quote.sell_amount)
        calls = await resolve_spend_calls(
            self.chain,
            self.wallet.get_sender(),
            trade_request.input_token,
            quote.to,
            quote.data,
            amount,
            allowance_target=quote.allowance_target or None,
        )
        return await self._submit_resolved(calls, tx_options, TransactionType.SWAP)

    async def stake_token(
        self,
        stake_request: StakeRequestBody,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        response = await self.staking.stake(stake_request)
        details = await self.get_erc20_token_details(stake_request.token_address)
        amount = contracts.parse_units(stake_request.token_amount, details.decimals)
        calls = await resolve_spend_calls(
            self.chain,
            self.wallet.get_sender(),
            stake_request.token_address,
            response.contract_address,
            response.encoded_abi,
            amount,
        )
        return await self._submit_resolved(calls, tx_options, TransactionType.STAKE)

    async def unstake_token(
        self,
        unstake_request: UnstakeRequestBody,
        unstake_token_address: str,
        tx_options: Optional[TxOptions] = None,
    ) -> OperationResult:
        """Unstake by spending the staking receipt token at `unstake_token_address`."""
        response = await self.staking.unstake(unstake_request)
        details = await self.get_erc20_token_details(unstake_token_address)
        amount = contracts.parse_units(unstake_request.token_amount, details.decimals)
        calls = await resolve_spend_calls(
            self.chain,
            self.wallet.get_sender(),
            unstake_token_address,
            response.contract_address,
            response.encoded_abi,
            amount,
        )
        return await self._submit_resolved(calls, tx_options, TransactionType.UNSTAKE)

    async def get_balance(self, token_address: str, address: str) -> int:
        return await contracts.get_balance(self.chain, token_address, address)

    async def get_allowance(self, token_address: str, spender: str) -> int:
        return await get_allowance(self.chain, token_address, self.wallet.get_sender(), spender)

    async def get_erc20_token_details(self, token_address: str) -> TokenDetails:
        return await contracts.get_erc20_token_details(self.chain, token_address)

    async def get_wallet_actions(
        self, page: int = 1, limit: int = 10, token_address: Optional[str] = None
    ) -> WalletActionResult:
        """One page of this wallet's action history. Requires a JWT."""
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if token_address:
            params["tokenAddress"] = token_address
        data = await self.backend.get("/v2/smart-wallets/actions", **params)
        if isinstance(data, dict) and "docs" not in data and isinstance(data.get("data"), dict):
            data = data["data"]
        return WalletActionResult.model_validate(data or {})

    async def close(self) -> None:
        await self.wallet.bundler.close()
        await self.chain.close()
        if self.wallet.paymaster is not None:
            await self.wallet.paymaster.close()
