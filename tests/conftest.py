"""Shared fixtures: a deterministic owner key and mocked chain/bundler providers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from smart_wallet.core.execution.userop import UserOpGasEstimate
from smart_wallet.core.wallet.signer import LocalAccountSigner
from smart_wallet.providers.bundler import BundlerProvider
from smart_wallet.providers.chain import ChainProvider, FeeData

from tests.helpers import OWNER_KEY


@pytest.fixture
def signer():
    return LocalAccountSigner(OWNER_KEY)


@pytest.fixture
def chain():
    """ChainProvider with every network method stubbed."""
    mock = MagicMock(spec=ChainProvider)
    mock.get_nonce = AsyncMock(return_value=0)
    mock.chain_id = AsyncMock(return_value=122)
    mock.get_fee_data = AsyncMock(
        return_value=FeeData(max_fee_per_gas=1_000_000_000_000, max_priority_fee_per_gas=10_000_000_000)
    )
    mock.call = AsyncMock(return_value="0x")
    mock.call_uint = AsyncMock(return_value=0)
    mock.get_balance = AsyncMock(return_value=0)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def bundler():
    mock = MagicMock(spec=BundlerProvider)
    mock.estimate_user_operation_gas = AsyncMock(
        return_value=UserOpGasEstimate(
            call_gas_limit=50_000,
            verification_gas_limit=100_000,
            pre_verification_gas=45_000,
        )
    )
    mock.send_user_operation = AsyncMock(return_value="0x" + "ab" * 32)
    mock.get_user_operation_receipt = AsyncMock(return_value=None)
    mock.close = AsyncMock()
    return mock
