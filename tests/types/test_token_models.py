"""
Tests for backend DTO decoding.
"""

import base64
import json

import pytest

from smart_wallet.types import (
    BridgedToken,
    Collectible,
    ERC20Token,
    ERC721Token,
    IntervalStats,
    LiquidityPoolToken,
    MiscToken,
    NativeToken,
    NftAccount,
    StakedTokenResponse,
    StakeRequestBody,
    TradeData,
    TradeRequest,
    UnknownTokenTypeError,
    UserOpRecord,
    parse_token_details,
)

from tests.helpers import NATIVE, TOKEN


class TestTokenUnion:
    def test_erc20(self):
        token = parse_token_details(
            {
                "type": "ERC-20",
                "name": "USD Coin on Fuse",
                "symbol": "USDC",
                "decimals": "6",
                "balance": "1500000",
                "contractAddress": "0xAbCdEf0000000000000000000000000000000001",
            }
        )

        assert isinstance(token, ERC20Token)
        assert token.name == "USD Coin"
        assert token.decimals == 6
        assert token.amount == 1_500_000
        assert token.address == "0xabcdef0000000000000000000000000000000001"

    def test_erc721_has_no_decimals(self):
        token = parse_token_details(
            {"type": "ERC-721", "name": "Pets", "symbol": "PET", "decimals": "18", "balance": "2", "contractAddress": TOKEN}
        )

        assert isinstance(token, ERC721Token)
        assert token.decimals == 0
        assert token.amount == 2

    def test_native(self):
        token = parse_token_details({"type": "native", "balance": "10"})

        assert isinstance(token, NativeToken)
        assert token.address == NATIVE
        assert token.decimals == 18
        assert token.amount == 10

    def test_liquidity_pool(self):
        token = parse_token_details(
            {
                "type": "lp",
                "name": "LP",
                "symbol": "LP",
                "address": TOKEN,
                "underlyingTokens": [{"name": "A", "symbol": "A", "address": TOKEN}],
            }
        )

        assert isinstance(token, LiquidityPoolToken)
        assert token.underlying_tokens[0].symbol == "A"

    @pytest.mark.parametrize("tag,cls", [("bridged", BridgedToken), ("misc", MiscToken)])
    def test_bridged_and_misc(self, tag, cls):
        token = parse_token_details({"type": tag, "name": "X", "symbol": "X", "address": TOKEN, "decimals": "8"})

        assert isinstance(token, cls)
        assert token.decimals == 8

    @pytest.mark.parametrize("tag", ["ERC-1155", None, ""])
    def test_unknown_tag_raises(self, tag):
        with pytest.raises(UnknownTokenTypeError):
            parse_token_details({"type": tag, "name": "X"})


class TestTrade:
    def test_exact_in_params(self):
        request = TradeRequest(input_token=NATIVE, output_token=TOKEN, input_amount=10**18)

        assert request.get_params() == {"sellToken": "FUSE", "buyToken": TOKEN, "sellAmount": str(10**18)}

    def test_exact_out_params(self):
        request = TradeRequest(input_token=TOKEN, output_token=NATIVE, input_amount=5, exact_in=False)

        assert request.get_params() == {"sellToken": TOKEN, "buyToken": "FUSE", "buyAmount": "5"}

    def test_trade_data_from_json(self):
        quote = TradeData.model_validate(
            {
                "chainId": 122,
                "estimatedPriceImpact": "0.01",
                "to": "0xrouter",
                "data": "0x1234",
                "value": "0",
                "buyTokenAddress": NATIVE,
                "sellTokenAddress": TOKEN,
                "buyAmount": "1",
                "sellAmount": "2",
                "allowanceTarget": "0xproxy",
                "sources": [],
            }
        )

        assert quote.allowance_target == "0xproxy"
        assert quote.sell_amount == "2"

    def test_interval_stats(self):
        stats = IntervalStats.model_validate({"timestamp": 1, "priceChange": 2.5, "previousPrice": 1, "currentPrice": 2})

        assert stats.price_change == 2.5


class TestStakingAndHistory:
    def test_stake_request_serializes_camel_case(self):
        body = StakeRequestBody(account_address="0xa", token_amount="0.5", token_address=TOKEN)

        assert body.to_json() == {"accountAddress": "0xa", "tokenAmount": "0.5", "tokenAddress": TOKEN}

    def test_staked_tokens(self):
        response = StakedTokenResponse.model_validate(
            {
                "totalStakedAmountUSD": 10,
                "totalEarnedAmountUSD": 1,
                "stakedTokens": [
                    {"tokenAddress": TOKEN, "tokenSymbol": "S", "tokenName": "S", "unStakeTokenAddress": NATIVE}
                ],
            }
        )

        assert response.staked_tokens[0].unstake_token_address == NATIVE

    def test_user_op_record_with_null_transfers(self):
        record = UserOpRecord.model_validate(
            {
                "userOpHash": "0xh",
                "sender": "0xs",
                "success": True,
                "erc20Transfers": [{"from": "0xa", "to": "0xb", "value": "7", "contractAddress": TOKEN}],
                "erc721Transfers": None,
            }
        )

        assert record.erc20_transfers[0].value == 7
        assert record.erc721_transfers == []

    def test_collectible_image_from_descriptor(self):
        metadata = base64.b64encode(json.dumps({"image": "ipfs://pic"}).encode()).decode()
        collectible = Collectible.model_validate(
            {
                "tokenId": "1",
                "descriptorUri": f"data:application/json;base64,{metadata}",
                "created": "1700000000",
                "collection": {"collectionName": "C", "collectionSymbol": "C", "collectionAddress": TOKEN},
            }
        )

        assert collectible.image == "ipfs://pic"
        assert collectible.created_at == "1700000000"
        assert collectible.collection.address == TOKEN

    def test_explicit_image_url_wins(self):
        collectible = Collectible.model_validate({"tokenId": "1", "imageURL": "https://pic", "descriptorUri": "ipfs://x"})

        assert collectible.image == "https://pic"
        assert collectible.decode_descriptor_uri() is None

    def test_nft_account(self):
        account = NftAccount.model_validate({"id": "0xa", "address": "0xa", "collectibles": [{"tokenId": "3"}]})

        assert account.collectibles[0].token_id == "3"
