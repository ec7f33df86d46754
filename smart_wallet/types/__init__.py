from .history import Collectible, Collection, Erc20Transfer, Erc721Transfer, NftAccount, UserOpRecord
from .staking import (
    StakedToken,
    StakedTokenResponse,
    StakeRequestBody,
    StakeResponseBody,
    StakingOption,
    UnstakeRequestBody,
    UnstakeResponseBody,
)
from .tokens import (
    BridgedToken,
    ERC20Token,
    ERC721Token,
    LiquidityPoolToken,
    MiscToken,
    NativeToken,
    Token,
    TokenDetails,
    UnknownTokenTypeError,
    parse_token_details,
)
from .trade import IntervalStats, TimeFrame, TradeData, TradeRequest
from .wallet_action import (
    ApproveToken,
    BatchTransaction,
    Erc20TokenEvent,
    Erc721TokenEvent,
    NativeTokenEvent,
    NftReceive,
    NftTransfer,
    StakeTokensAction,
    SwapTokens,
    TokenEvent,
    TokenReceive,
    TokenTransfer,
    UnknownWalletActionError,
    UnstakeTokensAction,
    WalletAction,
    WalletActionResult,
    parse_token_event,
    parse_wallet_action,
)

__all__ = [
    "ApproveToken",
    "BatchTransaction",
    "BridgedToken",
    "Collectible",
    "Collection",
    "ERC20Token",
    "ERC721Token",
    "Erc20Transfer",
    "Erc721Transfer",
    "Erc20TokenEvent",
    "Erc721TokenEvent",
    "IntervalStats",
    "LiquidityPoolToken",
    "MiscToken",
    "NativeToken",
    "NativeTokenEvent",
    "NftReceive",
    "NftTransfer",
    "NftAccount",
    "StakedToken",
    "StakedTokenResponse",
    "StakeRequestBody",
    "StakeResponseBody",
    "StakingOption",
    "StakeTokensAction",
    "SwapTokens",
    "TimeFrame",
    "Token",
    "TokenDetails",
    "TokenEvent",
    "TokenReceive",
    "TokenTransfer",
    "TradeData",
    "TradeRequest",
    "UnknownTokenTypeError",
    "UnknownWalletActionError",
    "UnstakeRequestBody",
    "UnstakeResponseBody",
    "UnstakeTokensAction",
    "UserOpRecord",
    "WalletAction",
    "WalletActionResult",
    "parse_token_details",
    "parse_token_event",
    "parse_wallet_action",
]
