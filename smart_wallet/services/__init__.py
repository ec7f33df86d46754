"""Backend API modules and on-chain read helpers"""

from .balances import BalancesModule
from .explorer import ExplorerModule
from .graphql import GraphQLModule
from .staking import StakingModule
from .trade import TradeModule

__all__ = [
    "BalancesModule",
    "ExplorerModule",
    "GraphQLModule",
    "StakingModule",
    "TradeModule",
]
