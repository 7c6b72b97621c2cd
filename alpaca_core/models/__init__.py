"""REST data models for the trading API.

This package contains plain data records with no I/O dependencies.

Components:
- orders: Order records and order submission payloads
- account: Account, account configurations, portfolio history
- activities: Trade and non-trade account activities
- assets: Tradable assets
- market: Market calendar and clock
- positions: Open positions
"""

from .account import (
    Account,
    AccountConfigurations,
    AccountStatus,
    DtbpCheck,
    PortfolioHistory,
    TimeFrame,
    TradeConfirmEmail,
)
from .activities import (
    Activity,
    ActivitySide,
    FillType,
    NonTradeActivity,
    TradeActivity,
    activity_from_dict,
)
from .assets import Asset, AssetClass, AssetStatus, Exchange
from .market import Calendar, Clock
from .orders import (
    Order,
    OrderClass,
    OrderIntent,
    OrderStatus,
    OrderType,
    QueryOrderStatus,
    Side,
    SortDirection,
    StopLossSpec,
    TakeProfitSpec,
    TimeInForce,
)
from .positions import Position, PositionSide

__all__ = [
    "Account",
    "AccountConfigurations",
    "AccountStatus",
    "Activity",
    "ActivitySide",
    "Asset",
    "AssetClass",
    "AssetStatus",
    "Calendar",
    "Clock",
    "DtbpCheck",
    "Exchange",
    "FillType",
    "NonTradeActivity",
    "Order",
    "OrderClass",
    "OrderIntent",
    "OrderStatus",
    "OrderType",
    "PortfolioHistory",
    "Position",
    "PositionSide",
    "QueryOrderStatus",
    "Side",
    "SortDirection",
    "StopLossSpec",
    "TakeProfitSpec",
    "TimeFrame",
    "TimeInForce",
    "TradeActivity",
    "TradeConfirmEmail",
    "activity_from_dict",
]
