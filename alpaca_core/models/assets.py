"""Tradable asset records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AssetClass(Enum):
    US_EQUITY = "us_equity"


class Exchange(Enum):
    AMEX = "AMEX"
    ARCA = "ARCA"
    BATS = "BATS"
    NYSE = "NYSE"
    NASDAQ = "NASDAQ"
    NYSEARCA = "NYSEARCA"
    OTC = "OTC"


class AssetStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Asset:
    """An asset and its trading flags."""

    id: str
    asset_class: AssetClass
    exchange: Exchange
    symbol: str
    status: AssetStatus
    tradable: bool
    marginable: bool
    shortable: bool
    easy_to_borrow: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        return cls(
            id=data["id"],
            asset_class=AssetClass(data["class"]),
            exchange=Exchange(data["exchange"]),
            symbol=data["symbol"],
            status=AssetStatus(data["status"]),
            tradable=bool(data["tradable"]),
            marginable=bool(data["marginable"]),
            shortable=bool(data["shortable"]),
            easy_to_borrow=bool(data["easy_to_borrow"]),
        )
