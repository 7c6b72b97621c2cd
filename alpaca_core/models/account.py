"""Account, account configuration and portfolio history records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..utils import parse_datetime, parse_float, parse_optional_float


class AccountStatus(Enum):
    """Brokerage account status."""

    ONBOARDING = "ONBOARDING"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    SUBMITTED = "SUBMITTED"
    ACCOUNT_UPDATED = "ACCOUNT_UPDATED"
    APPROVAL_PENDING = "APPROVAL_PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


@dataclass
class Account:
    """Trading account snapshot.

    Monetary fields are transmitted as strings and parsed to float.
    """

    id: str
    account_number: str
    status: AccountStatus
    currency: str
    cash: float
    buying_power: float
    equity: float
    last_equity: float
    long_market_value: float
    short_market_value: float
    multiplier: float
    initial_margin: float
    maintenance_margin: float
    last_maintenance_margin: float
    sma: float
    daytrading_buying_power: float
    regt_buying_power: float
    daytrade_count: int
    created_at: datetime
    pattern_day_trader: bool = False
    trade_suspended_by_user: bool = False
    trading_blocked: bool = False
    transfers_blocked: bool = False
    account_blocked: bool = False
    shorting_enabled: bool = False
    portfolio_value: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        return cls(
            id=data["id"],
            account_number=data["account_number"],
            status=AccountStatus(data["status"]),
            currency=data["currency"],
            cash=parse_float(data["cash"]),
            buying_power=parse_float(data["buying_power"]),
            equity=parse_float(data["equity"]),
            last_equity=parse_float(data["last_equity"]),
            long_market_value=parse_float(data["long_market_value"]),
            short_market_value=parse_float(data["short_market_value"]),
            multiplier=parse_float(data["multiplier"]),
            initial_margin=parse_float(data["initial_margin"]),
            maintenance_margin=parse_float(data["maintenance_margin"]),
            last_maintenance_margin=parse_float(data["last_maintenance_margin"]),
            sma=parse_float(data["sma"]),
            daytrading_buying_power=parse_float(data["daytrading_buying_power"]),
            regt_buying_power=parse_float(data["regt_buying_power"]),
            daytrade_count=int(data["daytrade_count"]),
            created_at=parse_datetime(data["created_at"]),
            pattern_day_trader=bool(data.get("pattern_day_trader", False)),
            trade_suspended_by_user=bool(data.get("trade_suspended_by_user", False)),
            trading_blocked=bool(data.get("trading_blocked", False)),
            transfers_blocked=bool(data.get("transfers_blocked", False)),
            account_blocked=bool(data.get("account_blocked", False)),
            shorting_enabled=bool(data.get("shorting_enabled", False)),
            portfolio_value=parse_optional_float(data.get("portfolio_value")),
        )


class DtbpCheck(Enum):
    """When the day-trading buying power check is applied."""

    BOTH = "both"
    ENTRY = "entry"
    EXIT = "exit"


class TradeConfirmEmail(Enum):
    """Trade confirmation email preference."""

    ALL = "all"
    NONE = "none"


@dataclass
class AccountConfigurations:
    """Account-level trading settings."""

    dtbp_check: DtbpCheck = DtbpCheck.ENTRY
    trade_confirm_email: TradeConfirmEmail = TradeConfirmEmail.ALL
    suspend_trade: bool = False
    no_shorting: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "dtbp_check": self.dtbp_check.value,
            "trade_confirm_email": self.trade_confirm_email.value,
            "suspend_trade": self.suspend_trade,
            "no_shorting": self.no_shorting,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccountConfigurations:
        return cls(
            dtbp_check=DtbpCheck(data["dtbp_check"]),
            trade_confirm_email=TradeConfirmEmail(data["trade_confirm_email"]),
            suspend_trade=bool(data["suspend_trade"]),
            no_shorting=bool(data["no_shorting"]),
        )


class TimeFrame(Enum):
    """Resolution of portfolio history samples."""

    ONE_MIN = "1Min"
    FIVE_MIN = "5Min"
    FIFTEEN_MIN = "15Min"
    ONE_HOUR = "1H"
    ONE_DAY = "1D"


@dataclass
class PortfolioHistory:
    """Equity and profit/loss time series for the account.

    Attributes:
        timestamp: Sample times in epoch milliseconds.
        equity: Equity value at each sample.
        profit_loss: Absolute profit/loss relative to ``base_value``.
        profit_loss_pct: Relative profit/loss at each sample.
        base_value: Reference equity the series is measured against.
        timeframe: Sample resolution.
    """

    timestamp: list[int]
    equity: list[float]
    profit_loss: list[float]
    profit_loss_pct: list[float]
    base_value: float
    timeframe: TimeFrame

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PortfolioHistory:
        return cls(
            timestamp=[int(ts) for ts in data["timestamp"]],
            equity=[float(v) for v in data["equity"]],
            profit_loss=[float(v) for v in data["profit_loss"]],
            profit_loss_pct=[float(v) for v in data["profit_loss_pct"]],
            base_value=float(data["base_value"]),
            timeframe=TimeFrame(data["timeframe"]),
        )
