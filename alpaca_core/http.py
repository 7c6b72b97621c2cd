"""HTTP client for the Alpaca trading REST API (v2)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, TypeVar

import aiohttp

from .errors import (
    AlpacaConnectionError,
    AlpacaDecodeError,
    AlpacaResponseError,
    AlpacaTimeout,
)
from .models import (
    Account,
    AccountConfigurations,
    Activity,
    Asset,
    AssetClass,
    AssetStatus,
    Calendar,
    Clock,
    Order,
    OrderIntent,
    PortfolioHistory,
    Position,
    QueryOrderStatus,
    SortDirection,
    activity_from_dict,
)
from .utils import format_datetime

if TYPE_CHECKING:
    from .config import AlpacaConfig

_LOGGER = logging.getLogger(__name__)

PAPER_URL = "https://paper-api.alpaca.markets/v2"
LIVE_URL = "https://api.alpaca.markets/v2"

T = TypeVar("T")


def _parse(parser: Callable[[dict[str, Any]], T], data: Any, what: str) -> T:
    try:
        return parser(data)
    except (KeyError, TypeError, ValueError) as err:
        raise AlpacaDecodeError(f"Invalid {what} response: {err!r}") from err


def _parse_list(parser: Callable[[dict[str, Any]], T], data: Any, what: str) -> list[T]:
    if not isinstance(data, list):
        raise AlpacaDecodeError(f"Expected a list of {what}")
    return [_parse(parser, item, what) for item in data]


def _unwrap_body(item: Any) -> Any:
    # Bulk DELETE endpoints wrap each result as {"id", "status", "body"}
    if isinstance(item, dict) and isinstance(item.get("body"), dict):
        return item["body"]
    return item


class AlpacaHttpClient:
    """HTTP client wrapper for the trading REST endpoints.

    The caller owns the ``aiohttp.ClientSession``.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        key_id: str,
        secret_key: str,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._key_id = key_id
        self._secret_key = secret_key
        self._timeout = timeout

    @classmethod
    def paper(
        cls, session: aiohttp.ClientSession, key_id: str, secret_key: str, **kwargs: Any
    ) -> AlpacaHttpClient:
        return cls(session, PAPER_URL, key_id, secret_key, **kwargs)

    @classmethod
    def live(
        cls, session: aiohttp.ClientSession, key_id: str, secret_key: str, **kwargs: Any
    ) -> AlpacaHttpClient:
        return cls(session, LIVE_URL, key_id, secret_key, **kwargs)

    @classmethod
    def from_config(
        cls, session: aiohttp.ClientSession, config: AlpacaConfig, **kwargs: Any
    ) -> AlpacaHttpClient:
        base_url = config.base_url.rstrip("/")
        if not base_url.endswith("/v2"):
            base_url = f"{base_url}/v2"
        return cls(session, base_url, config.key_id, config.secret_key, **kwargs)

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path}"

    def _auth_headers(self) -> dict[str, str]:
        return {
            "APCA-API-KEY-ID": self._key_id,
            "APCA-API-SECRET-KEY": self._secret_key,
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None for 204)."""
        url = self._url(path)
        _LOGGER.debug("%s %s %s", method, url, params or "")
        try:
            async with self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._auth_headers(),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    message = await resp.text()
                    raise AlpacaResponseError(
                        resp.status, message or f"{method} {path} failed"
                    )
                if resp.status == 204:
                    return None
                try:
                    return await resp.json(content_type=None)
                except ValueError as err:
                    raise AlpacaDecodeError(f"Invalid JSON from {path}") from err
        except TimeoutError as err:
            raise AlpacaTimeout(f"{method} {path} timed out") from err
        except aiohttp.ClientError as err:
            raise AlpacaConnectionError(f"{method} {path} failed") from err

    # -------------------------------------------------------------------------
    # Account
    # -------------------------------------------------------------------------

    async def get_account(self) -> Account:
        data = await self._request("GET", "account")
        return _parse(Account.from_dict, data, "account")

    async def get_account_configurations(self) -> AccountConfigurations:
        data = await self._request("GET", "account/configurations")
        return _parse(AccountConfigurations.from_dict, data, "account configurations")

    async def patch_account_configurations(
        self, configurations: AccountConfigurations
    ) -> AccountConfigurations:
        """Update the account configurations and return the stored values."""
        data = await self._request(
            "PATCH", "account/configurations", json=configurations.to_dict()
        )
        return _parse(AccountConfigurations.from_dict, data, "account configurations")

    async def get_account_activities(self) -> list[Activity]:
        data = await self._request("GET", "account/activities")
        return _parse_list(activity_from_dict, data, "activities")

    async def get_portfolio_history(self) -> PortfolioHistory:
        data = await self._request("GET", "account/portfolio/history")
        return _parse(PortfolioHistory.from_dict, data, "portfolio history")

    # -------------------------------------------------------------------------
    # Assets and market
    # -------------------------------------------------------------------------

    async def get_assets(
        self,
        status: AssetStatus = AssetStatus.ACTIVE,
        asset_class: AssetClass = AssetClass.US_EQUITY,
    ) -> list[Asset]:
        data = await self._request(
            "GET",
            "assets",
            params={"status": status.value, "asset_class": asset_class.value},
        )
        return _parse_list(Asset.from_dict, data, "assets")

    async def get_asset(self, symbol: str) -> Asset:
        data = await self._request("GET", f"assets/{symbol}")
        return _parse(Asset.from_dict, data, "asset")

    async def get_calendar(
        self,
        start: date = date(1970, 1, 1),
        end: date = date(2029, 12, 31),
    ) -> list[Calendar]:
        """Market days between ``start`` and ``end`` inclusive."""
        data = await self._request(
            "GET",
            "calendar",
            params={"start": start.isoformat(), "end": end.isoformat()},
        )
        return _parse_list(Calendar.from_dict, data, "calendar")

    async def get_clock(self) -> Clock:
        data = await self._request("GET", "clock")
        return _parse(Clock.from_dict, data, "clock")

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def get_orders(
        self,
        status: QueryOrderStatus = QueryOrderStatus.OPEN,
        limit: int = 50,
        after: datetime | None = None,
        until: datetime | None = None,
        direction: SortDirection = SortDirection.DESCENDING,
        nested: bool = False,
    ) -> list[Order]:
        params = {
            "status": status.value,
            "limit": str(limit),
            "direction": direction.value,
            "nested": _bool_param(nested),
        }
        if after is not None:
            params["after"] = format_datetime(after)
        if until is not None:
            params["until"] = format_datetime(until)
        data = await self._request("GET", "orders", params=params)
        return _parse_list(Order.from_dict, data, "orders")

    async def get_order(self, order_id: str, nested: bool = False) -> Order:
        data = await self._request(
            "GET", f"orders/{order_id}", params={"nested": _bool_param(nested)}
        )
        return _parse(Order.from_dict, data, "order")

    async def submit_order(self, intent: OrderIntent) -> Order:
        """Submit a new order.

        Raises:
            ValueError: The intent fails ``OrderIntent.validate``.
        """
        intent.validate()
        data = await self._request("POST", "orders", json=intent.to_dict())
        order = _parse(Order.from_dict, data, "order")
        _LOGGER.info(
            "Order %s submitted: %s %s %s", order.id, intent.side.value, order.qty, order.symbol
        )
        return order

    async def replace_order(self, order_id: str, intent: OrderIntent) -> Order:
        intent.validate()
        data = await self._request("PATCH", f"orders/{order_id}", json=intent.to_dict())
        return _parse(Order.from_dict, data, "order")

    async def cancel_order(self, order_id: str) -> None:
        await self._request("DELETE", f"orders/{order_id}")
        _LOGGER.info("Order %s cancelled", order_id)

    async def cancel_all_orders(self) -> list[Order]:
        data = await self._request("DELETE", "orders")
        if data is None:
            return []
        if not isinstance(data, list):
            raise AlpacaDecodeError("Expected a list of orders")
        return _parse_list(Order.from_dict, [_unwrap_body(item) for item in data], "orders")

    # -------------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------------

    async def get_positions(self) -> list[Position]:
        data = await self._request("GET", "positions")
        return _parse_list(Position.from_dict, data, "positions")

    async def get_position(self, symbol: str) -> Position:
        data = await self._request("GET", f"positions/{symbol}")
        return _parse(Position.from_dict, data, "position")

    async def close_position(self, symbol: str) -> Order:
        """Liquidate a position; returns the closing order."""
        data = await self._request("DELETE", f"positions/{symbol}")
        return _parse(Order.from_dict, data, "order")

    async def close_all_positions(self) -> list[Order]:
        data = await self._request("DELETE", "positions")
        if data is None:
            return []
        if not isinstance(data, list):
            raise AlpacaDecodeError("Expected a list of orders")
        return _parse_list(Order.from_dict, [_unwrap_body(item) for item in data], "orders")


def _bool_param(value: bool) -> str:
    return "true" if value else "false"
