"""Tests for REST data models and value parsing."""

from __future__ import annotations

from datetime import date, time

import pytest

from alpaca_core.models import (
    Calendar,
    Order,
    OrderClass,
    OrderIntent,
    OrderType,
    Side,
    StopLossSpec,
    TakeProfitSpec,
)
from alpaca_core.utils import (
    parse_float,
    parse_int,
    parse_optional_float,
    to_string,
)

from .conftest import order_data


class TestValueParsing:
    """Tests for numeric string handling."""

    def test_parse_float_from_string(self):
        assert parse_float("179.08") == 179.08

    def test_parse_float_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_float("abc")

    def test_parse_float_rejects_bool(self):
        with pytest.raises(ValueError):
            parse_float(True)

    @pytest.mark.parametrize("value", ["nan", "Infinity", "1_000", " 1.5", float("inf")])
    def test_parse_float_rejects_non_decimal(self, value):
        with pytest.raises(ValueError):
            parse_float(value)

    def test_parse_int(self):
        assert parse_int("100") == 100
        assert parse_int(7) == 7

    def test_parse_int_rejects_decimal_string(self):
        with pytest.raises(ValueError):
            parse_int("1.5")

    @pytest.mark.parametrize("value", ["1_000", " 100 ", "+7", ""])
    def test_parse_int_rejects_loose_strings(self, value):
        with pytest.raises(ValueError):
            parse_int(value)

    def test_optional_non_string_is_none(self, caplog):
        assert parse_optional_float(12.5) is None
        assert "String expected" in caplog.text

    def test_optional_null(self):
        assert parse_optional_float(None) is None

    def test_to_string(self):
        assert to_string(150.0) == "150"
        assert to_string(150.25) == "150.25"
        assert to_string(3) == "3"


class TestOrder:
    """Tests for Order.from_dict()."""

    def test_nested_legs(self):
        order = Order.from_dict(
            order_data(
                order_class="bracket",
                legs=[order_data(id="leg-1", type="limit", limit_price="200")],
            )
        )
        assert order.legs is not None
        assert order.legs[0].id == "leg-1"
        assert order.legs[0].order_type is OrderType.LIMIT
        assert order.legs[0].limit_price == 200.0

    def test_missing_type(self):
        data = order_data()
        del data["type"]
        del data["order_type"]
        with pytest.raises(KeyError):
            Order.from_dict(data)

    def test_extended_hours_must_be_boolean(self):
        with pytest.raises(ValueError, match="extended_hours"):
            Order.from_dict(order_data(extended_hours="false"))

    def test_extended_hours_defaults_false(self):
        data = order_data()
        del data["extended_hours"]
        assert Order.from_dict(data).extended_hours is False


class TestOrderIntent:
    """Tests for OrderIntent validation."""

    def test_defaults_are_valid(self):
        intent = OrderIntent(symbol="AAPL")
        intent.validate()
        assert intent.side is Side.BUY
        assert intent.side.opposite is Side.SELL

    def test_zero_qty(self):
        with pytest.raises(ValueError, match="qty"):
            OrderIntent(symbol="AAPL", qty=0).validate()

    def test_stop_limit_needs_both_prices(self):
        with pytest.raises(ValueError, match="stop_price"):
            OrderIntent(
                symbol="AAPL", order_type=OrderType.STOP_LIMIT, limit_price=10
            ).validate()

    def test_trailing_stop_needs_one_trail(self):
        with pytest.raises(ValueError, match="trail"):
            OrderIntent(
                symbol="AAPL",
                order_type=OrderType.TRAILING_STOP,
                trail_price=1.0,
                trail_percent=2.0,
            ).validate()

    def test_bracket_needs_both_legs(self):
        with pytest.raises(ValueError, match="bracket"):
            OrderIntent(
                symbol="AAPL",
                order_class=OrderClass.BRACKET,
                take_profit=TakeProfitSpec(limit_price=200),
            ).validate()

    def test_oto_with_one_leg(self):
        OrderIntent(
            symbol="AAPL",
            order_class=OrderClass.ONE_TRIGGERS_OTHER,
            stop_loss=StopLossSpec(stop_price=90),
        ).validate()


class TestCalendar:
    def test_to_dict(self):
        day = Calendar(date=date(2018, 1, 3), open=time(9, 30), close=time(16, 0))
        assert day.to_dict() == {"date": "2018-01-03", "open": "09:30", "close": "16:00"}
        assert Calendar.from_dict(day.to_dict()) == day
