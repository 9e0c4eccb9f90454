"""Tests for trade and position field extraction."""

import math
from datetime import date, datetime, timezone

from portfolio.extractors import (
    TradeFieldPolicy,
    date_label,
    normalize_trade,
    normalized_side,
    parse_trade_date,
    position_unrealized_pnl,
    position_unrealized_pnl_percent,
    position_value,
    to_number,
    trade_amount_usd,
    trade_pnl_usd,
    trade_price,
)


class TestCoercion:
    def test_to_number(self):
        assert to_number("1.5") == 1.5
        assert to_number(" 2 ") == 2.0
        assert to_number("") is None
        assert to_number("abc") is None
        assert to_number(True) is None
        assert to_number(float("nan")) is None
        assert to_number(float("inf")) is None


class TestTradeAmount:
    """USD amount resolution order."""

    def test_usd_field_wins(self):
        assert trade_amount_usd({"usdAmount": "12.5", "amount": 99}) == 12.5

    def test_zero_usd_field_falls_through(self):
        assert trade_amount_usd({"usdAmount": 0, "amount": 7}) == 7

    def test_generic_amount(self):
        assert trade_amount_usd({"value": "3"}) == 3

    def test_shares_times_price(self):
        assert trade_amount_usd({"shares": 2, "price": 5}) == 10

    def test_size_is_a_share_quantity(self):
        assert trade_amount_usd({"size": 1, "price": 5}) == 5

    def test_negative_amount_is_absolute(self):
        assert trade_amount_usd({"amountUsd": -4}) == 4

    def test_unresolvable_is_zero(self):
        assert trade_amount_usd({}) == 0
        assert trade_amount_usd({"shares": 2}) == 0
        assert trade_amount_usd({"usdAmount": "n/a"}) == 0

    def test_custom_policy(self):
        policy = TradeFieldPolicy(usd_amount_fields=("notionalUsd",))
        assert trade_amount_usd({"notionalUsd": 8}, policy) == 8


class TestTradeFields:
    def test_pnl_first_nonzero(self):
        assert trade_pnl_usd({"pnl": 0, "profit": "1.5"}) == 1.5
        assert trade_pnl_usd({"realizedPnl": -2}) == -2
        assert trade_pnl_usd({}) == 0

    def test_price_fallbacks(self):
        assert trade_price({"avgPrice": "0.42"}) == 0.42
        assert trade_price({"price": 0}) == 0
        assert trade_price({}) is None

    def test_side_normalization(self):
        assert normalized_side({"sideEnum": "BUY"}) == "buy"
        assert normalized_side({"side": "Sell"}) == "sell"
        assert normalized_side({"side": "split"}) is None
        assert normalized_side({}) is None

    def test_normalize_trade_is_idempotent(self):
        trade = {"shares": 2, "price": 5, "pnl": 1, "side": "BUY", "createdAt": 1700000000}
        once = normalize_trade(trade)
        twice = normalize_trade(once)
        assert once == twice
        assert once["usdAmount"] == 10
        assert once["pnl"] == 1


class TestTimestamps:
    def test_seconds_and_millis_agree(self):
        assert parse_trade_date(1700000000) == parse_trade_date(1700000000000)
        assert parse_trade_date(1700000000) == date(2023, 11, 14)

    def test_numeric_string(self):
        assert parse_trade_date("1700000000") == date(2023, 11, 14)

    def test_iso_string(self):
        assert parse_trade_date("2024-03-05T23:30:00Z") == date(2024, 3, 5)
        assert parse_trade_date("2024-03-05") == date(2024, 3, 5)

    def test_invalid(self):
        assert parse_trade_date(None) is None
        assert parse_trade_date("garbage") is None
        assert date_label("garbage") == ""

    def test_label(self):
        ts = datetime(2024, 10, 5, 12, tzinfo=timezone.utc).timestamp()
        assert date_label(ts) == "Oct 05"


class TestPositions:
    def test_value_reported(self):
        assert position_value({"currentValueInQuoteToken": "60"}) == 60

    def test_value_from_price(self):
        assert position_value({"sharesOwned": 10, "currentPrice": 0.5}) == 5

    def test_reported_zero_value_is_kept(self):
        assert position_value({"currentValueInQuoteToken": 0, "sharesOwned": 10, "currentPrice": 0.5}) == 0

    def test_value_missing(self):
        assert position_value({"sharesOwned": 10}) == 0

    def test_unrealized_reported_zero_is_kept(self):
        position = {"unrealizedPnl": 0, "sharesOwned": 10, "currentPrice": 1, "avgEntryPrice": 0.5}
        assert position_unrealized_pnl(position) == 0

    def test_unrealized_derived(self):
        position = {"sharesOwned": 10, "currentPrice": 0.6, "avgEntryPrice": 0.5}
        assert math.isclose(position_unrealized_pnl(position), 1.0)

    def test_unrealized_percent(self):
        position = {"sharesOwned": 10, "currentPrice": 0.6, "avgEntryPrice": 0.5}
        assert math.isclose(position_unrealized_pnl_percent(position), 0.2)
        assert position_unrealized_pnl_percent({"unrealizedPnl": 3}) is None
