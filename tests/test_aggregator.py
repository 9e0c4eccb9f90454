"""Tests for portfolio statistics and chart series."""

from datetime import date, datetime, timedelta, timezone

import pytest

from portfolio.aggregator import (
    build_category_series,
    build_root_market_series,
    build_side_series,
    build_volume_series,
    classify_category,
    compute_totals,
)
from portfolio.extractors import position_value


def _ts(day: date, hour: int = 12) -> float:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc).timestamp()


class TestComputeTotals:
    """Summary statistics."""

    def test_reference_wallet(self):
        positions = [{"currentValueInQuoteToken": 100, "unrealizedPnl": -10}]
        trades = [{"price": 2, "size": 5, "pnl": 3}, {"price": 1, "size": 5, "pnl": -1}]

        stats = compute_totals(positions, trades)

        assert stats.net_worth == 100
        assert stats.unrealized_total == -10
        assert stats.realized_total == 2
        assert stats.total_pnl == -8
        assert stats.volume == 15
        assert stats.win_rate == 0.5
        assert stats.positions_count == 1
        assert stats.trades_count == 2

    def test_empty_inputs(self):
        stats = compute_totals([], [])
        assert stats.net_worth == 0
        assert stats.total_pnl == 0
        assert stats.volume == 0
        assert stats.win_rate == 0

    def test_zero_pnl_trades_outside_win_rate(self):
        trades = [{"pnl": 1}, {"pnl": 0}, {"pnl": 0}]
        stats = compute_totals([], trades)
        assert stats.win_rate == 1.0
        assert stats.wins == 1
        assert stats.losses == 0

    def test_total_is_sum_of_parts(self):
        positions = [{"unrealizedPnl": "2.5"}, {"unrealizedPnl": "junk"}]
        trades = [{"profit": 4}, {"realizedPnl": -1.5}]
        stats = compute_totals(positions, trades)
        assert stats.total_pnl == pytest.approx(stats.unrealized_total + stats.realized_total)
        assert stats.total_pnl == pytest.approx(5.0)

    def test_win_rate_bounds(self):
        trades = [{"pnl": -1}, {"pnl": -2}]
        stats = compute_totals([], trades)
        assert 0 <= stats.win_rate <= 1
        assert stats.win_rate == 0


class TestVolumeSeries:
    """Day-bucketed volume."""

    def test_window_is_zero_filled_and_ordered(self):
        today = date(2024, 10, 20)
        series = build_volume_series([], window_days=14, today=today)
        assert len(series.labels) == 14
        assert series.values == [0.0] * 14
        assert series.labels[0] == "Oct 07"
        assert series.labels[-1] == "Oct 20"

    def test_buckets_and_skips(self):
        today = date(2024, 10, 20)
        trades = [
            {"usdAmount": 5, "createdAt": _ts(today)},
            {"usdAmount": 7, "createdAt": _ts(today) * 1000},
            {"usdAmount": 3, "createdAt": _ts(today - timedelta(days=2))},
            {"usdAmount": 100, "createdAt": _ts(today - timedelta(days=30))},
            {"usdAmount": 100, "createdAt": "not a date"},
            {"usdAmount": 100},
        ]
        series = build_volume_series(trades, window_days=3, today=today)
        assert series.labels == ["Oct 18", "Oct 19", "Oct 20"]
        assert series.values == [3.0, 0.0, 12.0]

    def test_iso_timestamps(self):
        today = date(2024, 1, 2)
        trades = [{"amount": 4, "timestamp": "2024-01-01T08:00:00Z"}]
        series = build_volume_series(trades, window_days=2, today=today)
        assert series.values == [4.0, 0.0]


class TestSideSeries:
    def test_counts(self):
        trades = [{"sideEnum": "BUY"}, {"side": "buy"}, {"side": "Sell"}, {"side": "merge"}, {}]
        sides = build_side_series(trades)
        assert sides.buy == 2
        assert sides.sell == 1


class TestCategories:
    """Keyword classification and grouping."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Will the Fed cut rates in March?", "Macro"),
            ("US CPI above 3%?", "Macro"),
            ("Who wins the 2024 presidential election?", "Politics"),
            ("NBA Finals champion", "Sports"),
            ("BTC above $100k by year end?", "Crypto"),
            ("Will it snow in Paris?", "More"),
            ("", "More"),
        ],
    )
    def test_classify(self, title, expected):
        assert classify_category(title) == expected

    def test_whole_words_only(self):
        assert classify_category("Pirate movie box office") == "More"

    def test_category_sums_match_total_value(self):
        positions = [
            {"rootMarketTitle": "BTC price end of year", "currentValueInQuoteToken": 10},
            {"marketTitle": "Election winner", "currentValueInQuoteToken": 5},
            {"marketTitle": "Random", "currentValueInQuoteToken": 2},
            {"marketTitle": "ETH flippening", "currentValueInQuoteToken": 1},
        ]
        series = build_category_series(positions)
        assert series.labels == ["Crypto", "Politics", "More"]
        assert series.values == [11, 5, 2]
        assert series.total == sum(position_value(p) for p in positions)

    def test_root_market_top_n_with_other(self):
        positions = [
            {"rootMarketTitle": "A", "currentValueInQuoteToken": 1},
            {"rootMarketTitle": "B", "currentValueInQuoteToken": 5},
            {"rootMarketTitle": "C", "currentValueInQuoteToken": 3},
            {"rootMarketTitle": "B", "currentValueInQuoteToken": 1},
            {"marketTitle": "D", "currentValueInQuoteToken": 2},
        ]
        series = build_root_market_series(positions, top_n=2)
        assert series.labels == ["B", "C", "Other"]
        assert series.values == [6, 3, 3]
        assert series.total == 12

    def test_root_market_without_overflow(self):
        series = build_root_market_series([{"currentValueInQuoteToken": 4}], top_n=5)
        assert series.labels == ["Untitled"]
        assert series.values == [4]
