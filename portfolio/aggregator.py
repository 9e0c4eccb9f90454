"""
Portfolio aggregation: summary statistics and chart series.

All functions are pure. Records that fail to parse contribute 0 to sums
rather than being dropped.
"""
import re
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from config import system_constants as C
from .extractors import (
    DEFAULT_TRADE_POLICY,
    TradeFieldPolicy,
    format_day,
    normalized_side,
    parse_trade_date,
    position_category_title,
    position_root_title,
    position_title,
    position_unrealized_pnl,
    position_value,
    trade_amount_usd,
    trade_pnl_usd,
    trade_timestamp,
)


@dataclass(frozen=True)
class AggregateStats:
    """Summary statistics for one wallet snapshot"""
    net_worth: float = 0.0
    unrealized_total: float = 0.0
    realized_total: float = 0.0
    total_pnl: float = 0.0
    volume: float = 0.0
    win_rate: float = 0.0
    wins: int = 0
    losses: int = 0
    positions_count: int = 0
    trades_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SeriesData:
    """Labelled chart series"""
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(self.values)

    def to_dict(self) -> dict:
        return {"labels": list(self.labels), "values": list(self.values)}


@dataclass(frozen=True)
class SideCounts:
    buy: int = 0
    sell: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def compute_totals(
    positions: Sequence[dict],
    trades: Sequence[dict],
    policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY,
) -> AggregateStats:
    """
    Compute net worth, PnL, volume and win rate.

    Win rate counts only trades with strictly positive or negative realized
    PnL; trades at 0 are outside the denominator.
    """
    positions = positions or []
    trades = trades or []

    net_worth = sum(position_value(p) for p in positions)
    unrealized = sum(position_unrealized_pnl(p) for p in positions)

    volume = 0.0
    realized = 0.0
    wins = 0
    losses = 0
    for trade in trades:
        volume += trade_amount_usd(trade, policy)
        pnl = trade_pnl_usd(trade, policy)
        realized += pnl
        if pnl > 0:
            wins += 1
        elif pnl < 0:
            losses += 1

    decided = wins + losses
    return AggregateStats(
        net_worth=net_worth,
        unrealized_total=unrealized,
        realized_total=realized,
        total_pnl=unrealized + realized,
        volume=volume,
        win_rate=(wins / decided) if decided > 0 else 0.0,
        wins=wins,
        losses=losses,
        positions_count=len(positions),
        trades_count=len(trades),
    )


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def build_volume_series(
    trades: Sequence[dict],
    window_days: int = 14,
    today: Optional[date] = None,
    policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY,
) -> SeriesData:
    """
    Daily USD volume over a trailing window ending today.

    Always returns exactly `window_days` chronological, zero-filled entries.
    Trades without a usable timestamp or outside the window are skipped.
    """
    if window_days < 1:
        return SeriesData()

    end = today or _utc_today()
    days = [end - timedelta(days=offset) for offset in range(window_days - 1, -1, -1)]
    buckets: Dict[date, float] = OrderedDict((day, 0.0) for day in days)

    for trade in trades or []:
        day = parse_trade_date(trade_timestamp(trade))
        if day is None or day not in buckets:
            continue
        buckets[day] += trade_amount_usd(trade, policy)

    return SeriesData(
        labels=[format_day(day) for day in buckets],
        values=list(buckets.values()),
    )


def build_side_series(trades: Sequence[dict]) -> SideCounts:
    """Count trades by side label; unknown sides are not counted."""
    buy = 0
    sell = 0
    for trade in trades or []:
        side = normalized_side(trade)
        if side == "buy":
            buy += 1
        elif side == "sell":
            sell += 1
    return SideCounts(buy=buy, sell=sell)


_CATEGORY_PATTERNS = [
    (category, re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")\b"))
    for category, keywords in C.CATEGORY_KEYWORDS.items()
]


def classify_category(title: str) -> str:
    """Map a market title to Macro/Politics/Sports/Crypto, else "More"."""
    text = (title or "").lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return C.DEFAULT_CATEGORY


def build_category_series(positions: Sequence[dict]) -> SeriesData:
    """Position value grouped by keyword category, in first-seen order."""
    buckets: Dict[str, float] = OrderedDict()
    for position in positions or []:
        category = classify_category(position_category_title(position))
        buckets[category] = buckets.get(category, 0.0) + position_value(position)
    return SeriesData(labels=list(buckets.keys()), values=list(buckets.values()))


def build_root_market_series(positions: Sequence[dict], top_n: int = 5) -> SeriesData:
    """
    Position value grouped by literal root-market title.

    Keeps the top N groups by value (ties keep first-seen order) and collapses
    the remainder into a single "Other" bucket.
    """
    buckets: Dict[str, float] = OrderedDict()
    for position in positions or []:
        title = position_root_title(position) or position_title(position) or C.UNTITLED_BUCKET_LABEL
        buckets[title] = buckets.get(title, 0.0) + position_value(position)

    ranked = sorted(buckets.items(), key=lambda item: item[1], reverse=True)
    top_n = max(top_n, 0)
    kept = ranked[:top_n]
    rest = ranked[top_n:]

    labels = [title for title, _ in kept]
    values = [value for _, value in kept]
    if rest:
        labels.append(C.OTHER_BUCKET_LABEL)
        values.append(sum(value for _, value in rest))
    return SeriesData(labels=labels, values=values)
