"""
View model for the dashboard: table rows, KPI cards and chart series as
plain display strings, independent of the terminal renderer.
"""
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from config import system_constants as C
from config.settings import settings
from portfolio.aggregator import SeriesData
from portfolio.enrichment import resolve_position_title
from portfolio.extractors import (
    DEFAULT_TRADE_POLICY,
    TradeFieldPolicy,
    date_label,
    first_value,
    position_entry_price,
    position_market_id,
    position_outcome,
    position_root_title,
    position_shares,
    position_status,
    position_unrealized_pnl,
    position_unrealized_pnl_percent,
    position_value,
    to_number,
    trade_amount_usd,
    trade_pnl_usd,
    trade_price,
    trade_side,
    trade_timestamp,
)
from .state import DashboardState

PLACEHOLDER = "—"
NO_DATA_LABEL = "No data"


def fmt_usd(value: Any, digits: int = 2) -> str:
    """Currency string; non-finite input renders as $0.00, |x| >= 1000 drops cents."""
    x = to_number(value)
    if x is None:
        return "$0.00"
    d = 0 if abs(x) >= 1000 else digits
    text = f"${abs(x):,.{d}f}"
    return f"-{text}" if x < 0 else text


def fmt_num(value: Any, digits: int = 6) -> str:
    x = to_number(value)
    if x is None:
        return "0"
    text = f"{x:,.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def fmt_price(value: Optional[float]) -> str:
    if value is None or not math.isfinite(value):
        return PLACEHOLDER
    return f"{value:.5f} $"


def fmt_pct(ratio: Optional[float]) -> str:
    if ratio is None or not math.isfinite(ratio):
        return PLACEHOLDER
    return f"{ratio * 100:.2f}%"


@dataclass(frozen=True)
class PositionRow:
    key: str
    title: str
    meta: str
    root_title: str
    shares: str
    avg_entry: str
    value: str
    unrealized: str
    unrealized_pct: str
    positive: bool


@dataclass(frozen=True)
class TradeRow:
    key: str
    date: str
    side: str
    price: str
    amount: str
    pnl: str
    pnl_sign: int


@dataclass(frozen=True)
class KpiCard:
    label: str
    value: str
    sub: str
    tone: str = ""


def position_meta(position: Dict[str, Any]) -> str:
    """'<outcome> • <status>', trimmed; placeholder when both are empty."""
    meta = f"{position_outcome(position)} • {position_status(position)}".strip()
    return meta if meta != "•" else PLACEHOLDER


def position_rows(positions, markets: Dict[str, dict]) -> List[PositionRow]:
    rows = []
    for position in positions or []:
        upnl = position_unrealized_pnl(position)
        avg = position_entry_price(position)
        key = f"{position_market_id(position) or ''}{position.get('tokenId') or ''}"
        rows.append(PositionRow(
            key=key,
            title=resolve_position_title(position, markets),
            meta=position_meta(position),
            root_title=position_root_title(position),
            shares=fmt_num(position_shares(position), 6),
            avg_entry=fmt_price(avg) if avg else PLACEHOLDER,
            value=fmt_usd(position_value(position)),
            unrealized=fmt_usd(upnl),
            unrealized_pct=fmt_pct(position_unrealized_pnl_percent(position)),
            positive=upnl >= 0,
        ))
    return rows


def trade_rows(
    trades,
    limit: Optional[int] = None,
    policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY,
) -> List[TradeRow]:
    """Rows for the most recent trades, in upstream order."""
    limit = settings.RECENT_TRADES_ROWS if limit is None else limit
    rows = []
    for idx, trade in enumerate(list(trades or [])[:limit]):
        amount = trade_amount_usd(trade, policy)
        pnl = trade_pnl_usd(trade, policy)
        key = first_value(trade, C.TRADE_KEY_FIELDS)
        rows.append(TradeRow(
            key=str(key) if key is not None else str(idx),
            date=date_label(trade_timestamp(trade)) or PLACEHOLDER,
            side=trade_side(trade) or PLACEHOLDER,
            price=fmt_price(trade_price(trade, policy)),
            amount=fmt_usd(amount) if amount else PLACEHOLDER,
            pnl=fmt_usd(pnl) if pnl else PLACEHOLDER,
            pnl_sign=(pnl > 0) - (pnl < 0),
        ))
    return rows


def kpi_cards(state: DashboardState) -> List[KpiCard]:
    stats = state.stats
    return [
        KpiCard("Total net worth", fmt_usd(stats.net_worth), f"{stats.positions_count} positions"),
        KpiCard(
            "Total PnL (est.)",
            fmt_usd(stats.total_pnl),
            "Unrealized + realized (if available)",
            tone="green" if stats.total_pnl >= 0 else "red",
        ),
        KpiCard("Total volume", fmt_usd(stats.volume), f"{stats.trades_count} trades"),
        KpiCard("Win rate", f"{stats.win_rate * 100:.1f}%", "Based on realized trade PnL"),
    ]


def category_chart(series: SeriesData) -> SeriesData:
    """Category series with a single zero "No data" slice when empty."""
    if series.labels:
        return series
    return SeriesData(labels=[NO_DATA_LABEL], values=[0.0])


def build_view(state: DashboardState, trade_limit: Optional[int] = None) -> Dict[str, Any]:
    """Whole dashboard as JSON-ready data (used by `--json`)."""
    charts = state.charts
    notice = state.notice
    return {
        "address": state.address,
        "status": state.status.value,
        "error": state.error,
        "notice": {"type": notice.kind.value, "text": notice.text} if notice else None,
        "stats": state.stats.to_dict(),
        "kpis": [asdict(card) for card in kpi_cards(state)],
        "charts": {
            "volume": charts.volume.to_dict(),
            "sides": charts.sides.to_dict(),
            "categories": category_chart(charts.categories).to_dict(),
            "rootMarkets": charts.root_markets.to_dict(),
        },
        "positions": [asdict(row) for row in position_rows(state.positions, state.markets)],
        "trades": [asdict(row) for row in trade_rows(state.trades, trade_limit)],
    }
