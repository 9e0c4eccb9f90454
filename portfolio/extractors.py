"""
Field extractors for loosely-typed position and trade records.

Every extractor reads one record and probes an ordered list of alternate key
names (see config.system_constants). Nothing here raises on bad input: a
missing or unparseable field resolves to 0, None or "".
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Optional, Sequence

from config import system_constants as C


@dataclass(frozen=True)
class TradeFieldPolicy:
    """Candidate-priority policy for trade volume and PnL"""
    usd_amount_fields: Sequence[str] = C.TRADE_USD_AMOUNT_FIELDS
    generic_amount_fields: Sequence[str] = C.TRADE_GENERIC_AMOUNT_FIELDS
    shares_fields: Sequence[str] = C.TRADE_SHARES_FIELDS
    price_fields: Sequence[str] = C.TRADE_PRICE_FIELDS
    pnl_fields: Sequence[str] = C.TRADE_PNL_FIELDS
    version: str = C.FIELD_POLICY_VERSION


DEFAULT_TRADE_POLICY = TradeFieldPolicy()


# =============================================================================
# Primitive coercion
# =============================================================================

def to_number(value: Any) -> Optional[float]:
    """Parse a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def number_or_zero(value: Any) -> float:
    number = to_number(value)
    return number if number is not None else 0.0


def first_number(record: Dict[str, Any], fields: Iterable[str], allow_zero: bool = False) -> Optional[float]:
    """
    First candidate that parses to a finite number.

    Args:
        record: Upstream record
        fields: Candidate keys in priority order
        allow_zero: Accept 0 as a resolved value (amount-like fields skip it)
    """
    for field in fields:
        number = to_number(record.get(field))
        if number is None:
            continue
        if number == 0 and not allow_zero:
            continue
        return number
    return None


def first_value(record: Dict[str, Any], fields: Iterable[str]) -> Any:
    """First candidate that is present and not empty."""
    for field in fields:
        value = record.get(field)
        if value is not None and value != "":
            return value
    return None


def first_text(record: Dict[str, Any], fields: Iterable[str]) -> str:
    value = first_value(record, fields)
    return str(value).strip() if value is not None else ""


# =============================================================================
# Trades
# =============================================================================

def trade_amount_usd(trade: Dict[str, Any], policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY) -> float:
    """
    USD size of a trade.

    Explicit USD/quote fields first, then generic amount/value fields, then
    shares * price. Always non-negative; 0 when nothing resolves.
    """
    amount = first_number(trade, policy.usd_amount_fields)
    if amount is None:
        amount = first_number(trade, policy.generic_amount_fields)
    if amount is None:
        shares = first_number(trade, policy.shares_fields)
        price = first_number(trade, policy.price_fields)
        if shares is not None and price is not None:
            amount = shares * price
    return abs(amount) if amount is not None else 0.0


def trade_pnl_usd(trade: Dict[str, Any], policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY) -> float:
    """Realized PnL: first finite non-zero candidate, else 0."""
    pnl = first_number(trade, policy.pnl_fields)
    return pnl if pnl is not None else 0.0


def trade_price(trade: Dict[str, Any], policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY) -> Optional[float]:
    return first_number(trade, policy.price_fields, allow_zero=True)


def trade_side(trade: Dict[str, Any]) -> str:
    """Raw side label as sent upstream ("BUY", "Sell", ...)."""
    return first_text(trade, C.TRADE_SIDE_FIELDS)


def normalized_side(trade: Dict[str, Any]) -> Optional[str]:
    """"buy", "sell" or None (case-insensitive substring match)."""
    side = trade_side(trade).lower()
    if "buy" in side:
        return "buy"
    if "sell" in side:
        return "sell"
    return None


def trade_timestamp(trade: Dict[str, Any]) -> Any:
    return first_value(trade, C.TRADE_TIMESTAMP_FIELDS)


def normalize_trade(trade: Dict[str, Any], policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY) -> Dict[str, Any]:
    """Canonical trade dict; feeding it back to the extractors is a no-op."""
    return {
        "usdAmount": trade_amount_usd(trade, policy),
        "pnl": trade_pnl_usd(trade, policy),
        "side": trade_side(trade),
        "price": trade_price(trade, policy),
        "timestamp": trade_timestamp(trade),
    }


# =============================================================================
# Timestamps
# =============================================================================

def parse_trade_date(ts: Any) -> Optional[date]:
    """
    Calendar day (UTC) of a timestamp.

    Accepts ISO date strings, epoch seconds and epoch milliseconds (values
    below 10^12 are seconds). Returns None for anything unusable.
    """
    if ts is None or isinstance(ts, bool):
        return None

    if isinstance(ts, str) and "-" in ts:
        try:
            parsed = datetime.fromisoformat(ts.strip().replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone(timezone.utc)
            return parsed.date()

    number = to_number(ts)
    if number is None:
        return None
    millis = number if number >= C.EPOCH_MILLIS_THRESHOLD else number * 1000
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def format_day(day: date) -> str:
    return day.strftime(C.DATE_LABEL_FORMAT)


def date_label(ts: Any) -> str:
    """Short day label ("Oct 05"), or "" for invalid/missing timestamps."""
    day = parse_trade_date(ts)
    return format_day(day) if day else ""


# =============================================================================
# Positions
# =============================================================================

def position_market_id(position: Dict[str, Any]) -> Optional[str]:
    value = first_value(position, C.POSITION_MARKET_ID_FIELDS)
    return str(value) if value is not None else None


def position_shares(position: Dict[str, Any]) -> float:
    return number_or_zero(first_number(position, C.POSITION_SHARES_FIELDS))


def position_entry_price(position: Dict[str, Any]) -> float:
    return number_or_zero(first_number(position, C.POSITION_ENTRY_PRICE_FIELDS))


def position_current_price(position: Dict[str, Any]) -> Optional[float]:
    return first_number(position, C.POSITION_CURRENT_PRICE_FIELDS, allow_zero=True)


def position_value(position: Dict[str, Any]) -> float:
    """Mark-to-market value: reported value, else shares * currentPrice, else 0."""
    value = first_number(position, C.POSITION_VALUE_FIELDS, allow_zero=True)
    if value is not None:
        return value
    price = position_current_price(position)
    if price is None:
        return 0.0
    return position_shares(position) * price


def position_unrealized_pnl(position: Dict[str, Any]) -> float:
    """Reported unrealized PnL, else shares * (currentPrice - entryPrice), else 0."""
    pnl = first_number(position, C.POSITION_UNREALIZED_PNL_FIELDS, allow_zero=True)
    if pnl is not None:
        return pnl
    price = position_current_price(position)
    entry = first_number(position, C.POSITION_ENTRY_PRICE_FIELDS)
    if price is None or entry is None:
        return 0.0
    return position_shares(position) * (price - entry)


def position_unrealized_pnl_percent(position: Dict[str, Any]) -> Optional[float]:
    """Unrealized PnL as a fraction of cost basis; None when cost basis is 0."""
    pct = first_number(position, C.POSITION_UNREALIZED_PCT_FIELDS, allow_zero=True)
    if pct is not None:
        return pct
    cost = position_shares(position) * position_entry_price(position)
    if cost == 0:
        return None
    return position_unrealized_pnl(position) / cost


def position_outcome(position: Dict[str, Any]) -> str:
    return first_text(position, C.POSITION_OUTCOME_FIELDS)


def position_status(position: Dict[str, Any]) -> str:
    return first_text(position, C.POSITION_STATUS_FIELDS)


def position_title(position: Dict[str, Any]) -> str:
    return first_text(position, C.POSITION_TITLE_FIELDS)


def position_root_title(position: Dict[str, Any]) -> str:
    return first_text(position, C.POSITION_ROOT_TITLE_FIELDS)


def position_category_title(position: Dict[str, Any]) -> str:
    """Title used for category classification: root market first."""
    return position_root_title(position) or position_title(position)
