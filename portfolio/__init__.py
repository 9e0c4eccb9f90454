"""Portfolio aggregation and normalization pipeline."""
from .normalizer import ApiResult, EnvelopeKind, detect_envelope, normalize_api, safe_list
from .extractors import TradeFieldPolicy, DEFAULT_TRADE_POLICY, trade_amount_usd, trade_pnl_usd, date_label
from .aggregator import (
    AggregateStats,
    SeriesData,
    SideCounts,
    compute_totals,
    build_volume_series,
    build_side_series,
    build_category_series,
    build_root_market_series,
    classify_category,
)
from .enrichment import MarketEnricher, distinct_market_ids, resolve_position_title

__all__ = [
    "ApiResult",
    "EnvelopeKind",
    "detect_envelope",
    "normalize_api",
    "safe_list",
    "TradeFieldPolicy",
    "DEFAULT_TRADE_POLICY",
    "trade_amount_usd",
    "trade_pnl_usd",
    "date_label",
    "AggregateStats",
    "SeriesData",
    "SideCounts",
    "compute_totals",
    "build_volume_series",
    "build_side_series",
    "build_category_series",
    "build_root_market_series",
    "classify_category",
    "MarketEnricher",
    "distinct_market_ids",
    "resolve_position_title",
]
