"""
Opinion Portfolio Tracker - Field Policies and Tunables
Upstream schema drift is absorbed here: every alternate key name the
extractors probe is listed once, in priority order.
"""

# ============================================================================
# FIELD POLICY VERSION
# ============================================================================

# Bump when any candidate list below changes order or membership
FIELD_POLICY_VERSION = "2"


# ============================================================================
# TRADE FIELDS
# ============================================================================

# Explicit USD / quote-token amounts (highest priority)
TRADE_USD_AMOUNT_FIELDS = (
    "usdAmount",
    "amountUsd",
    "quoteAmountUsd",
    "quoteAmountUSD",
    "quoteAmount",
    "amountInQuoteToken",
)

# Generic amount/value/notional fields (second priority)
# `size` is a share quantity on Opinion trades and is deliberately not listed here
TRADE_GENERIC_AMOUNT_FIELDS = (
    "amount",
    "value",
    "totalValue",
    "total",
    "notional",
    "currentValueInQuoteToken",
)

# Share quantity and price used for the derived shares * price fallback
TRADE_SHARES_FIELDS = ("shares", "sharesOwned", "amountShares", "size", "filledSize")
TRADE_PRICE_FIELDS = ("price", "avgPrice", "avgEntryPrice")

# Realized profit/loss
TRADE_PNL_FIELDS = ("pnl", "profit", "realizedPnl", "realizedPnL", "profitUsd", "pnlUsd")

TRADE_SIDE_FIELDS = ("sideEnum", "side")
TRADE_TIMESTAMP_FIELDS = ("createdAt", "createTime", "timestamp", "time", "blockTime", "date")
TRADE_KEY_FIELDS = ("id", "txHash", "tradeNo")


# ============================================================================
# POSITION FIELDS
# ============================================================================

POSITION_MARKET_ID_FIELDS = ("marketId", "market_id", "topicId")
POSITION_SHARES_FIELDS = ("sharesOwned", "size", "shares")
POSITION_ENTRY_PRICE_FIELDS = ("avgEntryPrice", "entryPrice", "avgPrice")
POSITION_CURRENT_PRICE_FIELDS = ("currentPrice", "markPrice", "lastPrice")
POSITION_VALUE_FIELDS = ("currentValueInQuoteToken", "currentValue", "value")
POSITION_UNREALIZED_PNL_FIELDS = ("unrealizedPnl", "unrealizedPnL", "cashPnl")
POSITION_UNREALIZED_PCT_FIELDS = ("unrealizedPnlPercent", "unrealizedPnlPct")
POSITION_OUTCOME_FIELDS = ("outcomeSideEnum", "outcomeSide", "outcome")
POSITION_TITLE_FIELDS = ("marketTitle", "title")
POSITION_ROOT_TITLE_FIELDS = ("rootMarketTitle",)
POSITION_STATUS_FIELDS = ("marketStatusEnum", "marketStatus")

# Market detail title keys (enrichment results)
MARKET_TITLE_FIELDS = ("marketTitle", "title", "question", "name")


# ============================================================================
# TIMESTAMPS
# ============================================================================

# Numeric timestamps below this are seconds, at or above are milliseconds
EPOCH_MILLIS_THRESHOLD = 1e12

# Short chart label, e.g. "Oct 05"
DATE_LABEL_FORMAT = "%b %d"


# ============================================================================
# CATEGORY CLASSIFICATION
# ============================================================================

# Checked in order; first matching category wins
CATEGORY_KEYWORDS = {
    "Macro": ("fed", "rate", "cpi", "inflation", "gdp", "unemployment", "treasury", "macro", "etf", "sec"),
    "Politics": ("election", "president", "parliament", "vote", "trump", "biden", "zelensky", "putin", "politic", "politics", "political"),
    "Sports": ("nba", "nfl", "mlb", "nhl", "epl", "ucl", "world cup", "match", "game", "score", "team", "goal", "champion"),
    "Crypto": ("btc", "eth", "sol", "bnb", "crypto", "token", "airdrop", "fdv", "tvl", "market cap", "binance", "coinbase"),
}
DEFAULT_CATEGORY = "More"
OTHER_BUCKET_LABEL = "Other"
UNTITLED_BUCKET_LABEL = "Untitled"


# ============================================================================
# ADDRESSES / ENDPOINTS
# ============================================================================

EVM_ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

INVALID_RESPONSE_MESSAGE = "Invalid response"
REQUEST_FAILED_MESSAGE = "Request failed"
INVALID_ADDRESS_MESSAGE = "Please enter a valid EVM address (0x…40 hex chars)."
