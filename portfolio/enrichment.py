"""
Market enrichment: resolve position market ids to market metadata.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from config import system_constants as C
from .extractors import first_text, position_market_id, position_root_title, position_title
from .normalizer import ApiResult

logger = logging.getLogger(__name__)

MarketLookup = Callable[[str], Awaitable[ApiResult]]


def distinct_market_ids(positions: Sequence[dict]) -> List[str]:
    """Market ids in first-seen order, without duplicates or blanks."""
    seen: Dict[str, None] = {}
    for position in positions or []:
        market_id = position_market_id(position)
        if market_id and market_id not in seen:
            seen[market_id] = None
    return list(seen)


class MarketEnricher:
    """
    Bounded best-effort market lookups.

    At most `max_lookups` distinct ids are resolved, `concurrency` at a time
    (1 by default, i.e. strictly sequential). Failed lookups are skipped and
    ids past the bound are never requested.
    """

    def __init__(self, lookup: MarketLookup, max_lookups: int = 20, concurrency: int = 1):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.lookup = lookup
        self.max_lookups = max(max_lookups, 0)
        self.concurrency = concurrency

    async def _resolve(self, market_id: str, semaphore: asyncio.Semaphore) -> Optional[Any]:
        async with semaphore:
            try:
                result = await self.lookup(market_id)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug(f"Market lookup for {market_id} raised: {e}")
                return None
        if not result.ok or not isinstance(result.result, dict):
            logger.debug(f"Market lookup for {market_id} failed: {result.error}")
            return None
        return result.result

    async def enrich(self, positions: Sequence[dict]) -> Dict[str, dict]:
        """
        Resolve market metadata for the positions' markets.

        Args:
            positions: Position records

        Returns:
            Mapping market id -> market detail for successful lookups only
        """
        market_ids = distinct_market_ids(positions)
        selected = market_ids[: self.max_lookups]
        if len(market_ids) > len(selected):
            logger.info(f"Enriching {len(selected)} of {len(market_ids)} markets (bound={self.max_lookups})")

        semaphore = asyncio.Semaphore(self.concurrency)
        tasks = [asyncio.ensure_future(self._resolve(mid, semaphore)) for mid in selected]
        try:
            details = await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        return {mid: detail for mid, detail in zip(selected, details) if detail is not None}


def market_title(market: Optional[dict]) -> str:
    if not market:
        return ""
    return first_text(market, C.MARKET_TITLE_FIELDS)


def resolve_position_title(position: dict, markets: Dict[str, dict]) -> str:
    """Enriched market title, else the position's own title, else "Market #<id>"."""
    market_id = position_market_id(position)
    title = market_title(markets.get(market_id)) if market_id else ""
    if title:
        return title
    title = position_title(position) or position_root_title(position)
    if title:
        return title
    return f"Market #{market_id}" if market_id else "Unknown market"
