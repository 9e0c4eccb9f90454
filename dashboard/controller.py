"""
Dashboard controller: fetch -> normalize -> aggregate -> enrich -> state.

State machine:
- IDLE/SUCCESS/ERROR --submit(invalid)--> ERROR (no network calls)
- any --submit(valid)--> LOADING --> SUCCESS | ERROR

Positions and trades are fetched concurrently; a failed side degrades to an
empty list plus a warning notice. A repeat submission for an address joins its
in-flight load unless another submission came in between, and a result from
an older submission never replaces a newer one.
"""
import asyncio
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from config.settings import settings
from config.system_constants import EVM_ADDRESS_PATTERN, INVALID_ADDRESS_MESSAGE
from portfolio.aggregator import (
    build_category_series,
    build_root_market_series,
    build_side_series,
    build_volume_series,
    compute_totals,
)
from portfolio.enrichment import MarketEnricher
from portfolio.extractors import DEFAULT_TRADE_POLICY, TradeFieldPolicy
from portfolio.normalizer import ApiResult, safe_list
from .fetcher import PortfolioApiClient
from .state import ChartSeries, DashboardState, Notice, begin_loading, complete, fail

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(EVM_ADDRESS_PATTERN)

StateListener = Callable[[DashboardState], None]


class PartialDataError(Exception):
    """One side (positions or trades) failed while the other may have loaded"""

    def __init__(self, side: str, reason: Optional[str]):
        self.side = side
        self.reason = reason or "Request failed"
        super().__init__(f"{side.capitalize()} request failed: {self.reason}")


def is_valid_address(address: str) -> bool:
    return bool(_ADDRESS_RE.match(address or ""))


class DashboardController:
    """Owns the single DashboardState and drives every transition"""

    def __init__(
        self,
        api: PortfolioApiClient,
        enricher: Optional[MarketEnricher] = None,
        window_days: Optional[int] = None,
        top_n: Optional[int] = None,
        policy: TradeFieldPolicy = DEFAULT_TRADE_POLICY,
        on_change: Optional[StateListener] = None,
    ):
        self.api = api
        self.enricher = enricher or MarketEnricher(
            api.get_market,
            max_lookups=settings.ENRICHMENT_MAX_LOOKUPS,
            concurrency=settings.ENRICHMENT_CONCURRENCY,
        )
        self.window_days = settings.VOLUME_WINDOW_DAYS if window_days is None else window_days
        self.top_n = settings.CATEGORY_TOP_N if top_n is None else top_n
        self.policy = policy
        self.on_change = on_change

        self._state = DashboardState()
        self._generation = 0
        # address -> (load task, generation it was started under)
        self._in_flight: Dict[str, Tuple[asyncio.Task, int]] = {}

    @property
    def state(self) -> DashboardState:
        return self._state

    def _set_state(self, state: DashboardState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)

    def _apply(self, generation: int, state: DashboardState) -> bool:
        if generation != self._generation:
            logger.debug(f"Discarding stale result for {state.address} (generation {generation})")
            return False
        self._set_state(state)
        return True

    async def submit(self, address: str) -> DashboardState:
        """
        Load the portfolio for a wallet address.

        Args:
            address: EVM address (0x + 40 hex chars)

        Returns:
            The state produced by this submission
        """
        address = (address or "").strip()
        if not is_valid_address(address):
            self._generation += 1
            state = fail(DashboardState(address=address), INVALID_ADDRESS_MESSAGE)
            self._set_state(state)
            return state

        key = address.lower()
        existing = self._in_flight.get(key)
        if existing is not None:
            task, generation = existing
            # only a load that is still the latest submission can be joined
            if not task.done() and generation == self._generation:
                logger.debug(f"Joining in-flight load for {address}")
                return await asyncio.shield(task)

        self._generation += 1
        generation = self._generation
        task = asyncio.ensure_future(self._load(address, generation))
        self._in_flight[key] = (task, generation)
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._in_flight.get(key, (None, 0))[0] is task:
                del self._in_flight[key]

    async def refresh(self) -> DashboardState:
        """Re-run the last submitted address"""
        return await self.submit(self._state.address)

    async def _fetch_both(self, address: str) -> List[ApiResult]:
        results = await asyncio.gather(
            self.api.get_positions(address),
            self.api.get_trades(address),
            return_exceptions=True,
        )
        out = []
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                out.append(ApiResult.failure(str(result) or result.__class__.__name__))
            else:
                out.append(result)
        return out

    async def _enrich(self, positions: List[dict]) -> Dict[str, dict]:
        if not positions:
            return {}
        try:
            return await self.enricher.enrich(positions)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Market enrichment failed, using embedded titles: {e}")
            return {}

    async def _load(self, address: str, generation: int) -> DashboardState:
        loading = begin_loading(self._state, address)
        self._apply(generation, loading)

        try:
            positions_result, trades_result = await self._fetch_both(address)

            notices: List[Notice] = []
            positions: List[dict] = []
            trades: List[dict] = []

            if positions_result.ok:
                positions = safe_list(positions_result.result)
            else:
                notices.append(Notice.warn(str(PartialDataError("positions", positions_result.error))))

            if trades_result.ok:
                trades = safe_list(trades_result.result)
            else:
                notices.append(Notice.warn(str(PartialDataError("trades", trades_result.error))))

            stats = compute_totals(positions, trades, self.policy)
            charts = ChartSeries(
                volume=build_volume_series(trades, self.window_days, policy=self.policy),
                sides=build_side_series(trades),
                categories=build_category_series(positions),
                root_markets=build_root_market_series(positions, self.top_n),
            )
            markets = await self._enrich(positions)

            if positions_result.ok and trades_result.ok:
                notices.append(Notice.ok(f"Loaded {len(positions)} positions."))

            state = complete(loading, positions, trades, markets, stats, charts, notices)
            logger.info(
                f"Loaded {address}: {stats.positions_count} positions, {stats.trades_count} trades, "
                f"{len(markets)} markets enriched"
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error loading {address}: {e}", exc_info=True)
            state = fail(loading, f"Unexpected error: {e}")

        self._apply(generation, state)
        return state
