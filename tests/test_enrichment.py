"""Tests for bounded market enrichment."""

import asyncio

import pytest

from portfolio.enrichment import MarketEnricher, distinct_market_ids, resolve_position_title
from portfolio.normalizer import ApiResult


class RecordingLookup:
    """Async market lookup that records calls and concurrency."""

    def __init__(self, fail_ids=(), raise_ids=()):
        self.calls = []
        self.fail_ids = set(fail_ids)
        self.raise_ids = set(raise_ids)
        self.active = 0
        self.peak = 0

    async def __call__(self, market_id):
        self.calls.append(market_id)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(0)
            if market_id in self.raise_ids:
                raise RuntimeError("boom")
            if market_id in self.fail_ids:
                return ApiResult.failure("not found")
            return ApiResult(ok=True, result={"marketTitle": f"Enriched {market_id}"})
        finally:
            self.active -= 1


def _positions(count):
    return [{"marketId": i, "marketTitle": f"Own {i}"} for i in range(1, count + 1)]


class TestMarketEnricher:
    """Bound, concurrency and failure handling."""

    def test_bound_limits_lookups(self):
        lookup = RecordingLookup()
        positions = _positions(25)
        markets = asyncio.run(MarketEnricher(lookup, max_lookups=20).enrich(positions))

        assert len(lookup.calls) == 20
        assert lookup.calls == [str(i) for i in range(1, 21)]
        assert len(markets) == 20

        titles = [resolve_position_title(p, markets) for p in positions]
        assert titles[:20] == [f"Enriched {i}" for i in range(1, 21)]
        assert titles[20:] == [f"Own {i}" for i in range(21, 26)]

    def test_sequential_by_default(self):
        lookup = RecordingLookup()
        asyncio.run(MarketEnricher(lookup).enrich(_positions(5)))
        assert lookup.peak == 1

    def test_configurable_concurrency(self):
        lookup = RecordingLookup()
        asyncio.run(MarketEnricher(lookup, concurrency=3).enrich(_positions(6)))
        assert 1 < lookup.peak <= 3

    def test_failures_are_skipped(self):
        lookup = RecordingLookup(fail_ids={"2"}, raise_ids={"3"})
        markets = asyncio.run(MarketEnricher(lookup).enrich(_positions(4)))
        assert set(markets) == {"1", "4"}
        assert lookup.calls == ["1", "2", "3", "4"]

    def test_duplicate_ids_resolved_once(self):
        lookup = RecordingLookup()
        positions = [{"marketId": 7}, {"marketId": "7"}, {"marketId": 8}, {}]
        asyncio.run(MarketEnricher(lookup).enrich(positions))
        assert lookup.calls == ["7", "8"]

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            MarketEnricher(RecordingLookup(), concurrency=0)


class TestTitleResolution:
    def test_fallback_chain(self):
        assert resolve_position_title({"marketId": 1, "marketTitle": "Own"}, {"1": {"title": "Rich"}}) == "Rich"
        assert resolve_position_title({"marketId": 1, "marketTitle": "Own"}, {}) == "Own"
        assert resolve_position_title({"marketId": 1, "rootMarketTitle": "Root"}, {}) == "Root"
        assert resolve_position_title({"marketId": 9}, {}) == "Market #9"
        assert resolve_position_title({}, {}) == "Unknown market"

    def test_distinct_ids_preserve_order(self):
        positions = [{"marketId": 3}, {"topicId": 1}, {"marketId": 3}, {"market_id": 2}]
        assert distinct_market_ids(positions) == ["3", "1", "2"]
