"""
Opinion Protocol API Client
OpenAPI endpoints for market detail, user positions and user trades.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)


# Exceptions
class OpinionError(Exception):
    pass


class UpstreamError(OpinionError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Any):
        super().__init__(f"Upstream returned {status_code}")
        self.status_code = status_code
        self.body = body


class TransportError(OpinionError):
    """Upstream could not be reached."""
    pass


@dataclass
class UpstreamResponse:
    """Status code plus parsed body (non-JSON bodies become {"raw": text})"""
    status_code: int
    body: Any
    malformed: bool = False

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300 and not self.malformed

    @property
    def reports_failure(self) -> bool:
        """True when a 2xx body carries a non-zero errno/code."""
        if not isinstance(self.body, dict):
            return False
        for key in ("errno", "code"):
            if key in self.body:
                return self.body[key] != 0
        return False


class OpinionClient:
    """Async client for the Opinion OpenAPI"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        api_key_header: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.OPINION_API_URL).rstrip("/")
        self.api_key = settings.resolved_api_key if api_key is None else api_key
        self.api_key_header = api_key_header or settings.OPINION_API_KEY_HEADER
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

        if not self.api_key:
            logger.warning("Opinion API key not configured - upstream may reject requests")

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[self.api_key_header] = self.api_key
        return headers

    async def fetch_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> UpstreamResponse:
        """
        GET a path below the base URL.

        Args:
            path: Path relative to the OpenAPI root, e.g. "/market/123"
            params: Query parameters

        Returns:
            UpstreamResponse with status and parsed body

        Raises:
            TransportError: If the upstream cannot be reached
        """
        url = f"{self.base_url}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=query, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Transport error for {url}: {e}")
            raise TransportError(str(e) or e.__class__.__name__) from e

        text = response.text
        try:
            return UpstreamResponse(status_code=response.status_code, body=json.loads(text))
        except ValueError:
            return UpstreamResponse(status_code=response.status_code, body={"raw": text}, malformed=True)

    @staticmethod
    def _raise_for_upstream(path: str, upstream: UpstreamResponse) -> None:
        if upstream.is_success:
            return
        # a 2xx that is not JSON is still an upstream failure
        status = upstream.status_code if upstream.status_code >= 300 else 502
        logger.warning(f"Upstream {path} returned {upstream.status_code} (malformed={upstream.malformed})")
        raise UpstreamError(status, upstream.body)

    async def _get_checked(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        upstream = await self.fetch_json(path, params)
        self._raise_for_upstream(path, upstream)
        return upstream.body

    async def get_market(self, market_id: str) -> Any:
        """
        Get market detail, falling back to the categorical endpoint.

        The categorical lookup is tried once when the primary body reports a
        non-zero errno/code; the primary body is kept if the fallback fails.
        """
        logger.info(f"Fetching market data for ID: {market_id}")
        safe_id = quote(str(market_id), safe="")
        path = f"/market/{safe_id}"
        primary = await self.fetch_json(path)
        self._raise_for_upstream(path, primary)

        if not primary.reports_failure:
            return primary.body

        logger.info(f"Market {market_id} not found as binary market, trying categorical")
        try:
            fallback = await self.fetch_json(f"/market/categorical/{safe_id}")
        except TransportError as e:
            logger.warning(f"Categorical fallback for {market_id} failed: {e}")
            return primary.body

        if fallback.is_success and not fallback.reports_failure:
            return fallback.body
        return primary.body

    async def get_positions(self, address: str, page: int = 1, limit: Optional[int] = None) -> Any:
        """Get a wallet's open positions (single page)"""
        logger.info(f"Fetching positions for address: {address}")
        return await self._get_checked(
            f"/positions/user/{address}",
            {"page": page, "limit": limit or settings.POSITIONS_DEFAULT_LIMIT},
        )

    async def get_trades(self, address: str, page: int = 1, limit: Optional[int] = None) -> Any:
        """Get a wallet's trade history (single page)"""
        logger.info(f"Fetching trades for address: {address}")
        return await self._get_checked(
            f"/trade/user/{address}",
            {"page": page, "limit": limit or settings.TRADES_DEFAULT_LIMIT},
        )
