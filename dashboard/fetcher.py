"""
Dashboard-side client for the proxy endpoints.

Every call resolves to an ApiResult; transport failures and unreadable
bodies become ok=False results instead of exceptions.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import settings
from portfolio.normalizer import ApiResult, normalize_api

logger = logging.getLogger(__name__)


def _status_message(status_code: int, payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("msg", "message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {status_code}"


class PortfolioApiClient:
    """Async client for /positions, /trades and /market on the proxy"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.DASHBOARD_API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResult:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {e}")
            return ApiResult.failure(str(e) or e.__class__.__name__)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        result = normalize_api(payload)

        # a non-2xx body without an errno/code envelope is still a failure
        if result.ok and not response.is_success:
            logger.warning(f"Request to {url} returned {response.status_code}")
            return ApiResult.failure(_status_message(response.status_code, payload))
        return result

    async def get_positions(self, address: str, page: int = 1, limit: Optional[int] = None) -> ApiResult:
        return await self.get("/positions", {"address": address, "page": page, **({"limit": limit} if limit else {})})

    async def get_trades(self, address: str, page: int = 1, limit: Optional[int] = None) -> ApiResult:
        return await self.get("/trades", {"address": address, "page": page, **({"limit": limit} if limit else {})})

    async def get_market(self, market_id: str) -> ApiResult:
        return await self.get("/market", {"id": market_id})
