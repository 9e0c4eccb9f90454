"""
Upstream call translation shared by the proxy routes
"""
import logging
from typing import Any, Awaitable

from api.exceptions import UpstreamRequestError, UpstreamUnavailableError
from clients.opinion import TransportError, UpstreamError

logger = logging.getLogger(__name__)


async def relay(call: Awaitable[Any], label: str) -> Any:
    """Await an upstream call, mapping client errors onto API exceptions"""
    try:
        return await call
    except UpstreamError as e:
        logger.warning(f"{label}: upstream returned {e.status_code}")
        raise UpstreamRequestError(e.status_code, e.body)
    except TransportError as e:
        logger.error(f"{label}: upstream unreachable: {e}")
        raise UpstreamUnavailableError(str(e))
