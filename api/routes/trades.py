"""
User trades proxy endpoint
"""
import logging
from typing import Optional
from fastapi import APIRouter, Query

from api.dependencies import OpinionClientDep, WalletAddressDep
from api.schemas.envelope import ErrorEnvelope
from api.upstream import relay
from config.settings import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["trades"])


@router.get("/trades", responses={400: {"model": ErrorEnvelope}, 502: {"model": ErrorEnvelope}})
async def get_trades(
    address: WalletAddressDep,
    opinion_client: OpinionClientDep,
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_LIMIT, description="Page size"),
):
    """Get a wallet's trade history"""
    return await relay(
        opinion_client.get_trades(address, page=page, limit=limit or settings.TRADES_DEFAULT_LIMIT),
        f"trades {address}",
    )
