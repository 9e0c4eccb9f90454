"""
User positions proxy endpoint
"""
import logging
from typing import Optional
from fastapi import APIRouter, Query

from api.dependencies import OpinionClientDep, WalletAddressDep
from api.schemas.envelope import ErrorEnvelope
from api.upstream import relay
from config.settings import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["positions"])


@router.get("/positions", responses={400: {"model": ErrorEnvelope}, 502: {"model": ErrorEnvelope}})
async def get_positions(
    address: WalletAddressDep,
    opinion_client: OpinionClientDep,
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_LIMIT, description="Page size"),
):
    """Get a wallet's open positions"""
    return await relay(
        opinion_client.get_positions(address, page=page, limit=limit or settings.POSITIONS_DEFAULT_LIMIT),
        f"positions {address}",
    )
