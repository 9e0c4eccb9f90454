"""
Market detail proxy endpoint
"""
import logging
from typing import Optional
from fastapi import APIRouter, Query

from api.dependencies import OpinionClientDep
from api.exceptions import MissingParameterError
from api.schemas.envelope import ErrorEnvelope
from api.upstream import relay

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["market"])


@router.get("/market", responses={400: {"model": ErrorEnvelope}, 502: {"model": ErrorEnvelope}})
async def get_market(
    opinion_client: OpinionClientDep,
    id: Optional[str] = Query(None, description="Opinion market ID"),
):
    """Get market detail by ID (binary first, categorical fallback)"""
    if id is None or not id.strip():
        raise MissingParameterError("Market ID is required")
    return await relay(opinion_client.get_market(id.strip()), f"market {id}")
