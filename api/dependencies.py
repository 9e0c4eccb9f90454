"""
FastAPI Dependencies
Shared dependencies for dependency injection
"""
import logging
import re
from typing import Annotated, Optional

from fastapi import Depends, Query
from api.exceptions import InvalidAddressError, MissingParameterError
from clients.opinion import OpinionClient
from config.settings import settings
from config.system_constants import EVM_ADDRESS_PATTERN

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(EVM_ADDRESS_PATTERN)

# Global instances (initialized on startup)
_opinion_client: Optional[OpinionClient] = None


def initialize_dependencies():
    """Initialize all dependencies (called on startup)"""
    global _opinion_client

    logger.info("Initializing API dependencies...")

    validation = settings.validate_upstream_config()
    for warning in validation["warnings"]:
        logger.warning(warning)
    for error in validation["errors"]:
        logger.error(error)

    _opinion_client = OpinionClient()

    logger.info(f"API dependencies initialized. Upstream: {_opinion_client.base_url}")


def cleanup_dependencies():
    """Cleanup dependencies (called on shutdown)"""
    global _opinion_client
    logger.info("Cleaning up API dependencies...")
    _opinion_client = None


def get_opinion_client() -> OpinionClient:
    """Get Opinion API client instance"""
    if _opinion_client is None:
        raise RuntimeError("Dependencies not initialized. Call initialize_dependencies() first.")
    return _opinion_client


# Dependency injection annotations
OpinionClientDep = Annotated[OpinionClient, Depends(get_opinion_client)]


def require_wallet_address(address: Optional[str] = Query(None, description="Wallet address (0x...)")) -> str:
    """Validate the `address` query parameter before anything reaches upstream"""
    if address is None or not address.strip():
        raise MissingParameterError("Address is required")
    address = address.strip()
    if not _ADDRESS_RE.match(address):
        raise InvalidAddressError(address)
    return address


WalletAddressDep = Annotated[str, Depends(require_wallet_address)]
