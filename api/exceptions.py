"""
Custom API Exceptions
"""
from fastapi import HTTPException
from typing import Any, Dict, Optional


class APIException(HTTPException):
    """Base API exception"""
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.extra = extra or {}


class MissingParameterError(APIException):
    """Required query parameter missing"""
    def __init__(self, message: str):
        super().__init__(
            status_code=400,
            detail=message,
            error_code="MISSING_PARAMETER"
        )


class InvalidAddressError(APIException):
    """Wallet address failed validation"""
    def __init__(self, address: str):
        super().__init__(
            status_code=400,
            detail=f"Invalid wallet address: {address}",
            error_code="INVALID_ADDRESS"
        )


class UpstreamRequestError(APIException):
    """Upstream answered with a non-2xx status or an unreadable body"""
    def __init__(self, status_code: int, body: Any):
        super().__init__(
            status_code=status_code if 400 <= status_code < 600 else 502,
            detail=f"Upstream request failed with status {status_code}",
            error_code="UPSTREAM_ERROR",
            extra={"status": status_code, "body": body}
        )


class UpstreamUnavailableError(APIException):
    """Upstream could not be reached"""
    def __init__(self, reason: str):
        super().__init__(
            status_code=502,
            detail=f"Upstream unavailable: {reason}",
            error_code="UPSTREAM_UNAVAILABLE"
        )
