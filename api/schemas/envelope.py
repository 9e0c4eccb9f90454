"""
Pydantic schemas for proxy responses
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorEnvelope(BaseModel):
    """Failure body shared by every proxy endpoint ({code, msg} convention)"""
    model_config = ConfigDict(populate_by_name=True)

    code: int = -1
    msg: str
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    status: Optional[int] = Field(default=None, description="Upstream HTTP status, when relayed")
    body: Any = Field(default=None, description="Upstream body, when relayed")

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    timestamp: str
    upstream: str
    api_key_configured: bool
    environment: str
